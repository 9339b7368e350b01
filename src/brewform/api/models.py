"""Request payloads accepted by the HTTP API."""

from uuid import UUID

from pydantic import BaseModel, Field

from brewform.domain.recipes import RecipeVersionInput, Visibility


class CreateRecipeRequest(RecipeVersionInput):
    """First version of a new recipe plus its initial visibility."""

    visibility: Visibility = Visibility.DRAFT

    def version_input(self) -> RecipeVersionInput:
        return RecipeVersionInput.model_validate(
            self.model_dump(exclude={"visibility"})
        )


class CommentRequest(BaseModel):
    content: str = Field(max_length=2000)
    parent_id: UUID | None = None


class CommentUpdateRequest(BaseModel):
    content: str = Field(max_length=2000)


class ComparisonRequest(BaseModel):
    recipe_a_id: UUID
    recipe_b_id: UUID
