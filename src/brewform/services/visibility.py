"""Access-control predicates for recipes."""

from uuid import UUID

from brewform.domain.recipes import RESTRICTED_VISIBILITIES, Recipe, Visibility

_DIRECTLY_VIEWABLE = frozenset({Visibility.PUBLIC, Visibility.UNLISTED})
_ALL_VISIBILITIES = frozenset(Visibility)


def is_owner(recipe: Recipe, viewer_id: UUID | None) -> bool:
    """Return True when the viewer owns the recipe."""
    return viewer_id is not None and viewer_id == recipe.user_id


def can_view(recipe: Recipe, viewer_id: UUID | None) -> bool:
    """Return True when the viewer may open the recipe by id or slug.

    Unlisted recipes are reachable by direct reference but never listed.
    """
    return recipe.visibility in _DIRECTLY_VIEWABLE or is_owner(recipe, viewer_id)


def can_mutate(recipe: Recipe, viewer_id: UUID | None, *, social: bool = False) -> bool:
    """Return True when the viewer may act on the recipe.

    Writes require ownership. Social actions (favourites, comments) only
    require a visible recipe outside the draft/private states.
    """
    if social:
        return (
            can_view(recipe, viewer_id)
            and recipe.visibility not in RESTRICTED_VISIBILITIES
        )
    return is_owner(recipe, viewer_id)


def is_forkable(recipe: Recipe) -> bool:
    """Return True when the recipe may be used as a fork source."""
    return recipe.visibility not in RESTRICTED_VISIBILITIES


def listable_visibilities(
    owner_id: UUID | None,
    requested: Visibility | None,
    viewer_id: UUID | None,
) -> frozenset[Visibility]:
    """Return the visibility states a list query may include."""
    own_content = owner_id is not None and owner_id == viewer_id
    allowed = _ALL_VISIBILITIES if own_content else frozenset({Visibility.PUBLIC})
    if requested is None:
        return allowed
    return allowed & {requested}
