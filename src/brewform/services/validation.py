"""Two-tier brew validation.

Hard rules block a save and come back as field errors. Soft rules only
produce advisory warnings. Every rule runs on every call so a client can
show the full picture in one round trip.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from brewform.domain.brewing import (
    MILK_DRINKS,
    TYPICAL_EXTRACTION_TIMES,
    TYPICAL_RATIOS,
    TYPICAL_TEMPERATURES,
    is_brew_method_compatible,
)
from brewform.domain.errors import FieldError
from brewform.domain.recipes import BrewMethod, RecipeVersionInput

_SECONDS_PER_HOUR = 3600
_SECONDS_PER_MINUTE = 60


@dataclass(frozen=True)
class ValidationResult:
    """Combined outcome of hard and soft validation."""

    errors: list[FieldError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_hard(candidate: RecipeVersionInput) -> list[FieldError]:
    """Return rule violations that must block a save."""
    errors: list[FieldError] = []

    if not is_brew_method_compatible(candidate.brew_method, candidate.drink_type):
        errors.append(
            FieldError(
                field="drink_type",
                message=(
                    f"{candidate.drink_type.value} cannot be made with "
                    f"{candidate.brew_method.value}. "
                    "Please choose a compatible brew method."
                ),
            )
        )

    if (
        candidate.roast_date is not None
        and candidate.grind_date is not None
        and candidate.grind_date < candidate.roast_date
    ):
        errors.append(
            FieldError(
                field="grind_date",
                message="Grind date cannot be before roast date.",
            )
        )

    if candidate.dose_grams is None or candidate.dose_grams <= 0:
        errors.append(
            FieldError(
                field="dose_grams",
                message="Dose (grams) is required and must be positive.",
            )
        )

    return errors


def validate_soft(candidate: RecipeVersionInput) -> list[str]:
    """Return advisory warnings for unusual but allowed parameters."""
    checks: list[Callable[[RecipeVersionInput], str | None]] = [
        _check_brew_ratio,
        _check_extraction_time,
        _check_temperature,
        _check_missing_espresso_time,
        _check_milk_preparation,
    ]
    warnings: list[str] = []
    for check in checks:
        warning = check(candidate)
        if warning:
            warnings.append(warning)
    return warnings


def validate(candidate: RecipeVersionInput) -> ValidationResult:
    """Run both tiers and return the combined result."""
    return ValidationResult(
        errors=validate_hard(candidate),
        warnings=validate_soft(candidate),
    )


def format_duration(seconds: float) -> str:
    """Render seconds in the coarsest unit that divides them evenly."""
    whole = int(seconds)
    if whole != seconds:
        return f"{seconds:g}s"
    if whole and whole % _SECONDS_PER_HOUR == 0:
        return f"{whole // _SECONDS_PER_HOUR}h"
    if whole and whole % _SECONDS_PER_MINUTE == 0:
        return f"{whole // _SECONDS_PER_MINUTE}m"
    return f"{whole}s"


def _check_brew_ratio(candidate: RecipeVersionInput) -> str | None:
    if not candidate.yield_grams or not candidate.dose_grams:
        return None
    if candidate.dose_grams <= 0:
        return None
    ratio = candidate.yield_grams / candidate.dose_grams
    typical = TYPICAL_RATIOS[candidate.drink_type]
    if typical.contains(ratio):
        return None
    return (
        f"Brew ratio (1:{ratio:.1f}) is outside the typical range "
        f"(1:{typical.min:g} - 1:{typical.max:g}) for {candidate.drink_type.value}."
    )


def _check_extraction_time(candidate: RecipeVersionInput) -> str | None:
    if candidate.brew_time_sec is None:
        return None
    typical = TYPICAL_EXTRACTION_TIMES[candidate.brew_method]
    if typical.contains(candidate.brew_time_sec):
        return None
    return (
        "Extraction time is outside typical range "
        f"({format_duration(typical.min)} - {format_duration(typical.max)}) "
        f"for {candidate.brew_method.value}."
    )


def _check_temperature(candidate: RecipeVersionInput) -> str | None:
    if candidate.temp_celsius is None:
        return None
    typical = TYPICAL_TEMPERATURES[candidate.brew_method]
    if typical.contains(candidate.temp_celsius):
        return None
    return (
        f"Brew temperature ({candidate.temp_celsius:g}°C) is outside typical range "
        f"({typical.min:g}°C - {typical.max:g}°C) for {candidate.brew_method.value}."
    )


def _check_missing_espresso_time(candidate: RecipeVersionInput) -> str | None:
    if (
        candidate.brew_time_sec is None
        and candidate.brew_method == BrewMethod.ESPRESSO_MACHINE
    ):
        return "Extraction time is commonly recorded for espresso shots."
    return None


def _check_milk_preparation(candidate: RecipeVersionInput) -> str | None:
    has_milk = any("milk" in prep.name.lower() for prep in candidate.preparations)
    if has_milk and candidate.drink_type not in MILK_DRINKS:
        return (
            f"Milk preparation noted for {candidate.drink_type.value}, "
            "which is typically not a milk-based drink."
        )
    return None
