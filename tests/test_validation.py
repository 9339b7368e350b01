"""Tests for brew validation rules."""

from datetime import UTC, datetime

import pytest

from brewform.domain.brewing import BREW_METHOD_DRINKS
from brewform.domain.recipes import BrewMethod, DrinkType, Preparation
from brewform.services.validation import (
    format_duration,
    validate,
    validate_hard,
    validate_soft,
)
from tests.conftest import espresso_input


def test_espresso_scenario_has_no_errors_or_warnings() -> None:
    result = validate(espresso_input())

    assert result.valid
    assert result.errors == []
    assert result.warnings == []


def test_cold_brew_espresso_is_incompatible() -> None:
    result = validate(
        espresso_input(brew_method=BrewMethod.COLD_BREW, temp_celsius=None)
    )

    assert not result.valid
    assert [error.field for error in result.errors] == ["drink_type"]
    assert result.errors[0].message == (
        "ESPRESSO cannot be made with COLD_BREW. "
        "Please choose a compatible brew method."
    )


@pytest.mark.parametrize("method", list(BrewMethod))
@pytest.mark.parametrize("drink", list(DrinkType))
def test_compatibility_follows_reference_table(
    method: BrewMethod, drink: DrinkType
) -> None:
    errors = validate_hard(
        espresso_input(brew_method=method, drink_type=drink)
    )
    compatibility_errors = [error for error in errors if error.field == "drink_type"]

    if drink in BREW_METHOD_DRINKS[method]:
        assert compatibility_errors == []
    else:
        [error] = compatibility_errors
        assert drink.value in error.message
        assert method.value in error.message


def test_other_method_accepts_every_drink() -> None:
    for drink in DrinkType:
        assert validate_hard(
            espresso_input(brew_method=BrewMethod.OTHER, drink_type=drink)
        ) == []


def test_grind_date_before_roast_date_is_rejected() -> None:
    errors = validate_hard(
        espresso_input(
            roast_date=datetime(2025, 3, 10, tzinfo=UTC),
            grind_date=datetime(2025, 3, 1, tzinfo=UTC),
        )
    )

    assert [(error.field, error.message) for error in errors] == [
        ("grind_date", "Grind date cannot be before roast date.")
    ]


def test_grind_on_roast_day_is_allowed() -> None:
    roast = datetime(2025, 3, 10, tzinfo=UTC)
    assert validate_hard(espresso_input(roast_date=roast, grind_date=roast)) == []


@pytest.mark.parametrize("dose", [None, 0, -4.0])
def test_missing_or_non_positive_dose_is_rejected(dose: float | None) -> None:
    errors = validate_hard(espresso_input(dose_grams=dose, yield_grams=None))

    assert [error.field for error in errors] == ["dose_grams"]
    assert errors[0].message == "Dose (grams) is required and must be positive."


def test_all_hard_errors_are_reported_together() -> None:
    result = validate(
        espresso_input(
            brew_method=BrewMethod.TURKISH_CEZVE,
            dose_grams=None,
            roast_date=datetime(2025, 3, 10, tzinfo=UTC),
            grind_date=datetime(2025, 3, 1, tzinfo=UTC),
        )
    )

    assert {error.field for error in result.errors} == {
        "drink_type",
        "grind_date",
        "dose_grams",
    }


def test_ratio_outside_range_warns() -> None:
    warnings = validate_soft(espresso_input(yield_grams=60.0))

    assert warnings == [
        "Brew ratio (1:3.3) is outside the typical range (1:1.5 - 1:2.5) "
        "for ESPRESSO."
    ]


def test_ratio_at_range_boundary_does_not_warn() -> None:
    assert validate_soft(espresso_input(yield_grams=45.0)) == []


def test_extraction_time_outside_range_warns() -> None:
    warnings = validate_soft(espresso_input(brew_time_sec=50))

    assert warnings == [
        "Extraction time is outside typical range (20s - 35s) for ESPRESSO_MACHINE."
    ]


def test_cold_brew_time_is_formatted_in_hours() -> None:
    warnings = validate_soft(
        espresso_input(
            brew_method=BrewMethod.COLD_BREW,
            drink_type=DrinkType.COLD_BREW,
            dose_grams=100.0,
            yield_grams=800.0,
            brew_time_sec=3600,
            temp_celsius=20.0,
        )
    )

    assert warnings == [
        "Extraction time is outside typical range (12h - 24h) for COLD_BREW."
    ]


def test_temperature_outside_range_warns() -> None:
    warnings = validate_soft(espresso_input(temp_celsius=99.0))

    assert warnings == [
        "Brew temperature (99°C) is outside typical range (88°C - 96°C) "
        "for ESPRESSO_MACHINE."
    ]


def test_espresso_without_time_warns() -> None:
    warnings = validate_soft(espresso_input(brew_time_sec=None))

    assert warnings == ["Extraction time is commonly recorded for espresso shots."]


def test_milk_preparation_on_black_drink_warns() -> None:
    warnings = validate_soft(
        espresso_input(preparations=[Preparation(name="Steamed Milk")])
    )

    assert warnings == [
        "Milk preparation noted for ESPRESSO, which is typically not a "
        "milk-based drink."
    ]


def test_milk_preparation_on_latte_is_fine() -> None:
    warnings = validate_soft(
        espresso_input(
            drink_type=DrinkType.LATTE,
            preparations=[Preparation(name="Steamed milk", input="200ml")],
        )
    )

    assert warnings == []


def test_warnings_do_not_block_saving() -> None:
    result = validate(espresso_input(temp_celsius=80.0, brew_time_sec=60))

    assert result.valid
    assert len(result.warnings) == 2


def test_validation_is_deterministic() -> None:
    candidate = espresso_input(yield_grams=70.0, temp_celsius=70.0)

    assert validate(candidate) == validate(candidate)


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(20, "20s"), (35, "35s"), (180, "3m"), (90, "90s"), (43200, "12h"), (0, "0s")],
)
def test_format_duration(seconds: int, expected: str) -> None:
    assert format_duration(seconds) == expected
