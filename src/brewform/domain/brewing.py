"""Brewing reference tables.

Every table is keyed by a full enum. Completeness is checked when the
module is imported so that a missing entry stops the process at startup
instead of surfacing as a validation gap.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from brewform.domain.recipes import BrewMethod, DrinkType


@dataclass(frozen=True)
class TypicalRange:
    """Inclusive range of values considered typical."""

    min: float
    max: float

    def contains(self, value: float) -> bool:
        """Return True when the value is inside the range."""
        return self.min <= value <= self.max


_ESPRESSO_FAMILY = frozenset(
    {
        DrinkType.ESPRESSO,
        DrinkType.RISTRETTO,
        DrinkType.LUNGO,
        DrinkType.AMERICANO,
        DrinkType.LATTE,
        DrinkType.CAPPUCCINO,
        DrinkType.FLAT_WHITE,
        DrinkType.CORTADO,
        DrinkType.MACCHIATO,
        DrinkType.MOCHA,
        DrinkType.AFFOGATO,
    }
)
_FILTER_DRINKS = frozenset({DrinkType.POUR_OVER, DrinkType.ICED_COFFEE})

BREW_METHOD_DRINKS: Mapping[BrewMethod, frozenset[DrinkType]] = {
    BrewMethod.ESPRESSO_MACHINE: _ESPRESSO_FAMILY,
    BrewMethod.MOKA_POT: frozenset(
        {
            DrinkType.ESPRESSO,
            DrinkType.AMERICANO,
            DrinkType.LATTE,
            DrinkType.CAPPUCCINO,
            DrinkType.MOCHA,
        }
    ),
    BrewMethod.FRENCH_PRESS: frozenset(
        {DrinkType.FRENCH_PRESS, DrinkType.ICED_COFFEE}
    ),
    BrewMethod.POUR_OVER_V60: _FILTER_DRINKS,
    BrewMethod.POUR_OVER_CHEMEX: _FILTER_DRINKS,
    BrewMethod.POUR_OVER_KALITA: _FILTER_DRINKS,
    BrewMethod.AEROPRESS: frozenset(
        {
            DrinkType.ESPRESSO,
            DrinkType.AMERICANO,
            DrinkType.POUR_OVER,
            DrinkType.ICED_COFFEE,
        }
    ),
    BrewMethod.COLD_BREW: frozenset({DrinkType.COLD_BREW, DrinkType.ICED_COFFEE}),
    BrewMethod.DRIP_COFFEE: _FILTER_DRINKS,
    BrewMethod.TURKISH_CEZVE: frozenset({DrinkType.TURKISH_COFFEE}),
    BrewMethod.SIPHON: frozenset({DrinkType.POUR_OVER}),
    BrewMethod.VIETNAMESE_PHIN: frozenset(
        {DrinkType.VIETNAMESE_COFFEE, DrinkType.ICED_COFFEE}
    ),
    BrewMethod.IBRIK: frozenset({DrinkType.TURKISH_COFFEE}),
    BrewMethod.PERCOLATOR: frozenset({DrinkType.POUR_OVER}),
    BrewMethod.OTHER: frozenset(DrinkType),
}

# Yield-by-weight divided by dose.
TYPICAL_RATIOS: Mapping[DrinkType, TypicalRange] = {
    DrinkType.ESPRESSO: TypicalRange(1.5, 2.5),
    DrinkType.RISTRETTO: TypicalRange(1, 1.5),
    DrinkType.LUNGO: TypicalRange(2.5, 4),
    DrinkType.AMERICANO: TypicalRange(2, 3),
    DrinkType.LATTE: TypicalRange(1.5, 2.5),
    DrinkType.CAPPUCCINO: TypicalRange(1.5, 2.5),
    DrinkType.FLAT_WHITE: TypicalRange(1.5, 2.5),
    DrinkType.CORTADO: TypicalRange(1.5, 2.5),
    DrinkType.MACCHIATO: TypicalRange(1.5, 2.5),
    DrinkType.MOCHA: TypicalRange(1.5, 2.5),
    DrinkType.POUR_OVER: TypicalRange(14, 18),
    DrinkType.FRENCH_PRESS: TypicalRange(14, 17),
    DrinkType.COLD_BREW: TypicalRange(5, 10),
    DrinkType.ICED_COFFEE: TypicalRange(14, 18),
    DrinkType.TURKISH_COFFEE: TypicalRange(8, 12),
    DrinkType.AFFOGATO: TypicalRange(1.5, 2.5),
    DrinkType.IRISH_COFFEE: TypicalRange(1.5, 2.5),
    DrinkType.VIETNAMESE_COFFEE: TypicalRange(3, 5),
    DrinkType.OTHER: TypicalRange(1, 20),
}

# Seconds.
TYPICAL_EXTRACTION_TIMES: Mapping[BrewMethod, TypicalRange] = {
    BrewMethod.ESPRESSO_MACHINE: TypicalRange(20, 35),
    BrewMethod.MOKA_POT: TypicalRange(180, 300),
    BrewMethod.FRENCH_PRESS: TypicalRange(180, 300),
    BrewMethod.POUR_OVER_V60: TypicalRange(150, 210),
    BrewMethod.POUR_OVER_CHEMEX: TypicalRange(210, 300),
    BrewMethod.POUR_OVER_KALITA: TypicalRange(150, 210),
    BrewMethod.AEROPRESS: TypicalRange(60, 180),
    BrewMethod.COLD_BREW: TypicalRange(43200, 86400),
    BrewMethod.DRIP_COFFEE: TypicalRange(180, 360),
    BrewMethod.TURKISH_CEZVE: TypicalRange(120, 240),
    BrewMethod.SIPHON: TypicalRange(90, 180),
    BrewMethod.VIETNAMESE_PHIN: TypicalRange(300, 600),
    BrewMethod.IBRIK: TypicalRange(120, 240),
    BrewMethod.PERCOLATOR: TypicalRange(300, 600),
    BrewMethod.OTHER: TypicalRange(0, 86400),
}

# Degrees Celsius.
TYPICAL_TEMPERATURES: Mapping[BrewMethod, TypicalRange] = {
    BrewMethod.ESPRESSO_MACHINE: TypicalRange(88, 96),
    BrewMethod.MOKA_POT: TypicalRange(85, 100),
    BrewMethod.FRENCH_PRESS: TypicalRange(90, 96),
    BrewMethod.POUR_OVER_V60: TypicalRange(88, 96),
    BrewMethod.POUR_OVER_CHEMEX: TypicalRange(88, 96),
    BrewMethod.POUR_OVER_KALITA: TypicalRange(88, 96),
    BrewMethod.AEROPRESS: TypicalRange(75, 96),
    BrewMethod.COLD_BREW: TypicalRange(1, 25),
    BrewMethod.DRIP_COFFEE: TypicalRange(90, 96),
    BrewMethod.TURKISH_CEZVE: TypicalRange(85, 100),
    BrewMethod.SIPHON: TypicalRange(88, 96),
    BrewMethod.VIETNAMESE_PHIN: TypicalRange(88, 96),
    BrewMethod.IBRIK: TypicalRange(85, 100),
    BrewMethod.PERCOLATOR: TypicalRange(90, 100),
    BrewMethod.OTHER: TypicalRange(1, 100),
}

MILK_DRINKS = frozenset(
    {
        DrinkType.LATTE,
        DrinkType.CAPPUCCINO,
        DrinkType.FLAT_WHITE,
        DrinkType.CORTADO,
        DrinkType.MACCHIATO,
        DrinkType.MOCHA,
    }
)


def is_brew_method_compatible(brew_method: BrewMethod, drink_type: DrinkType) -> bool:
    """Return True when the brew method can produce the drink type."""
    return drink_type in BREW_METHOD_DRINKS[brew_method]


def ensure_complete(
    table: Mapping[Enum, object], enum_cls: type[Enum], name: str
) -> None:
    """Raise RuntimeError unless the table has exactly one entry per enum member."""
    expected = set(enum_cls)
    actual = set(table)
    missing = expected - actual
    unexpected = actual - expected
    if missing or unexpected:
        raise RuntimeError(
            f"Reference table {name} does not match {enum_cls.__name__}: "
            f"missing={sorted(m.name for m in missing)} "
            f"unexpected={sorted(str(u) for u in unexpected)}"
        )


ensure_complete(BREW_METHOD_DRINKS, BrewMethod, "BREW_METHOD_DRINKS")
ensure_complete(TYPICAL_RATIOS, DrinkType, "TYPICAL_RATIOS")
ensure_complete(TYPICAL_EXTRACTION_TIMES, BrewMethod, "TYPICAL_EXTRACTION_TIMES")
ensure_complete(TYPICAL_TEMPERATURES, BrewMethod, "TYPICAL_TEMPERATURES")
