"""Immutable calculator configuration built once at startup."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from cutcost.core.pricing.currency import CURRENCY_OPTIONS, CurrencyOption
from cutcost.utils.units import CM_TO_UNIT, UNIT_LABELS


@dataclass(frozen=True)
class UnitOption:
    symbol: str
    label: str
    factor: float  # centimeters -> this unit


@dataclass(frozen=True)
class CalculatorConfig:
    unit_factors: Mapping[str, float] = field(default_factory=lambda: MappingProxyType(dict(CM_TO_UNIT)))
    unit_labels: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(UNIT_LABELS)))
    currencies: tuple[CurrencyOption, ...] = CURRENCY_OPTIONS
    default_unit: str = "cm"
    default_currency: str = "IDR"
    default_locale: str = "en-US"
    pixels_per_inch: float = 96.0
    mm_per_dxf_unit: float = 1.0
    curve_samples: int = 64

    def __post_init__(self) -> None:
        if self.unit_factors.get("cm") != 1:
            raise ValueError("Unit table must map 'cm' to 1")
        if self.default_unit not in self.unit_factors:
            raise ValueError(f"Default unit '{self.default_unit}' is not in the unit table")
        if not self.currencies:
            raise ValueError("At least one currency option is required")
        if self.default_currency not in self.currency_codes:
            raise ValueError(f"Default currency '{self.default_currency}' is not offered")

    @property
    def currency_codes(self) -> tuple[str, ...]:
        return tuple(c.code for c in self.currencies)

    @property
    def unit_options(self) -> list[UnitOption]:
        return [
            UnitOption(symbol, self.unit_labels.get(symbol, symbol), factor)
            for symbol, factor in self.unit_factors.items()
        ]

    @property
    def currency_options(self) -> tuple[CurrencyOption, ...]:
        """Currency options with the configured default first (it is the detection fallback)."""
        default = [c for c in self.currencies if c.code == self.default_currency]
        rest = [c for c in self.currencies if c.code != self.default_currency]
        return tuple(default + rest)


def build_config(settings) -> CalculatorConfig:
    """Freeze the runtime settings into a CalculatorConfig."""
    return CalculatorConfig(
        default_unit=settings.default_unit,
        default_currency=settings.default_currency,
        default_locale=settings.default_locale,
        pixels_per_inch=settings.svg_pixels_per_inch,
        mm_per_dxf_unit=settings.dxf_mm_per_unit,
        curve_samples=settings.curve_samples,
    )
