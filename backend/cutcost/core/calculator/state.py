"""Calculator state and the reducer that applies user events to it.

The workflow is Idle -> file measured (zero or positive length). Removing the
file returns to Idle. Every transition is a pure function of
(state, event, config), so the calculator can be driven and tested without a UI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from cutcost.core.calculator.catalog import CalculatorConfig
from cutcost.core.measure.drawing import DrawingKind, measure_drawing
from cutcost.core.pricing.currency import detect_currency

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    name: str
    content: str


# ── Events ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Initialized:
    locale: str


@dataclass(frozen=True)
class FilesSelected:
    files: tuple[UploadedFile, ...]


@dataclass(frozen=True)
class FileRemoved:
    pass


@dataclass(frozen=True)
class UnitSelected:
    unit: str


@dataclass(frozen=True)
class CurrencySelected:
    code: str


@dataclass(frozen=True)
class PriceEdited:
    text: str


Event = Union[Initialized, FilesSelected, FileRemoved, UnitSelected, CurrencySelected, PriceEdited]


# ── State ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CalculatorState:
    length_cm: Optional[float] = None
    file_kind: Optional[DrawingKind] = None
    file_name: Optional[str] = None
    unit: str = "cm"
    currency: str = "IDR"
    price: str = ""
    locale: str = "en-US"

    @property
    def has_measurement(self) -> bool:
        return self.length_cm is not None and self.file_kind is not None


def initial_state(config: CalculatorConfig, locale: Optional[str] = None) -> CalculatorState:
    state = CalculatorState(
        unit=config.default_unit,
        currency=config.default_currency,
        locale=config.default_locale,
    )
    return reduce(state, Initialized(locale or config.default_locale), config)


def reduce(state: CalculatorState, event: Event, config: CalculatorConfig) -> CalculatorState:
    """Apply one event. Raises UnsupportedFileTypeError / ValueError without changing state."""
    if isinstance(event, Initialized):
        currency = detect_currency(event.locale, config.currency_options)
        return replace(state, locale=event.locale, currency=currency)

    elif isinstance(event, FilesSelected):
        if not event.files:
            return state
        if len(event.files) > 1:
            log.info("%d files selected; only %r is measured", len(event.files), event.files[0].name)
        upload = event.files[0]
        measurement = measure_drawing(
            upload.name,
            upload.content,
            pixels_per_inch=config.pixels_per_inch,
            mm_per_unit=config.mm_per_dxf_unit,
            samples=config.curve_samples,
        )
        return replace(
            state,
            length_cm=measurement.length_cm,
            file_kind=measurement.kind,
            file_name=measurement.filename,
        )

    elif isinstance(event, FileRemoved):
        return replace(state, length_cm=None, file_kind=None, file_name=None)

    elif isinstance(event, UnitSelected):
        if event.unit not in config.unit_factors:
            raise ValueError(f"Unknown unit '{event.unit}'. Valid: {sorted(config.unit_factors)}")
        return replace(state, unit=event.unit)

    elif isinstance(event, CurrencySelected):
        if event.code not in config.currency_codes:
            raise ValueError(f"Unsupported currency '{event.code}'. Valid: {list(config.currency_codes)}")
        return replace(state, currency=event.code)

    elif isinstance(event, PriceEdited):
        return replace(state, price=event.text)

    raise TypeError(f"Unknown calculator event: {event!r}")
