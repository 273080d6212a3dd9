"""Pydantic schemas for API request/response validation."""

from __future__ import annotations

import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from cutcost.core.pricing.currency import CURRENCY_OPTIONS
from cutcost.utils.units import VALID_UNITS

CURRENCY_CODES = {c.code for c in CURRENCY_OPTIONS}


def _check_unit(v: str) -> str:
    if v not in VALID_UNITS:
        raise ValueError(f"Unit must be one of: {', '.join(sorted(VALID_UNITS))}")
    return v


def _check_currency(v: str) -> str:
    if v not in CURRENCY_CODES:
        raise ValueError(f"Currency must be one of: {', '.join(sorted(CURRENCY_CODES))}")
    return v


def _price_to_text(v):
    if v is None:
        return ""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return repr(v)
    return v


class UnitOptionModel(BaseModel):
    symbol: str
    label: str
    factor: float


class CurrencyOptionModel(BaseModel):
    code: str
    name: str
    label: str


class OptionsResponse(BaseModel):
    locale: str
    default_unit: str
    default_currency: str
    units: list[UnitOptionModel]
    currencies: list[CurrencyOptionModel]
    zero_length_message: str
    assumptions: list[str]


class MeasureResponse(BaseModel):
    file_name: str
    file_type: Literal["DXF", "SVG"]
    length_cm: float
    status: Literal["measured", "zero_length"]
    warning: Optional[str] = None
    assumptions: list[str] = []


class EstimateRequest(BaseModel):
    length_cm: Optional[float] = None
    unit: str = "cm"
    price: str = ""
    currency: str = "IDR"
    locale: str = "en-US"

    @field_validator("length_cm")
    @classmethod
    def length_must_be_finite(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and (not math.isfinite(v) or v < 0):
            raise ValueError("Length must be a finite, non-negative number")
        return v

    @field_validator("unit")
    @classmethod
    def unit_must_be_known(cls, v: str) -> str:
        return _check_unit(v)

    @field_validator("currency")
    @classmethod
    def currency_must_be_offered(cls, v: str) -> str:
        return _check_currency(v)

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, v):
        return _price_to_text(v)


class EstimateResponse(BaseModel):
    length: Optional[float] = None
    length_display: Optional[str] = None
    cost: Optional[float] = None
    cost_display: Optional[str] = None


# ── Calculator state machine ─────────────────────────────────────────────────

class CalculatorStateModel(BaseModel):
    length_cm: Optional[float] = None
    file_kind: Optional[Literal["DXF", "SVG"]] = None
    file_name: Optional[str] = None
    unit: str = "cm"
    currency: str = "IDR"
    price: str = ""
    locale: str = "en-US"

    @field_validator("unit")
    @classmethod
    def unit_must_be_known(cls, v: str) -> str:
        return _check_unit(v)

    @field_validator("currency")
    @classmethod
    def currency_must_be_offered(cls, v: str) -> str:
        return _check_currency(v)

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, v):
        return _price_to_text(v)


class UploadedFileModel(BaseModel):
    name: str
    content: str


class InitializedEvent(BaseModel):
    type: Literal["initialized"]
    locale: str


class FilesSelectedEvent(BaseModel):
    type: Literal["files_selected"]
    files: list[UploadedFileModel] = []


class FileRemovedEvent(BaseModel):
    type: Literal["file_removed"]


class UnitSelectedEvent(BaseModel):
    type: Literal["unit_selected"]
    unit: str


class CurrencySelectedEvent(BaseModel):
    type: Literal["currency_selected"]
    code: str


class PriceEditedEvent(BaseModel):
    type: Literal["price_edited"]
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def price_as_text(cls, v):
        return _price_to_text(v)


EventModel = Annotated[
    Union[
        InitializedEvent,
        FilesSelectedEvent,
        FileRemovedEvent,
        UnitSelectedEvent,
        CurrencySelectedEvent,
        PriceEditedEvent,
    ],
    Field(discriminator="type"),
]


class DispatchRequest(BaseModel):
    state: CalculatorStateModel = CalculatorStateModel()
    event: EventModel


class CalculatorViewModel(BaseModel):
    phase: Literal["idle", "zero_length", "measured"]
    controls_visible: bool
    file_type: Optional[str] = None
    length: Optional[float] = None
    length_display: Optional[str] = None
    price_label: Optional[str] = None
    cost: Optional[float] = None
    cost_display: Optional[str] = None
    warning: Optional[str] = None
    assumptions: list[str] = []
    units: list[UnitOptionModel] = []
    currencies: list[CurrencyOptionModel] = []


class CalculatorResponse(BaseModel):
    state: CalculatorStateModel
    view: CalculatorViewModel
