"""Bridge between API schemas and the calculator state machine."""

from __future__ import annotations

import math
from typing import Optional

from cutcost.core.calculator.catalog import CalculatorConfig
from cutcost.core.calculator.state import (
    CalculatorState,
    CurrencySelected,
    Event,
    FileRemoved,
    FilesSelected,
    Initialized,
    PriceEdited,
    UnitSelected,
    UploadedFile,
)
from cutcost.core.calculator.view import CalculatorView
from cutcost.core.measure.drawing import DrawingKind
from cutcost.core.pricing.cost import calculate_cost, format_cost
from cutcost.models.schemas import (
    CalculatorResponse,
    CalculatorStateModel,
    CalculatorViewModel,
    CurrencyOptionModel,
    CurrencySelectedEvent,
    EstimateRequest,
    EstimateResponse,
    FileRemovedEvent,
    FilesSelectedEvent,
    InitializedEvent,
    PriceEditedEvent,
    UnitOptionModel,
    UnitSelectedEvent,
)
from cutcost.utils.units import convert_length, format_length


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    """JSON cannot carry nan; an invalid amount is reported as absent."""
    if value is None or not math.isfinite(value):
        return None
    return value


def state_from_model(model: CalculatorStateModel) -> CalculatorState:
    return CalculatorState(
        length_cm=model.length_cm,
        file_kind=DrawingKind(model.file_kind) if model.file_kind else None,
        file_name=model.file_name,
        unit=model.unit,
        currency=model.currency,
        price=model.price,
        locale=model.locale,
    )


def state_to_model(state: CalculatorState) -> CalculatorStateModel:
    return CalculatorStateModel(
        length_cm=state.length_cm,
        file_kind=state.file_kind.value if state.file_kind else None,
        file_name=state.file_name,
        unit=state.unit,
        currency=state.currency,
        price=state.price,
        locale=state.locale,
    )


def event_from_model(model) -> Event:
    if isinstance(model, InitializedEvent):
        return Initialized(locale=model.locale)
    elif isinstance(model, FilesSelectedEvent):
        return FilesSelected(files=tuple(UploadedFile(f.name, f.content) for f in model.files))
    elif isinstance(model, FileRemovedEvent):
        return FileRemoved()
    elif isinstance(model, UnitSelectedEvent):
        return UnitSelected(unit=model.unit)
    elif isinstance(model, CurrencySelectedEvent):
        return CurrencySelected(code=model.code)
    elif isinstance(model, PriceEditedEvent):
        return PriceEdited(text=model.text)
    raise TypeError(f"Unknown event model: {model!r}")


def view_to_model(view: CalculatorView) -> CalculatorViewModel:
    return CalculatorViewModel(
        phase=view.phase.value,
        controls_visible=view.controls_visible,
        file_type=view.file_type,
        length=view.length,
        length_display=view.length_display,
        price_label=view.price_label,
        cost=_finite_or_none(view.cost),
        cost_display=view.cost_display,
        warning=view.warning,
        assumptions=list(view.assumptions),
        units=[UnitOptionModel(symbol=u.symbol, label=u.label, factor=u.factor) for u in view.unit_options],
        currencies=[
            CurrencyOptionModel(code=c.code, name=c.name, label=c.label) for c in view.currency_options
        ],
    )


def to_response(state: CalculatorState, view: CalculatorView) -> CalculatorResponse:
    return CalculatorResponse(state=state_to_model(state), view=view_to_model(view))


def estimate(req: EstimateRequest, config: CalculatorConfig) -> EstimateResponse:
    """Length in the requested unit and the formatted cost for a measured length."""
    if req.length_cm is None:
        return EstimateResponse()

    length = convert_length(req.length_cm, req.unit, config.unit_factors)
    cost = calculate_cost(req.length_cm, req.unit, req.price, config.unit_factors)
    return EstimateResponse(
        length=length,
        length_display=format_length(length, req.unit),
        cost=_finite_or_none(cost),
        cost_display=format_cost(cost, req.currency, req.locale),
    )
