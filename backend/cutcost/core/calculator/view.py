"""What the calculator shows for a given state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cutcost.core.calculator.catalog import CalculatorConfig, UnitOption
from cutcost.core.calculator.state import CalculatorState
from cutcost.core.measure.drawing import ASSUMPTIONS, ZERO_LENGTH_MESSAGE
from cutcost.core.pricing.cost import calculate_cost, format_cost
from cutcost.core.pricing.currency import CurrencyOption
from cutcost.utils.units import convert_length, format_length


class Phase(str, Enum):
    IDLE = "idle"
    ZERO_LENGTH = "zero_length"
    MEASURED = "measured"


@dataclass(frozen=True)
class CalculatorView:
    phase: Phase
    file_type: Optional[str] = None
    length: Optional[float] = None
    length_display: Optional[str] = None
    price_label: Optional[str] = None
    cost: Optional[float] = None
    cost_display: Optional[str] = None
    warning: Optional[str] = None
    assumptions: tuple[str, ...] = ()
    unit_options: tuple[UnitOption, ...] = ()
    currency_options: tuple[CurrencyOption, ...] = ()

    @property
    def controls_visible(self) -> bool:
        return self.phase is Phase.MEASURED


def render(state: CalculatorState, config: CalculatorConfig) -> CalculatorView:
    if not state.has_measurement:
        return CalculatorView(phase=Phase.IDLE)

    # Cost shows whenever a file was measured and the price gives a finite amount,
    # including the zero-length case.
    cost = calculate_cost(state.length_cm, state.unit, state.price, config.unit_factors)
    cost_display = format_cost(cost, state.currency, state.locale)
    file_type = state.file_kind.value

    if state.length_cm <= 0:
        return CalculatorView(
            phase=Phase.ZERO_LENGTH,
            file_type=file_type,
            cost=cost,
            cost_display=cost_display,
            warning=ZERO_LENGTH_MESSAGE,
            assumptions=ASSUMPTIONS,
        )

    length = convert_length(state.length_cm, state.unit, config.unit_factors)
    return CalculatorView(
        phase=Phase.MEASURED,
        file_type=file_type,
        length=length,
        length_display=format_length(length, state.unit),
        price_label=f"Price per {state.unit}:",
        cost=cost,
        cost_display=cost_display,
        unit_options=tuple(config.unit_options),
        currency_options=config.currency_options,
    )
