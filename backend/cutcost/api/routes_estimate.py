"""Options and estimate endpoints — units, currencies and the cost arithmetic."""

from fastapi import APIRouter, Depends

from cutcost.api.deps import get_config, resolve_locale
from cutcost.core.calculator.catalog import CalculatorConfig
from cutcost.core.measure.drawing import ASSUMPTIONS, ZERO_LENGTH_MESSAGE
from cutcost.core.pricing.currency import detect_currency
from cutcost.models.calculator_model import estimate
from cutcost.models.schemas import (
    CurrencyOptionModel,
    EstimateRequest,
    EstimateResponse,
    OptionsResponse,
    UnitOptionModel,
)

router = APIRouter(tags=["estimate"])


@router.get("/options", response_model=OptionsResponse)
async def get_options(
    locale: str = Depends(resolve_locale),
    config: CalculatorConfig = Depends(get_config),
):
    """Selectable units and currencies, with the default currency detected from the locale."""
    return OptionsResponse(
        locale=locale,
        default_unit=config.default_unit,
        default_currency=detect_currency(locale, config.currency_options),
        units=[UnitOptionModel(symbol=u.symbol, label=u.label, factor=u.factor) for u in config.unit_options],
        currencies=[
            CurrencyOptionModel(code=c.code, name=c.name, label=c.label) for c in config.currency_options
        ],
        zero_length_message=ZERO_LENGTH_MESSAGE,
        assumptions=list(ASSUMPTIONS),
    )


@router.post("/estimate", response_model=EstimateResponse)
async def estimate_cost(req: EstimateRequest, config: CalculatorConfig = Depends(get_config)):
    """Convert a measured length and price it. Fields are null while not computable."""
    return estimate(req, config)
