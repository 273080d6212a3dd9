"""Calculator endpoints — drive the calculator state machine one event at a time.

The client owns the state: it sends the current state with each event and
renders the returned view.
"""

from fastapi import APIRouter, Depends, HTTPException

from cutcost.api.deps import get_config, resolve_locale
from cutcost.config import settings
from cutcost.core.calculator.catalog import CalculatorConfig
from cutcost.core.calculator.state import initial_state, reduce
from cutcost.core.calculator.view import render
from cutcost.core.measure.errors import UnsupportedFileTypeError
from cutcost.models.calculator_model import event_from_model, state_from_model, to_response
from cutcost.models.schemas import CalculatorResponse, DispatchRequest, FilesSelectedEvent

router = APIRouter(tags=["calculator"])


@router.get("/calculator/initial", response_model=CalculatorResponse)
async def calculator_initial(
    locale: str = Depends(resolve_locale),
    config: CalculatorConfig = Depends(get_config),
):
    state = initial_state(config, locale)
    return to_response(state, render(state, config))


@router.post("/calculator/dispatch", response_model=CalculatorResponse)
async def calculator_dispatch(req: DispatchRequest, config: CalculatorConfig = Depends(get_config)):
    """Apply one event to the given state and return the new state and view."""
    state = state_from_model(req.state)
    if isinstance(req.event, FilesSelectedEvent) and req.event.files:
        size = len(req.event.files[0].content.encode("utf-8"))
        if size > settings.max_upload_bytes:
            raise HTTPException(413, detail=f"File is larger than {settings.max_upload_bytes} bytes")
    try:
        new_state = reduce(state, event_from_model(req.event), config)
    except UnsupportedFileTypeError as e:
        raise HTTPException(415, detail=str(e))
    except ValueError as e:
        raise HTTPException(422, detail=str(e))
    return to_response(new_state, render(new_state, config))
