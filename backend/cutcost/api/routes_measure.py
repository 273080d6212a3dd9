"""Measure endpoint — cutting length of an uploaded DXF or SVG drawing."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from cutcost.api.deps import get_config
from cutcost.config import settings
from cutcost.core.calculator.catalog import CalculatorConfig
from cutcost.core.measure.drawing import ASSUMPTIONS, ZERO_LENGTH_MESSAGE, detect_kind, measure_drawing
from cutcost.core.measure.errors import DrawingParseError, UnsupportedFileTypeError
from cutcost.models.schemas import MeasureResponse

log = logging.getLogger(__name__)

router = APIRouter(tags=["measure"])


@router.post("/measure", response_model=MeasureResponse)
async def measure_upload(
    files: list[UploadFile] = File(...),
    config: CalculatorConfig = Depends(get_config),
):
    """Measure the first uploaded file. Any further files are ignored."""
    upload = files[0]
    filename = upload.filename or ""
    try:
        detect_kind(filename)
    except UnsupportedFileTypeError as e:
        raise HTTPException(415, detail=str(e))

    data = await upload.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(413, detail=f"File is larger than {settings.max_upload_bytes} bytes")

    try:
        measurement = measure_drawing(
            filename,
            data.decode("utf-8", errors="replace"),
            pixels_per_inch=config.pixels_per_inch,
            mm_per_unit=config.mm_per_dxf_unit,
            samples=config.curve_samples,
        )
    except DrawingParseError as e:
        log.warning("Rejected %r: %s", filename, e)
        raise HTTPException(422, detail=str(e))

    if measurement.is_zero:
        return MeasureResponse(
            file_name=filename,
            file_type=measurement.kind.value,
            length_cm=measurement.length_cm,
            status="zero_length",
            warning=ZERO_LENGTH_MESSAGE,
            assumptions=list(ASSUMPTIONS),
        )
    return MeasureResponse(
        file_name=filename,
        file_type=measurement.kind.value,
        length_cm=measurement.length_cm,
        status="measured",
    )
