"""Drawing kinds and dispatch from an uploaded file to its length extractor."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from cutcost.core.measure.dxf_length import calculate_dxf_length
from cutcost.core.measure.errors import DrawingParseError, UnsupportedFileTypeError
from cutcost.core.measure.path_data import DEFAULT_SAMPLES
from cutcost.core.measure.svg_length import calculate_svg_length

log = logging.getLogger(__name__)

ZERO_LENGTH_MESSAGE = "Measurement couldn't be completed. Please note the following assumptions:"

ASSUMPTIONS = (
    "For SVG files, we assume the units are in pixels and use a standard 96 PPI for conversion.",
    "For DXF files, we assume the units are in millimeters. This is a common default, but not universal.",
)


class DrawingKind(str, Enum):
    DXF = "DXF"
    SVG = "SVG"

    @property
    def suffix(self) -> str:
        return "." + self.value.lower()


def detect_kind(filename: str) -> DrawingKind:
    """Pick the drawing kind from the file name (case-insensitive suffix)."""
    name = filename.lower()
    for kind in DrawingKind:
        if name.endswith(kind.suffix):
            return kind
    raise UnsupportedFileTypeError(filename)


@dataclass(frozen=True)
class Measurement:
    kind: DrawingKind
    length_cm: float
    filename: str = ""

    @property
    def is_zero(self) -> bool:
        return self.length_cm <= 0


def measure_drawing(
    filename: str,
    content: str,
    *,
    pixels_per_inch: float = 96.0,
    mm_per_unit: float = 1.0,
    samples: int = DEFAULT_SAMPLES,
) -> Measurement:
    """Measure the cutting length of a DXF or SVG file's content in centimeters."""
    kind = detect_kind(filename)
    if kind is DrawingKind.DXF:
        length = calculate_dxf_length(content, mm_per_unit)
    else:
        length = calculate_svg_length(content, pixels_per_inch, samples)

    if not math.isfinite(length):
        raise DrawingParseError(kind.value, "measured length is not a finite number")

    log.info("Measured %s file %r: %.4f cm", kind.value, filename, length)
    return Measurement(kind=kind, length_cm=length, filename=filename)
