"""Unit conversion utilities. Internal representation is always centimeters."""

from typing import Mapping

CM_TO_UNIT = {
    "mm": 10.0,
    "cm": 1.0,
    "m": 0.01,
    "in": 1 / 2.54,
    "ft": 1 / 30.48,
}

UNIT_LABELS = {
    "mm": "Millimeters (mm)",
    "cm": "Centimeters (cm)",
    "m": "Meters (m)",
    "in": "Inches (in)",
    "ft": "Feet (ft)",
}

VALID_UNITS = set(CM_TO_UNIT.keys())

CM_PER_INCH = 2.54
MM_PER_CM = 10.0


def convert_length(length_cm: float, unit: str, factors: Mapping[str, float] = CM_TO_UNIT) -> float:
    """Convert a length in centimeters to the given unit."""
    if unit not in factors:
        raise ValueError(f"Unknown unit '{unit}'. Valid: {sorted(factors)}")
    return length_cm * factors[unit]


def px_to_cm(px: float, pixels_per_inch: float = 96.0) -> float:
    return px * CM_PER_INCH / pixels_per_inch


def drawing_units_to_cm(value: float, mm_per_unit: float = 1.0) -> float:
    """DXF drawing units are assumed to be millimeters unless told otherwise."""
    return value * mm_per_unit / MM_PER_CM


def format_length(value: float, unit: str) -> str:
    return f"{value:.2f} {unit}"
