"""SVG length extractor: sums the length of every <path> element.

Only <path> elements are measured. Basic shapes (line, polyline, rect, circle)
are not, and transforms and viewBox scaling are ignored, so lengths are in
raw user units which are taken to be CSS pixels.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Iterator

from cutcost.core.measure.errors import DrawingParseError
from cutcost.core.measure.path_data import DEFAULT_SAMPLES, path_length
from cutcost.utils.units import px_to_cm

log = logging.getLogger(__name__)


def _strip_ns(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


def parse_svg(text: str) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise DrawingParseError("SVG", str(e)) from e


def iter_path_elements(root: ET.Element) -> Iterator[ET.Element]:
    """Yield every <path> element at any depth, with or without the SVG namespace."""
    for elem in root.iter():
        if isinstance(elem.tag, str) and _strip_ns(elem.tag) == "path":
            yield elem


def svg_path_length_px(root: ET.Element, samples: int = DEFAULT_SAMPLES) -> float:
    total = 0.0
    count = 0
    for elem in iter_path_elements(root):
        total += path_length(elem.get("d", ""), samples)
        count += 1
    log.debug("Measured %d SVG path element(s): %.3f px", count, total)
    return total


def calculate_svg_length(
    text: str,
    pixels_per_inch: float = 96.0,
    samples: int = DEFAULT_SAMPLES,
) -> float:
    """Total <path> length of an SVG document in centimeters."""
    root = parse_svg(text)
    return px_to_cm(svg_path_length_px(root, samples), pixels_per_inch)
