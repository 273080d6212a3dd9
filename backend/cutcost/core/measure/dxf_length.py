"""DXF length extractor: sums LINE and LWPOLYLINE lengths.

Only straight geometry is measured. ARC, CIRCLE, SPLINE and every other
entity type contribute nothing. LWPOLYLINEs are treated as open chains:
bulges and the closed flag are ignored.
"""

from __future__ import annotations

import io
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

import ezdxf
from ezdxf.document import Drawing
from shapely.geometry import LineString

from cutcost.core.measure.errors import DrawingParseError
from cutcost.utils.units import drawing_units_to_cm

log = logging.getLogger(__name__)

Coord = tuple[float, ...]


@dataclass(frozen=True)
class DrawingEntity:
    """A DXF entity reduced to the geometry that matters for length."""

    kind: str
    start: Optional[Coord] = None
    end: Optional[Coord] = None
    vertices: Optional[tuple[Coord, ...]] = None


def read_dxf(text: str) -> Drawing:
    try:
        return ezdxf.read(io.StringIO(text))
    except ezdxf.DXFError as e:
        raise DrawingParseError("DXF", str(e)) from e


def _to_entity(e) -> DrawingEntity:
    kind = e.dxftype()
    if kind == "LINE":
        start = tuple(e.dxf.start) if e.dxf.hasattr("start") else None
        end = tuple(e.dxf.end) if e.dxf.hasattr("end") else None
        return DrawingEntity(kind, start=start, end=end)
    if kind == "LWPOLYLINE":
        return DrawingEntity(kind, vertices=tuple(e.get_points("xy")))
    return DrawingEntity(kind)


def collect_entities(doc: Drawing) -> list[DrawingEntity]:
    """Entities of every layout (model space and paper space)."""
    entities = []
    for layout in doc.layouts:
        entities.extend(_to_entity(e) for e in layout)
    return entities


def entity_length(entity: DrawingEntity) -> float:
    """Length of one entity in drawing units; unsupported entities are 0."""
    if entity.kind == "LINE":
        if entity.start is None or entity.end is None:
            return 0.0
        return LineString([entity.start[:2], entity.end[:2]]).length
    if entity.kind == "LWPOLYLINE":
        if not entity.vertices or len(entity.vertices) < 2:
            return 0.0
        return LineString([v[:2] for v in entity.vertices]).length
    return 0.0


def dxf_path_length(entities: Iterable[DrawingEntity]) -> float:
    """Sum of LINE and LWPOLYLINE lengths, in drawing units."""
    total = 0.0
    skipped: Counter[str] = Counter()
    for entity in entities:
        if entity.kind not in ("LINE", "LWPOLYLINE"):
            skipped[entity.kind] += 1
            continue
        total += entity_length(entity)
    if skipped:
        log.debug("Skipped unsupported DXF entities: %s", dict(skipped))
    return total


def calculate_dxf_length(text: str, mm_per_unit: float = 1.0) -> float:
    """Total LINE/LWPOLYLINE length of a DXF document in centimeters."""
    doc = read_dxf(text)
    return drawing_units_to_cm(dxf_path_length(collect_entities(doc)), mm_per_unit)
