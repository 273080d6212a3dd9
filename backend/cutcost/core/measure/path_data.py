"""SVG path data ("d" attribute) tokenizer, parser and arc-length measurement.

Paths are parsed into subpaths of line, cubic, quadratic and elliptical-arc
segments. Curves are flattened into polylines and measured with Shapely, so
a path's length is the length of its traversal in user units (pixels).

Like a browser, a syntax error ends the path: everything parsed up to the
last complete segment is kept and the rest is ignored.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from shapely.geometry import LineString

log = logging.getLogger(__name__)

Point = tuple[float, float]

DEFAULT_SAMPLES = 64


class PathTokenType(Enum):
    COMMAND = auto()   # M, l, C, z ...
    NUMBER = auto()    # 10, -.5, 1e3


@dataclass(frozen=True)
class PathToken:
    type: PathTokenType
    value: str
    pos: int


class PathDataError(ValueError):
    def __init__(self, message: str, pos: int):
        self.pos = pos
        super().__init__(f"Position {pos}: {message}")


_COMMANDS = set("MmZzLlHhVvCcSsQqTtAa")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _scan(d: str) -> tuple[list[PathToken], PathDataError | None]:
    """Tokenize as far as possible, returning the tokens and the first error (if any)."""
    tokens: list[PathToken] = []
    pos = 0
    while pos < len(d):
        ch = d[pos]
        if ch.isspace() or ch == ",":
            pos += 1
            continue

        if ch in _COMMANDS:
            tokens.append(PathToken(PathTokenType.COMMAND, ch, pos))
            pos += 1
            continue

        m = _NUMBER_RE.match(d, pos)
        if m:
            tokens.append(PathToken(PathTokenType.NUMBER, m.group(0), pos))
            pos = m.end()
            continue

        return tokens, PathDataError(f"Unexpected character '{ch}'", pos)

    return tokens, None


def tokenize_path_data(d: str) -> list[PathToken]:
    """Convert path data into command and number tokens."""
    tokens, error = _scan(d)
    if error is not None:
        raise error
    return tokens


# ── Segments ─────────────────────────────────────────────────────────────────

def _steps(samples: int) -> int:
    return max(int(samples), 1)


@dataclass
class LineSegment:
    start: Point
    end: Point

    def flatten(self, samples: int = DEFAULT_SAMPLES) -> list[Point]:
        return [self.start, self.end]


@dataclass
class CubicSegment:
    start: Point
    control1: Point
    control2: Point
    end: Point

    def flatten(self, samples: int = DEFAULT_SAMPLES) -> list[Point]:
        (x0, y0), (x1, y1), (x2, y2), (x3, y3) = self.start, self.control1, self.control2, self.end
        pts = [self.start]
        n = _steps(samples)
        for i in range(1, n + 1):
            t = i / n
            mt = 1 - t
            a, b, c, e = mt ** 3, 3 * mt * mt * t, 3 * mt * t * t, t ** 3
            pts.append((a * x0 + b * x1 + c * x2 + e * x3, a * y0 + b * y1 + c * y2 + e * y3))
        return pts


@dataclass
class QuadraticSegment:
    start: Point
    control: Point
    end: Point

    def flatten(self, samples: int = DEFAULT_SAMPLES) -> list[Point]:
        (x0, y0), (x1, y1), (x2, y2) = self.start, self.control, self.end
        pts = [self.start]
        n = _steps(samples)
        for i in range(1, n + 1):
            t = i / n
            mt = 1 - t
            a, b, c = mt * mt, 2 * mt * t, t * t
            pts.append((a * x0 + b * x1 + c * x2, a * y0 + b * y1 + c * y2))
        return pts


@dataclass
class ArcSegment:
    """Elliptical arc in SVG endpoint parameterization."""

    start: Point
    end: Point
    rx: float
    ry: float
    rotation: float = 0.0  # degrees
    large_arc: bool = False
    sweep: bool = False

    def center_parameters(self) -> tuple[float, float, float, float, float, float]:
        """Return (cx, cy, rx, ry, theta1, dtheta), radians, with radii scaled up if too small."""
        x1, y1 = self.start
        x2, y2 = self.end
        phi = math.radians(self.rotation)
        cos_phi, sin_phi = math.cos(phi), math.sin(phi)

        dx2 = (x1 - x2) / 2
        dy2 = (y1 - y2) / 2
        x1p = cos_phi * dx2 + sin_phi * dy2
        y1p = -sin_phi * dx2 + cos_phi * dy2

        rx, ry = abs(self.rx), abs(self.ry)
        lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
        if lam > 1:
            s = math.sqrt(lam)
            rx *= s
            ry *= s

        num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
        den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
        coef = math.sqrt(max(0.0, num / den)) if den > 0 else 0.0
        if self.large_arc == self.sweep:
            coef = -coef

        cxp = coef * rx * y1p / ry
        cyp = -coef * ry * x1p / rx
        cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
        cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

        def angle(ux: float, uy: float, vx: float, vy: float) -> float:
            return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)

        ux, uy = (x1p - cxp) / rx, (y1p - cyp) / ry
        vx, vy = (-x1p - cxp) / rx, (-y1p - cyp) / ry
        theta1 = angle(1.0, 0.0, ux, uy)
        dtheta = angle(ux, uy, vx, vy)
        if not self.sweep and dtheta > 0:
            dtheta -= 2 * math.pi
        elif self.sweep and dtheta < 0:
            dtheta += 2 * math.pi
        return cx, cy, rx, ry, theta1, dtheta

    def flatten(self, samples: int = DEFAULT_SAMPLES) -> list[Point]:
        if self.start == self.end:
            return [self.start]
        if self.rx == 0 or self.ry == 0:
            return [self.start, self.end]

        cx, cy, rx, ry, theta1, dtheta = self.center_parameters()
        phi = math.radians(self.rotation)
        cos_phi, sin_phi = math.cos(phi), math.sin(phi)
        pts = [self.start]
        n = _steps(samples)
        for i in range(1, n + 1):
            theta = theta1 + dtheta * i / n
            ct, st = math.cos(theta), math.sin(theta)
            pts.append((
                cx + rx * ct * cos_phi - ry * st * sin_phi,
                cy + rx * ct * sin_phi + ry * st * cos_phi,
            ))
        pts[-1] = self.end
        return pts


Segment = Union[LineSegment, CubicSegment, QuadraticSegment, ArcSegment]


@dataclass
class Subpath:
    """A run of connected segments started by a moveto."""

    start: Point
    segments: list[Segment] = field(default_factory=list)
    closed: bool = False

    def points(self, samples: int = DEFAULT_SAMPLES) -> list[Point]:
        pts: list[Point] = [self.start]
        for seg in self.segments:
            for p in seg.flatten(samples)[1:]:
                if p != pts[-1]:
                    pts.append(p)
        return pts

    def length(self, samples: int = DEFAULT_SAMPLES) -> float:
        pts = self.points(samples)
        if len(pts) < 2:
            return 0.0
        return LineString(pts).length


# ── Parser ───────────────────────────────────────────────────────────────────

@dataclass
class PathParseResult:
    subpaths: list[Subpath]
    error: PathDataError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PathParser:
    """Parses a path token stream into subpaths."""

    def __init__(self, tokens: list[PathToken]):
        self.tokens = tokens
        self.pos = 0
        self.subpaths: list[Subpath] = []
        self._current: Subpath | None = None
        self._point: Point = (0.0, 0.0)
        self._subpath_start: Point = (0.0, 0.0)
        self._cubic_control: Point | None = None
        self._quad_control: Point | None = None

    def parse(self) -> PathParseResult:
        try:
            self._parse_commands()
        except PathDataError as e:
            return PathParseResult(subpaths=self.subpaths, error=e)
        return PathParseResult(subpaths=self.subpaths)

    def _parse_commands(self) -> None:
        if self._at_end():
            return
        first = self._peek()
        if first.type != PathTokenType.COMMAND or first.value not in "Mm":
            raise PathDataError("Path data must begin with a moveto command", first.pos)

        command = ""
        while not self._at_end():
            tok = self._peek()
            if tok.type == PathTokenType.COMMAND:
                command = tok.value
                self._advance()
            elif command in ("", "Z", "z"):
                raise PathDataError(f"Unexpected number '{tok.value}'", tok.pos)
            elif command == "M":
                command = "L"
            elif command == "m":
                command = "l"
            self._parse_command(command)

    def _parse_command(self, command: str) -> None:
        relative = command.islower()
        kind = command.upper()
        cubic_control: Point | None = None
        quad_control: Point | None = None

        if kind == "M":
            end = self._coord(relative)
            self._move_to(end)
        elif kind == "Z":
            self._close()
        elif kind == "L":
            self._append(LineSegment(self._point, self._coord(relative)))
        elif kind == "H":
            x = self._number()
            end = (self._point[0] + x if relative else x, self._point[1])
            self._append(LineSegment(self._point, end))
        elif kind == "V":
            y = self._number()
            end = (self._point[0], self._point[1] + y if relative else y)
            self._append(LineSegment(self._point, end))
        elif kind == "C":
            c1 = self._coord(relative)
            c2 = self._coord(relative)
            end = self._coord(relative)
            self._append(CubicSegment(self._point, c1, c2, end))
            cubic_control = c2
        elif kind == "S":
            c1 = self._reflect(self._cubic_control)
            c2 = self._coord(relative)
            end = self._coord(relative)
            self._append(CubicSegment(self._point, c1, c2, end))
            cubic_control = c2
        elif kind == "Q":
            c = self._coord(relative)
            end = self._coord(relative)
            self._append(QuadraticSegment(self._point, c, end))
            quad_control = c
        elif kind == "T":
            c = self._reflect(self._quad_control)
            end = self._coord(relative)
            self._append(QuadraticSegment(self._point, c, end))
            quad_control = c
        elif kind == "A":
            rx = self._number()
            ry = self._number()
            rotation = self._number()
            large_arc = self._flag()
            sweep = self._flag()
            end = self._coord(relative)
            self._append(ArcSegment(self._point, end, rx, ry, rotation, large_arc, sweep))

        self._cubic_control = cubic_control
        self._quad_control = quad_control

    # ── Geometry state ──────────────────────────────────────────────────

    def _move_to(self, point: Point) -> None:
        self._current = Subpath(start=point)
        self.subpaths.append(self._current)
        self._point = point
        self._subpath_start = point

    def _append(self, segment: Segment) -> None:
        if self._current is None:
            # Drawing after a closepath starts a new subpath at the previous start point
            self._current = Subpath(start=self._point)
            self.subpaths.append(self._current)
        self._current.segments.append(segment)
        self._point = segment.end

    def _close(self) -> None:
        if self._current is not None:
            self._current.segments.append(LineSegment(self._point, self._subpath_start))
            self._current.closed = True
        self._point = self._subpath_start
        self._current = None

    def _reflect(self, control: Point | None) -> Point:
        if control is None:
            return self._point
        return (2 * self._point[0] - control[0], 2 * self._point[1] - control[1])

    # ── Token helpers ───────────────────────────────────────────────────

    def _peek(self) -> PathToken:
        return self.tokens[self.pos]

    def _advance(self) -> PathToken:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def _end_pos(self) -> int:
        if not self.tokens:
            return 0
        last = self.tokens[-1]
        return last.pos + len(last.value)

    def _number(self) -> float:
        if self._at_end():
            raise PathDataError("Expected number, got end of path data", self._end_pos())
        tok = self._peek()
        if tok.type != PathTokenType.NUMBER:
            raise PathDataError(f"Expected number, got '{tok.value}'", tok.pos)
        self._advance()
        return float(tok.value)

    def _coord(self, relative: bool) -> Point:
        x = self._number()
        y = self._number()
        if relative:
            return (self._point[0] + x, self._point[1] + y)
        return (x, y)

    def _flag(self) -> bool:
        """Read an arc flag; flags may be packed against the next number ("011,1")."""
        if self._at_end():
            raise PathDataError("Expected arc flag, got end of path data", self._end_pos())
        tok = self._peek()
        if tok.type != PathTokenType.NUMBER or tok.value[0] not in "01":
            raise PathDataError(f"Expected arc flag (0 or 1), got '{tok.value}'", tok.pos)
        rest = tok.value[1:]
        if rest and not _NUMBER_RE.fullmatch(rest):
            raise PathDataError(f"Malformed arc flag '{tok.value}'", tok.pos)
        if rest:
            self.tokens[self.pos] = PathToken(PathTokenType.NUMBER, rest, tok.pos + 1)
        else:
            self._advance()
        return tok.value[0] == "1"


def parse_path_data(d: str) -> list[Subpath]:
    """Parse path data into subpaths, keeping everything before the first error."""
    tokens, scan_error = _scan(d)
    result = PathParser(tokens).parse()
    error = scan_error if result.ok else result.error
    if error is not None:
        log.warning("Path data truncated at position %d: %s", error.pos, error)
    return result.subpaths


def path_length(d: str, samples: int = DEFAULT_SAMPLES) -> float:
    """Total traversal length of path data in user units."""
    return sum(sp.length(samples) for sp in parse_path_data(d))
