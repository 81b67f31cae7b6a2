"""Coordinate transform and curve/corner classification for ``.th2`` output.

Coordinate frame
----------------
The editor canvas has +Y pointing down; Therion drawings have +Y pointing
up.  ``transform`` flips Y and rounds to ``precision`` decimals.  Rounding
is half-up (``floor(v * 10**p + 0.5) / 10**p``) so that ``x.xx5`` always
rounds toward +inf, matching the editor's own rounding.

Edge classification
-------------------
Therion writes each line vertex either as a single ``x y`` pair (straight
edge into the vertex) or as ``c1x c1y c2x c2y x y`` (cubic Bezier edge into
the vertex).  The edge into segment ``i`` is curved iff the previous
segment has an outgoing handle or segment ``i`` has an incoming handle.
When only one side has a handle, the other control point is simply that
side's anchor; the arithmetic produces it without special-casing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from scrap_export.errors import GeometryError
from scrap_export.scene.nodes import Segment, Vec2

DEFAULT_PRECISION = 2


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def round_half_up(value: float, precision: int = DEFAULT_PRECISION) -> float:
    """Round *value* half-up to *precision* decimals.

    Raises
    ------
    GeometryError
        If *value* is NaN or infinite, or overflows once scaled.
    """
    if not math.isfinite(value):
        raise GeometryError(f"Non-finite coordinate: {value!r}")
    factor = 10 ** precision
    scaled = value * factor + 0.5
    if not math.isfinite(scaled):
        raise GeometryError(
            f"Coordinate {value!r} out of range at precision {precision}"
        )
    rounded = math.floor(scaled) / factor
    # Normalise -0.0 so it never renders with a sign.
    return rounded + 0.0


def format_number(value: float) -> str:
    """Render a rounded number the way the format expects.

    Integral values lose their fractional part (``10``, not ``10.0``);
    everything else uses the shortest round-tripping decimal (``18.95``).
    """
    if not math.isfinite(value):
        raise GeometryError(f"Non-finite coordinate: {value!r}")
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def transform(
    x: float, y: float, precision: int = DEFAULT_PRECISION,
) -> Vec2:
    """Map a canvas point to Therion coordinates (Y flipped, rounded)."""
    return round_half_up(x, precision), round_half_up(-y, precision)


def format_point(point: Vec2, precision: int = DEFAULT_PRECISION) -> str:
    """Transform *point* and render it as ``"x y"``."""
    tx, ty = transform(point[0], point[1], precision)
    return f"{format_number(tx)} {format_number(ty)}"


# ---------------------------------------------------------------------------
# Edge classifier
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Edge:
    """One coordinate line of a ``.th2`` line body.

    Parameters
    ----------
    index : int
        Segment index the edge ends at.
    points : tuple[Vec2, ...]
        Canvas-space points: ``(anchor,)`` for a straight edge or
        ``(control1, control2, anchor)`` for a curved one.
    closing : bool
        ``True`` for the trailing duplicate of edge 0 on closed paths.
    """

    index: int
    points: tuple[Vec2, ...]
    closing: bool = False

    def render(self, precision: int = DEFAULT_PRECISION) -> str:
        return " ".join(format_point(p, precision) for p in self.points)


def _edge_into(
    segments: Sequence[Segment], index: int, closed: bool,
) -> tuple[Vec2, ...]:
    cur = segments[index]
    if index == 0 and not closed:
        return (cur.anchor,)

    prev = segments[index - 1]  # index -1 wraps to the last segment
    if prev.has_handle_out or cur.has_handle_in:
        return (prev.control_out(), cur.control_in(), cur.anchor)
    return (cur.anchor,)


def classify_edges(
    segments: Sequence[Segment], closed: bool,
) -> list[Edge]:
    """Classify every edge of a path as straight or curved.

    Parameters
    ----------
    segments : Sequence[Segment]
        Path vertices in drawing order.
    closed : bool
        Whether the path loops back to its first vertex.

    Returns
    -------
    list[Edge]
        One edge per segment, plus -- for closed paths -- a final copy of
        edge 0 marked ``closing=True``.
    """
    edges = [
        Edge(index=i, points=_edge_into(segments, i, closed))
        for i in range(len(segments))
    ]
    if closed and edges:
        edges.append(Edge(index=0, points=edges[0].points, closing=True))
    return edges
