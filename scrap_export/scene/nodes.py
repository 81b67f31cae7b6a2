"""Scene-tree nodes -- the vocabulary between the editor and the exporter.

Every node is an immutable, slotted dataclass.  Coordinates are in editor
canvas units with the canvas convention (+Y down); the exporter flips Y.

Shape
-----
A *project* is an ordered tuple of top-level nodes.  Only ``Layer`` nodes
are exported; anything else the editor serialises at the top level (the
paper.js symbol ``dictionary``, for instance) is kept as an ``OpaqueNode``
and skipped.

A layer's children are ``PointFeature`` and ``PathFeature`` nodes, in
drawing order.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field

from scrap_export.scene.settings import (
    AreaSettings,
    LineSettings,
    PointSettings,
    ScrapSettings,
)

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Vec2 = tuple[float, float]
"""A 2-D point or vector in canvas units."""

_ZERO: Vec2 = (0.0, 0.0)

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Segment:
    """One path vertex with optional Bezier handles.

    Parameters
    ----------
    anchor : Vec2
        Vertex position.
    handle_in, handle_out : Vec2
        Incoming / outgoing tangent vectors, **relative** to ``anchor``.
        A zero vector means "no handle" on that side.
    """

    anchor: Vec2
    handle_in: Vec2 = _ZERO
    handle_out: Vec2 = _ZERO

    @classmethod
    def corner(cls, x: float, y: float) -> Segment:
        """Build a segment without handles."""
        return cls(anchor=(x, y))

    @property
    def has_handle_in(self) -> bool:
        return self.handle_in[0] != 0 or self.handle_in[1] != 0

    @property
    def has_handle_out(self) -> bool:
        return self.handle_out[0] != 0 or self.handle_out[1] != 0

    def control_in(self) -> Vec2:
        """Absolute position of the incoming control point."""
        return (
            self.anchor[0] + self.handle_in[0],
            self.anchor[1] + self.handle_in[1],
        )

    def control_out(self) -> Vec2:
        """Absolute position of the outgoing control point."""
        return (
            self.anchor[0] + self.handle_out[0],
            self.anchor[1] + self.handle_out[1],
        )


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Node(ABC):
    """Base class for all scene-tree nodes."""

    pass


# ---------------------------------------------------------------------------
# Layer children
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PointFeature(Node):
    """A placed point symbol (station, label, ...).

    Parameters
    ----------
    position : Vec2
        Symbol placement, taken from the translation part of the item's
        matrix.
    settings : PointSettings
        Point type and optional name.
    symbol : str | None
        Editor symbol reference.  Not written to the output.
    """

    position: Vec2
    settings: PointSettings
    symbol: str | None = None


@dataclass(frozen=True, slots=True)
class PathFeature(Node):
    """A drawn path exported as a ``line`` or, with area settings, as an
    ``area`` plus its border line.
    """

    segments: tuple[Segment, ...]
    settings: LineSettings | AreaSettings
    closed: bool = False

    @property
    def line_settings(self) -> LineSettings:
        """Settings of the line actually drawn for this path."""
        if isinstance(self.settings, AreaSettings):
            return self.settings.line_settings
        return self.settings


# ---------------------------------------------------------------------------
# Top-level nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Layer(Node):
    """One drawing layer -- exported as one scrap."""

    name: str
    children: tuple[PointFeature | PathFeature, ...] = ()
    settings: ScrapSettings = field(default_factory=ScrapSettings)


@dataclass(frozen=True, slots=True)
class OpaqueNode(Node):
    """A top-level entry the exporter does not write (e.g. ``dictionary``)."""

    kind: str


Project = tuple[Node, ...]
"""A complete project: top-level nodes in document order."""
