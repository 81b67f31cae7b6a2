"""
Scene-tree module.

Defines the immutable scene tree (layers, point and path features, their
settings) and decodes the editor's project JSON into it.  This vocabulary
is the contract between the drawing editor and the Therion exporter.

Coordinates are editor canvas units (+Y down).
"""

from scrap_export.scene.nodes import (
    Layer,
    Node,
    OpaqueNode,
    PathFeature,
    PointFeature,
    Project,
    Segment,
)
from scrap_export.scene.settings import (
    AreaSettings,
    LineSettings,
    PointSettings,
    ScrapSettings,
)

__all__ = [
    "AreaSettings",
    "Layer",
    "LineSettings",
    "Node",
    "OpaqueNode",
    "PathFeature",
    "PointFeature",
    "PointSettings",
    "Project",
    "ScrapSettings",
    "Segment",
]
