"""Project JSON -> scene tree.

The editor saves its drawing with paper.js ``exportJSON``: every item is a
two-element list ``[className, props]`` and the cartographic settings live
on ``props.data.therionData``.  This module validates that structure with
pydantic and builds the immutable scene tree the exporter consumes.

Accepted shapes::

    [["dictionary", {...}], ["Layer", {...}], ...]
    [["dictionary", {...}], [["Layer", {...}], ...]]   # wrapped layers

Layer children:
    ``SymbolItem`` -> ``PointFeature`` (position = matrix translation)
    ``Path``       -> ``PathFeature`` (``AreaSettings`` when therionData
                      has ``lineSettings``, ``LineSettings`` otherwise)

Every validation failure is re-raised as ``InvalidTree`` carrying the
location of the offending item, e.g. ``project[1].children[0]``.

Usage::

    from scrap_export.scene.decoder import load_project
    project = load_project("cave.json")
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from scrap_export.errors import InvalidTree
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

logger = logging.getLogger(__name__)


# ============================================================================
# SETTINGS SCHEMA
# ============================================================================

def _empty_to_none(v: Any) -> Any:
    if v == "":
        return None
    return v


def _to_text(v: Any) -> Any:
    """Accept numbers where the editor stored free text (e.g. name ``0``)."""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class _SettingsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LineSettingsModel(_SettingsModel):
    """``therionData`` of a line path."""
    type: str = Field(..., min_length=1)
    id: Optional[str] = None
    size: Optional[float] = None
    subtypes: Dict[int, str] = Field(default_factory=dict)
    segment_settings: Dict[int, str] = Field(
        default_factory=dict, alias="segmentSettings",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _id_text(cls, v: Any) -> Any:
        return _empty_to_none(_to_text(v))

    @field_validator("size", mode="before")
    @classmethod
    def _size_blank(cls, v: Any) -> Any:
        return _empty_to_none(v)

    @field_validator("subtypes", "segment_settings", mode="before")
    @classmethod
    def _sparse_null(cls, v: Any) -> Any:
        return {} if v is None else v

    def to_settings(self) -> LineSettings:
        return LineSettings(
            type=self.type,
            id=self.id,
            size=self.size,
            subtypes=self.subtypes,
            segment_settings=self.segment_settings,
        )


class PointSettingsModel(_SettingsModel):
    """``therionData`` of a point symbol."""
    type: str = Field(..., min_length=1)
    name: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_text(cls, v: Any) -> Any:
        return _to_text(v)

    def to_settings(self) -> PointSettings:
        return PointSettings(type=self.type, name=self.name)


class AreaSettingsModel(_SettingsModel):
    """``therionData`` of an area path (border line settings nested)."""
    type: str = Field(..., min_length=1)
    invisible: bool = False
    line_settings: LineSettingsModel = Field(..., alias="lineSettings")

    def to_settings(self) -> AreaSettings:
        return AreaSettings(
            type=self.type,
            line_settings=self.line_settings.to_settings(),
            invisible=self.invisible,
        )


class ScrapSettingsModel(_SettingsModel):
    """``therionData`` of a layer."""
    scale: Optional[str] = None
    projection: Optional[str] = None
    author: Optional[str] = None
    copyright: Optional[str] = None
    station_names: Optional[str] = Field(None, alias="stationNames")
    map: Dict[str, str] = Field(default_factory=dict)

    @field_validator("map", mode="before")
    @classmethod
    def _map_pairs(cls, v: Any) -> Any:
        """Accept a serialised JS ``Map`` (list of ``[key, value]`` pairs)."""
        if v is None:
            return {}
        if isinstance(v, list):
            try:
                return {str(k): val for k, val in v}
            except (TypeError, ValueError) as e:
                raise ValueError(
                    f"map must be an object or a list of [key, value] pairs: {e}"
                ) from e
        return v

    def to_settings(self) -> ScrapSettings:
        return ScrapSettings(
            scale=self.scale,
            projection=self.projection,
            author=self.author,
            copyright=self.copyright,
            station_names=self.station_names,
            extra=self.map,
        )


# ============================================================================
# ITEM SCHEMA
# ============================================================================

_Point = Tuple[float, float]
_SEGMENT = TypeAdapter(Union[_Point, Tuple[_Point, _Point, _Point]])


class _ItemModel(BaseModel):
    model_config = ConfigDict(extra="ignore")
    data: Dict[str, Any] = Field(default_factory=dict)

    def therion_data(self) -> Optional[Dict[str, Any]]:
        return self.data.get("therionData")


class LayerModel(_ItemModel):
    name: str = ""
    children: List[Any] = Field(default_factory=list)


class SymbolItemModel(_ItemModel):
    matrix: Tuple[float, float, float, float, float, float] = (1, 0, 0, 1, 0, 0)
    symbol: Any = None


class PathModel(_ItemModel):
    segments: List[Any] = Field(default_factory=list)
    closed: bool = False


# ============================================================================
# DECODING
# ============================================================================

def _validate(model: type[BaseModel], raw: Any, path: str) -> Any:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise InvalidTree(f"{model.__name__} validation failed: {e}", path) from e


def _is_item(entry: Any) -> bool:
    return (
        isinstance(entry, list)
        and len(entry) == 2
        and isinstance(entry[0], str)
    )


def _decode_segment(raw: Any, path: str) -> Segment:
    try:
        value = _SEGMENT.validate_python(raw)
    except ValidationError as e:
        raise InvalidTree(
            f"segment must be [x, y] or [[x, y], [hx, hy], [hx, hy]]: {e}",
            path,
        ) from e
    if isinstance(value[0], tuple):
        anchor, handle_in, handle_out = value
        return Segment(anchor=anchor, handle_in=handle_in, handle_out=handle_out)
    return Segment(anchor=value)


def _decode_symbol(props: Any, path: str) -> PointFeature:
    item = _validate(SymbolItemModel, props, path)
    raw = item.therion_data()
    if raw is None:
        raise InvalidTree("symbol has no therionData", path)
    settings = _validate(PointSettingsModel, raw, f"{path}.therionData")
    symbol = item.symbol
    if isinstance(symbol, list):
        symbol = symbol[0] if symbol else None
    return PointFeature(
        position=(item.matrix[4], item.matrix[5]),
        settings=settings.to_settings(),
        symbol=str(symbol) if symbol is not None else None,
    )


def _decode_path(props: Any, path: str) -> PathFeature:
    item = _validate(PathModel, props, path)
    raw = item.therion_data()
    if raw is None:
        raise InvalidTree("path has no therionData", path)
    if isinstance(raw, dict) and "lineSettings" in raw:
        model: type[BaseModel] = AreaSettingsModel
    else:
        model = LineSettingsModel
    settings = _validate(model, raw, f"{path}.therionData")
    segments = tuple(
        _decode_segment(seg, f"{path}.segments[{i}]")
        for i, seg in enumerate(item.segments)
    )
    return PathFeature(
        segments=segments,
        settings=settings.to_settings(),
        closed=item.closed,
    )


_CHILD_DECODERS = {
    "SymbolItem": _decode_symbol,
    "Path": _decode_path,
}


def _decode_layer(props: Any, path: str) -> Layer:
    item = _validate(LayerModel, props, path)
    raw = item.therion_data()
    if raw is None:
        settings = ScrapSettings()
    else:
        settings = _validate(
            ScrapSettingsModel, raw, f"{path}.therionData",
        ).to_settings()

    children: list[PointFeature | PathFeature] = []
    for i, entry in enumerate(item.children):
        child_path = f"{path}.children[{i}]"
        if not _is_item(entry):
            raise InvalidTree("expected [className, props]", child_path)
        kind, child_props = entry
        decoder = _CHILD_DECODERS.get(kind)
        if decoder is None:
            raise InvalidTree(f"unsupported layer child {kind!r}", child_path)
        children.append(decoder(child_props, child_path))

    return Layer(name=item.name, children=tuple(children), settings=settings)


def _top_level_items(data: Any) -> list[tuple[str, Any]]:
    """Flatten top-level entries, unwrapping one level of list nesting."""
    if not isinstance(data, list):
        raise InvalidTree("project must be a list of items", "project")

    items: list[tuple[str, Any]] = []
    for i, entry in enumerate(data):
        if _is_item(entry):
            items.append((f"project[{i}]", entry))
        elif isinstance(entry, list) and all(_is_item(e) for e in entry):
            items.extend(
                (f"project[{i}][{j}]", e) for j, e in enumerate(entry)
            )
        else:
            raise InvalidTree("expected [className, props]", f"project[{i}]")
    return items


def decode_project(data: Any) -> Project:
    """Build the scene tree from parsed project JSON.

    Parameters
    ----------
    data : Any
        Result of ``json.load`` on an editor project file.

    Returns
    -------
    Project
        Top-level nodes in document order.  Non-layer entries become
        ``OpaqueNode``.

    Raises
    ------
    InvalidTree
        If any item fails validation.
    """
    nodes: list[Node] = []
    for path, (kind, props) in _top_level_items(data):
        if kind == "Layer":
            nodes.append(_decode_layer(props, path))
        else:
            nodes.append(OpaqueNode(kind=kind))
    logger.debug("Decoded %d top-level node(s)", len(nodes))
    return tuple(nodes)


def load_project(path: Union[str, Path]) -> Project:
    """Read and decode a project JSON file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    InvalidTree
        If the file is not valid JSON or fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidTree(f"invalid JSON in {path}: {e}", "project") from e

    return decode_project(data)
