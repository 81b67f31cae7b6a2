"""Cartographic settings records attached to scene-tree nodes.

These are plain value snapshots of what the editor keeps on each item's
``data.therionData``.  The editor's live objects carry defaults and undo
history; the exporter only ever sees these frozen copies.

Unset values
------------
The editor stores "not set" as an empty string as often as it stores
``None``.  Every optional text field is normalised so that ``""`` becomes
``None`` on construction, and the exporter only has to test for ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


def _blank_to_none(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    return value


@dataclass(frozen=True, slots=True)
class LineSettings:
    """Settings of a Therion ``line``.

    Parameters
    ----------
    type : str
        Line type, e.g. ``"wall"``, ``"border"``, ``"slope"``.
    id : str | None
        Cross-reference id written as ``-id``.  Areas reference their
        border line through it.
    size : float | None
        Written as a trailing ``size`` line (used by slopes).
    subtypes : Mapping[int, str]
        Sparse segment index -> subtype written after that segment.
    segment_settings : Mapping[int, str]
        Sparse segment index -> free-form option text written after that
        segment.  Multiple options are separated by ``;``.
    """

    type: str
    id: str | None = None
    size: float | None = None
    subtypes: Mapping[int, str] = field(default_factory=dict)
    segment_settings: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("LineSettings.type must be a non-empty string")
        object.__setattr__(self, "id", _blank_to_none(self.id))
        object.__setattr__(self, "subtypes", dict(self.subtypes))
        object.__setattr__(
            self, "segment_settings", dict(self.segment_settings),
        )


@dataclass(frozen=True, slots=True)
class PointSettings:
    """Settings of a Therion ``point`` (symbol type and optional name)."""

    type: str
    name: str | None = None

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("PointSettings.type must be a non-empty string")
        object.__setattr__(self, "name", _blank_to_none(self.name))


@dataclass(frozen=True, slots=True)
class AreaSettings:
    """Settings of a Therion ``area``.

    An area is always drawn from a border line; ``line_settings`` describes
    that line.

    Parameters
    ----------
    type : str
        Area type, e.g. ``"water"``, ``"sand"``.
    line_settings : LineSettings
        Settings of the border line emitted before the area block.
    invisible : bool
        ``True`` writes ``-visibility off``.
    """

    type: str
    line_settings: LineSettings
    invisible: bool = False

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("AreaSettings.type must be a non-empty string")


@dataclass(frozen=True, slots=True)
class ScrapSettings:
    """Settings of a Therion ``scrap`` (one per layer).

    ``extra`` holds free-form flags appended after the known ones, in
    insertion order.
    """

    scale: str | None = None
    projection: str | None = None
    author: str | None = None
    copyright: str | None = None
    station_names: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("scale", "projection", "author", "copyright", "station_names"):
            object.__setattr__(self, name, _blank_to_none(getattr(self, name)))
        object.__setattr__(self, "extra", dict(self.extra))
