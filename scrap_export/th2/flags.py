"""Settings records -> ``.th2`` option flags.

Each formatter returns the ordered list of option tokens for one object
header (``-flag value``), omitting every option whose value is unset.
Headers are assembled by the exporter.
"""

from __future__ import annotations

from scrap_export.scene.settings import (
    AreaSettings,
    LineSettings,
    PointSettings,
    ScrapSettings,
)


def _flag(name: str, value: str) -> str:
    return f"-{name} {value}"


def _bracketed(value: str) -> str:
    """Wrap multi-token values in ``[...]``; single tokens stay bare."""
    if len(value.split()) > 1:
        return f"[{value}]"
    return value


def scrap_flags(settings: ScrapSettings) -> list[str]:
    """Options of a ``scrap`` header.

    Order: ``-scale``, ``-projection``, ``-author``, ``-copyright``,
    ``-station-names``, then every ``extra`` entry in insertion order.
    """
    flags: list[str] = []
    if settings.scale is not None:
        flags.append(_flag("scale", _bracketed(settings.scale)))
    if settings.projection is not None:
        flags.append(_flag("projection", _bracketed(settings.projection)))
    if settings.author is not None:
        flags.append(_flag("author", settings.author))
    if settings.copyright is not None:
        flags.append(_flag("copyright", settings.copyright))
    if settings.station_names is not None:
        flags.append(_flag("station-names", settings.station_names))
    for key, value in settings.extra.items():
        flags.append(_flag(key, value))
    return flags


def line_flags(
    settings: LineSettings, closed: bool, line_id: str | None = None,
) -> list[str]:
    """Options of a ``line`` header.

    *line_id* overrides ``settings.id``; the exporter passes the generated
    id of an area's border line through it.
    """
    flags: list[str] = []
    if closed:
        flags.append(_flag("close", "on"))
    effective_id = line_id if line_id is not None else settings.id
    if effective_id is not None:
        flags.append(_flag("id", effective_id))
    return flags


def point_flags(settings: PointSettings) -> list[str]:
    """Options of a ``point`` header."""
    if settings.name is not None:
        return [_flag("name", settings.name)]
    return []


def area_flags(settings: AreaSettings) -> list[str]:
    """Options of an ``area`` header."""
    if settings.invisible:
        return [_flag("visibility", "off")]
    return []
