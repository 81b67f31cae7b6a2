"""Therion exporter -- scene tree to ``.th2`` lines.

All geometry transforms (Y flip, rounding) happen **here**; the scene tree
stays in editor canvas coordinates.

Output layout::

    encoding utf-8
    scrap <name> <flags>
    	point <x> <y> <type> [-name <n>]
    	line <type> [-close on] [-id <id>]
    		<x> <y>  |  <c1x> <c1y> <c2x> <c2y> <x> <y>
    		[subtype <t>] [<segment options>]
    		[size <n>]
    	endline
    	area <type> [-visibility off]
    		<border id>
    	endarea
    endscrap

Indentation is cosmetic for Therion but must match exactly for files to
diff cleanly against earlier exports.

Identifier allocation:
    An area whose border line has no id gets one from the injected
    ``IdAllocator`` -- exactly one draw per such area per run.  The same
    token is written as the line's ``-id`` and as the area's member.
"""

from __future__ import annotations

import logging

from scrap_export.errors import InvalidTree
from scrap_export.scene.nodes import (
    Layer,
    Node,
    OpaqueNode,
    PathFeature,
    PointFeature,
    Project,
)
from scrap_export.scene.settings import AreaSettings, LineSettings
from scrap_export.th2.flags import (
    area_flags,
    line_flags,
    point_flags,
    scrap_flags,
)
from scrap_export.th2.geometry import (
    DEFAULT_PRECISION,
    classify_edges,
    format_number,
    format_point,
)
from scrap_export.th2.ids import IdAllocator, random_id

logger = logging.getLogger(__name__)

FEATURE_INDENT = "\t"
BODY_INDENT = "\t\t"

# Escape sequence the editor's single-line option field stores for a
# typed line break.
SEGMENT_OPTION_BREAK = "\\n"
SEGMENT_OPTION_SEPARATOR = ";"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _header(keyword: str, name: str, flags: list[str]) -> str:
    return " ".join([keyword, name, *flags])


def _segment_options(text: str) -> list[str]:
    """Split a segment option string into one option per line.

    Splits on the ``\\n`` escape first, then on ``;``.  A literal newline
    character inside an option is kept as-is.
    """
    options: list[str] = []
    for chunk in text.split(SEGMENT_OPTION_BREAK):
        options.extend(
            piece for piece in chunk.split(SEGMENT_OPTION_SEPARATOR) if piece
        )
    return options


def _segment_metadata(settings: LineSettings, index: int) -> list[str]:
    """Lines written right after the coordinate line of segment *index*."""
    lines: list[str] = []
    subtype = settings.subtypes.get(index)
    if subtype:
        lines.append(f"subtype {subtype}")
    options = settings.segment_settings.get(index)
    if options:
        lines.extend(_segment_options(options))
    return lines


def render_document(lines: list[str], trailing_newline: bool = False) -> str:
    """Join exported lines into file content."""
    text = "\n".join(lines)
    if trailing_newline:
        text += "\n"
    return text


# ---------------------------------------------------------------------------
# Exporter
# ---------------------------------------------------------------------------


class Th2Exporter:
    """Convert a scene tree to ``.th2`` lines.

    Parameters
    ----------
    allocate_id : IdAllocator
        Source of border-line ids for areas without one.
    precision : int
        Decimals kept by the coordinate transform.
    encoding : str
        Value written on the leading ``encoding`` line.

    Notes
    -----
    The exporter holds no state between ``export_project`` calls; each
    call returns a new list.
    """

    def __init__(
        self,
        allocate_id: IdAllocator = random_id,
        precision: int = DEFAULT_PRECISION,
        encoding: str = "utf-8",
    ) -> None:
        self._allocate_id = allocate_id
        self._precision = precision
        self._encoding = encoding

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def export_project(self, project: Project) -> list[str]:
        """Export every layer of *project* as a scrap.

        Parameters
        ----------
        project : Project
            Top-level nodes in document order.  Non-layer nodes are
            skipped.

        Returns
        -------
        list[str]
            Complete ``.th2`` content, one entry per line.

        Raises
        ------
        InvalidTree
            If a node violates the tree invariants.
        GeometryError
            If a coordinate is NaN or infinite.
        """
        lines = [f"encoding {self._encoding}"]
        scraps = 0

        for i, node in enumerate(project):
            path = f"project[{i}]"
            if isinstance(node, Layer):
                lines.extend(self.export_layer(node, path))
                scraps += 1
            elif isinstance(node, OpaqueNode):
                logger.debug("Skipping top-level %r at %s", node.kind, path)
            else:
                raise InvalidTree(
                    f"unexpected top-level node {type(node).__name__}", path,
                )

        logger.info("Exported %d scrap(s), %d line(s)", scraps, len(lines))
        return lines

    def export_layer(self, layer: Layer, path: str = "layer") -> list[str]:
        """Export one layer as a ``scrap`` ... ``endscrap`` block."""
        flags = " ".join(scrap_flags(layer.settings))
        lines = [f"scrap {layer.name} {flags}"]

        for i, child in enumerate(layer.children):
            lines.extend(self._export_child(child, f"{path}.children[{i}]"))

        lines.append("endscrap")
        logger.debug(
            "Scrap %r: %d child(ren)", layer.name, len(layer.children),
        )
        return lines

    # ------------------------------------------------------------------
    # Internal: per-node dispatch
    # ------------------------------------------------------------------

    def _export_child(self, node: Node, path: str) -> list[str]:
        if isinstance(node, PointFeature):
            return self._gen_point(node)
        if isinstance(node, PathFeature):
            if isinstance(node.settings, AreaSettings):
                return self._gen_area(node, node.settings, path)
            if isinstance(node.settings, LineSettings):
                return self._gen_line(node, node.line_settings, path)
            raise InvalidTree(
                f"unsupported path settings {type(node.settings).__name__}",
                path,
            )
        raise InvalidTree(
            f"unsupported layer child {type(node).__name__}", path,
        )

    # ------------------------------------------------------------------
    # Individual generators
    # ------------------------------------------------------------------

    def _gen_point(self, node: PointFeature) -> list[str]:
        position = format_point(node.position, self._precision)
        header = " ".join(
            ["point", position, node.settings.type, *point_flags(node.settings)]
        )
        return [FEATURE_INDENT + header]

    def _gen_line(
        self,
        node: PathFeature,
        settings: LineSettings,
        path: str,
        line_id: str | None = None,
    ) -> list[str]:
        self._validate_path(node, settings, path)

        header = _header(
            "line", settings.type, line_flags(settings, node.closed, line_id),
        )
        lines = [FEATURE_INDENT + header]

        for edge in classify_edges(node.segments, node.closed):
            lines.append(BODY_INDENT + edge.render(self._precision))
            if edge.closing:
                continue
            lines.extend(
                BODY_INDENT + meta
                for meta in _segment_metadata(settings, edge.index)
            )

        if settings.size is not None:
            lines.append(f"{BODY_INDENT}size {format_number(settings.size)}")

        lines.append(FEATURE_INDENT + "endline")
        return lines

    def _gen_area(
        self, node: PathFeature, settings: AreaSettings, path: str,
    ) -> list[str]:
        border = node.line_settings
        line_id = border.id
        if line_id is None:
            line_id = self._allocate_id()

        lines = self._gen_line(node, border, path, line_id)
        lines.append(
            FEATURE_INDENT
            + _header("area", settings.type, area_flags(settings))
        )
        lines.append(BODY_INDENT + line_id)
        lines.append(FEATURE_INDENT + "endarea")
        return lines

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_path(
        self, node: PathFeature, settings: LineSettings, path: str,
    ) -> None:
        """Reject paths whose per-segment metadata points past the end.

        Raises
        ------
        InvalidTree
            If the path is empty or a metadata index is out of range.
        """
        count = len(node.segments)
        if count == 0:
            raise InvalidTree("path has no segments", path)
        for label, mapping in (
            ("subtypes", settings.subtypes),
            ("segment settings", settings.segment_settings),
        ):
            for index in mapping:
                if not 0 <= index < count:
                    raise InvalidTree(
                        f"{label} index {index} outside [0, {count})", path,
                    )


# ---------------------------------------------------------------------------
# Function form
# ---------------------------------------------------------------------------


def process_project(
    project: Project,
    allocate_id: IdAllocator = random_id,
    precision: int = DEFAULT_PRECISION,
) -> list[str]:
    """Export *project* with a fresh ``Th2Exporter``."""
    return Th2Exporter(allocate_id=allocate_id, precision=precision).export_project(
        project,
    )
