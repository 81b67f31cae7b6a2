"""Exceptions shared by the scene decoder and the Therion exporter.

Every failure reaches the caller as an ``ExportError`` subclass.  The
exporter never returns a partial line list.
"""

from __future__ import annotations


class ExportError(Exception):
    """Base class for all export failures."""

    pass


class InvalidTree(ExportError):
    """Raised when the scene tree violates its structural invariants.

    Parameters
    ----------
    message : str
        Human-readable description of the problem.
    path : str
        Location of the offending node, e.g. ``"project[1].children[0]"``.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class GeometryError(ExportError):
    """Raised when a coordinate cannot be written (NaN or infinite)."""

    pass
