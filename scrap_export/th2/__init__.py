"""
Therion ``.th2`` export module.

Converts the scene tree to ``.th2`` lines with coordinate transforms,
curve/corner classification, and settings flags.
"""

from scrap_export.th2.exporter import Th2Exporter, process_project, render_document

__all__ = ["Th2Exporter", "process_project", "render_document"]
