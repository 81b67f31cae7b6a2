"""
Scrap Export Package.

Therion ``.th2`` export engine for the cave-survey drawing editor.  Turns an
immutable scene tree (layers, paths, point symbols and their cartographic
settings) into the line-oriented Therion drawing format.

Subpackages:
    scene: Scene-tree vocabulary and project JSON decoding
    th2: Coordinate transforms, settings flags, and the exporter itself
    configs: Export configuration loading and validation
    utils: Logging setup and filesystem helpers
    scripts: Command-line entry points
"""

__all__ = ["scene", "th2", "configs", "utils", "scripts"]
