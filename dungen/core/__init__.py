"""Core value types for dungen.

Tags, tile definitions, and the generated map representation. Nothing in
here knows about the solver.

Usage:
    from dungen.core import Tag, TileDefinition, TileCatalog, MapData
"""

from .tags import Tag, Taggable, UNDEFINED_TAG, to_tags
from .tiles import TileDefinition, TileCatalog, make_tile
from .map import MapTile, MapData

__all__ = [
    "Tag",
    "Taggable",
    "UNDEFINED_TAG",
    "to_tags",
    "TileDefinition",
    "TileCatalog",
    "make_tile",
    "MapTile",
    "MapData",
]
