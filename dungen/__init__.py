"""dungen - tag-driven Wave Function Collapse map generation.

Usage:
    from dungen import Tag, TagRelationService, generate_map, make_tile

    tags = TagRelationService()
    tags.add_antagonism(Tag("wall"), Tag("floor"))
    tiles = [make_tile("Floor", "floor", weight=3), make_tile("Wall", "wall")]
    map_data = generate_map(10, 15, tiles, tags, seed=42)
"""

__version__ = "0.1.0"

from .core import (
    Tag,
    Taggable,
    UNDEFINED_TAG,
    TileDefinition,
    TileCatalog,
    make_tile,
    MapTile,
    MapData,
)
from .services import TagRelationService
from .generation import WfcSolver, generate_map
from .config import GenerationConfig
from .errors import (
    DungenError,
    InvalidTagError,
    ConflictError,
    BoundsError,
    InvalidCandidateError,
    GenerationError,
    ContradictoryInitialStateError,
    GenerationFailedError,
)

__all__ = [
    "__version__",
    "Tag",
    "Taggable",
    "UNDEFINED_TAG",
    "TileDefinition",
    "TileCatalog",
    "make_tile",
    "MapTile",
    "MapData",
    "TagRelationService",
    "WfcSolver",
    "generate_map",
    "GenerationConfig",
    "DungenError",
    "InvalidTagError",
    "ConflictError",
    "BoundsError",
    "InvalidCandidateError",
    "GenerationError",
    "ContradictoryInitialStateError",
    "GenerationFailedError",
]
