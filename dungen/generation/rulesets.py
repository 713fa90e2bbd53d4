"""
Bundled rulesets.

A ruleset supplies the three things the solver needs from the outside: the
tile catalog, the tag relations between those tiles, and optional seeds.

    simple:  floor and wall, never adjacent. Every map comes out as one
             solid block, mostly floor.
    dungeon: floor and wall plus entrance and treasure tiles that count as
             floor. One entrance is seeded at the map center.
"""

from __future__ import annotations

from typing import Protocol

from ..core.tags import Tag
from ..core.tiles import TileCatalog, make_tile
from ..services.tag_relations import TagRelationService
from .wfc import Seed

WALL = Tag("wall")
FLOOR = Tag("floor")
ENTRANCE = Tag("entrance")
TREASURE = Tag("treasure")


class Ruleset(Protocol):
    """Protocol for map rulesets."""

    name: str
    description: str

    def register_tags(self, tag_service: TagRelationService) -> None:
        """Add this ruleset's relations to the registry."""
        ...

    def tile_catalog(self) -> TileCatalog:
        ...

    def seeds(self, width: int, height: int) -> list[Seed]:
        """Placements to make before solving a width x height map."""
        ...


class SimpleRuleset:
    """Two tiles, floor (weight 3) and wall (weight 1), that repel each other."""

    name = "simple"
    description = "A simple ruleset for testing."

    def __init__(self):
        self.floor = make_tile("Floor", FLOOR, weight=3.0)
        self.wall = make_tile("Wall", WALL, weight=1.0)

    def register_tags(self, tag_service: TagRelationService) -> None:
        tag_service.add_antagonism(WALL, FLOOR)

    def tile_catalog(self) -> TileCatalog:
        return TileCatalog("Simple", [self.floor, self.wall])

    def seeds(self, width: int, height: int) -> list[Seed]:
        return []


class DungeonRuleset:
    """Walls, floors, an entrance, and treasure."""

    name = "dungeon"
    description = "Dungeon ruleset with walls, floors, entrance, and treasure."

    def __init__(self):
        # Keep single instances so seeds reference the same tiles as the catalog
        self.floor = make_tile("Floor", FLOOR, weight=4.0)
        self.wall = make_tile("Wall", WALL, weight=1.0)
        self.entrance = make_tile("Entrance", ENTRANCE, FLOOR, weight=0.2)
        self.treasure = make_tile("Treasure", TREASURE, FLOOR, weight=0.1)

    def register_tags(self, tag_service: TagRelationService) -> None:
        tag_service.add_antagonism(WALL, FLOOR)

        # Special tiles prefer to sit on floor
        tag_service.add_affinity(ENTRANCE, FLOOR)
        tag_service.add_affinity(TREASURE, FLOOR)

    def tile_catalog(self) -> TileCatalog:
        return TileCatalog(
            "Dungeon",
            [self.floor, self.wall, self.entrance, self.treasure],
            description="Basic dungeon tiles",
        )

    def seeds(self, width: int, height: int) -> list[Seed]:
        """A single entrance at the map center."""
        return [(width // 2, height // 2, self.entrance)]


RULESETS: dict[str, type] = {
    SimpleRuleset.name: SimpleRuleset,
    DungeonRuleset.name: DungeonRuleset,
}


def get_ruleset(name: str) -> Ruleset:
    """Instantiate a bundled ruleset by name.

    Raises:
        KeyError: If no ruleset has that name
    """
    try:
        return RULESETS[name]()
    except KeyError:
        raise KeyError(f"Unknown ruleset '{name}'. Available: {', '.join(sorted(RULESETS))}") from None
