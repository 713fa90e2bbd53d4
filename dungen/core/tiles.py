"""Tile definitions and tile catalogs.

A TileDefinition is what a cell can collapse to. It carries the tags that
drive adjacency, a weight for biased sampling, and whether rulesets may use
it as a seed. Catalogs are supplied by rulesets and never mutated by the
solver.
"""

from __future__ import annotations

import random
from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .tags import Tag, to_tags


class TileDefinition(BaseModel):
    """A tile type that can appear in the generated map.

    Attributes:
        name: Display name, unique within a catalog (e.g. "Floor")
        tags: Semantic tags in declaration order. The first tag is the primary one.
        weight: Probability weight. When collapsing a cell, candidates are
                chosen proportionally to their weights.
        can_be_seed: Whether rulesets may pre-place this tile.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    tags: tuple[Tag, ...] = ()
    weight: float = Field(default=1.0, ge=0)
    can_be_seed: bool = True

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> tuple[Tag, ...]:
        if isinstance(value, (str, Tag)):
            value = [value]
        return to_tags(value)

    @property
    def primary_tag(self) -> Tag | None:
        """The first declared tag, or None for an untagged tile."""
        return self.tags[0] if self.tags else None

    def has_tag(self, tag: Tag) -> bool:
        return tag in self.tags

    def has_any_tag(self, tags: Iterable[Tag]) -> bool:
        return any(tag in self.tags for tag in tags)

    def has_all_tags(self, tags: Iterable[Tag]) -> bool:
        return all(tag in self.tags for tag in tags)

    def __str__(self) -> str:
        tag_names = ", ".join(tag.name for tag in self.tags)
        return f"{self.name} [{tag_names}]"


def make_tile(
    name: str,
    *tags: Tag | str,
    weight: float = 1.0,
    can_be_seed: bool = True,
) -> TileDefinition:
    """Shorthand for building a tile from positional tags."""
    return TileDefinition(name=name, tags=tags, weight=weight, can_be_seed=can_be_seed)


class TileCatalog:
    """An ordered collection of tile definitions, the content pack for one map."""

    def __init__(
        self,
        name: str = "Unnamed Tileset",
        tiles: Iterable[TileDefinition] = (),
        description: str = "",
    ):
        self.name = name
        self.description = description
        self._tiles: list[TileDefinition] = []
        for tile in tiles:
            self.add_tile(tile)

    @property
    def tiles(self) -> tuple[TileDefinition, ...]:
        return tuple(self._tiles)

    def __iter__(self) -> Iterator[TileDefinition]:
        return iter(tuple(self._tiles))

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, tile: object) -> bool:
        return tile in self._tiles

    def add_tile(self, tile: TileDefinition) -> None:
        """Add a tile. Adding the same tile twice is ignored."""
        if tile not in self._tiles:
            self._tiles.append(tile)

    def remove_tile(self, tile: TileDefinition) -> None:
        """Remove a tile if present."""
        if tile in self._tiles:
            self._tiles.remove(tile)

    def get(self, name: str) -> TileDefinition | None:
        """Look up a tile by name."""
        for tile in self._tiles:
            if tile.name == name:
                return tile
        return None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def tiles_with_tag(self, tag: Tag) -> list[TileDefinition]:
        return [tile for tile in self._tiles if tile.has_tag(tag)]

    def tiles_with_any_tag(self, tags: Iterable[Tag]) -> list[TileDefinition]:
        tags = list(tags)
        return [tile for tile in self._tiles if tile.has_any_tag(tags)]

    def seed_tiles(self) -> list[TileDefinition]:
        """Tiles that rulesets may pre-place."""
        return [tile for tile in self._tiles if tile.can_be_seed]

    def all_tags(self) -> list[Tag]:
        """Every distinct tag used in the catalog, in first-seen order."""
        return list(to_tags(tag for tile in self._tiles for tag in tile.tags))

    def has_tag_in_set(self, tag_name: str) -> bool:
        """Check whether any tile carries the named tag."""
        tag = Tag.try_create(tag_name)
        return tag is not None and any(tile.has_tag(tag) for tile in self._tiles)

    def random_tile_with_tag(
        self,
        tag: Tag,
        rng: random.Random | None = None,
    ) -> TileDefinition | None:
        """Pick a tile carrying `tag`, weighted by tile weight."""
        candidates = self.tiles_with_tag(tag)
        if not candidates:
            return None

        rng = rng or random.Random()
        weights = [tile.weight for tile in candidates]
        if sum(weights) <= 0:
            return candidates[0]
        return rng.choices(candidates, weights=weights, k=1)[0]

    def validate(self) -> list[str]:
        """Check the catalog for common authoring mistakes.

        Returns a list of human-readable issues; empty means the catalog is fine.
        """
        issues: list[str] = []

        if not self.name or not self.name.strip():
            issues.append("TileSet name is empty")

        if not self._tiles:
            issues.append("TileSet contains no tiles")

        untagged = [tile for tile in self._tiles if not tile.tags]
        if untagged:
            issues.append(f"{len(untagged)} tile(s) have no tags")

        seen: set[str] = set()
        duplicates: list[str] = []
        for tile in self._tiles:
            if tile.name in seen and tile.name not in duplicates:
                duplicates.append(tile.name)
            seen.add(tile.name)
        if duplicates:
            issues.append(f"Duplicate tile names: {', '.join(duplicates)}")

        return issues

    def __repr__(self) -> str:
        return f"TileCatalog({self.name!r}, {len(self._tiles)} tiles)"
