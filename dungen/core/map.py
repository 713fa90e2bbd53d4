"""Generated map representation handed to rendering and enrichment code.

MapData is the only thing that leaves the solver. Unlike the solver's own
state it is deliberately mutable: post-processing may add marker tags to
tiles, but must not strip the structural tag a tile was generated with.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from .tags import Tag, UNDEFINED_TAG
from .tiles import TileDefinition


class MapTile:
    """One resolved map position: a primary tag plus any extra tags."""

    def __init__(self, primary_tag: Tag = Tag("empty"), *extra_tags: Tag):
        self._primary_tag = primary_tag
        self._tags: dict[Tag, None] = {primary_tag: None}
        for tag in extra_tags:
            self._tags.setdefault(tag, None)

    @classmethod
    def from_tile(cls, tile: TileDefinition) -> MapTile:
        """Build a map tile carrying every tag of a tile definition."""
        if not tile.tags:
            return cls(UNDEFINED_TAG)
        return cls(*tile.tags)

    @property
    def primary_tag(self) -> Tag:
        return self._primary_tag

    @primary_tag.setter
    def primary_tag(self, tag: Tag) -> None:
        """Replace the primary tag. All other tags are dropped."""
        self._primary_tag = tag
        self._tags = {tag: None}

    @property
    def tags(self) -> frozenset[Tag]:
        """Copy of the tag set; mutate through add_tag/remove_tag."""
        return frozenset(self._tags)

    def has_tag(self, tag: Tag) -> bool:
        return tag in self._tags

    def has_any_tag(self, tags: Iterable[Tag]) -> bool:
        return any(tag in self._tags for tag in tags)

    def has_all_tags(self, tags: Iterable[Tag]) -> bool:
        return all(tag in self._tags for tag in tags)

    def add_tag(self, tag: Tag) -> None:
        self._tags.setdefault(tag, None)

    def remove_tag(self, tag: Tag) -> None:
        """Remove a secondary tag.

        Raises:
            ValueError: If `tag` is the primary tag
        """
        if tag == self._primary_tag:
            raise ValueError(f"Cannot remove the primary tag '{tag}'")
        self._tags.pop(tag, None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapTile):
            return NotImplemented
        return self._primary_tag == other._primary_tag and self.tags == other.tags

    def __repr__(self) -> str:
        extras = [tag.name for tag in self._tags if tag != self._primary_tag]
        if extras:
            return f"MapTile({self._primary_tag.name}, +{','.join(extras)})"
        return f"MapTile({self._primary_tag.name})"


class MapData:
    """A width x height grid of MapTiles, indexed as map_data[x, y]."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._tiles: list[list[MapTile]] = [
            [MapTile(UNDEFINED_TAG) for _ in range(width)]
            for _ in range(height)
        ]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def __getitem__(self, position: tuple[int, int]) -> MapTile:
        x, y = position
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside {self.width}x{self.height} map")
        return self._tiles[y][x]

    def __setitem__(self, position: tuple[int, int], tile: MapTile) -> None:
        x, y = position
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside {self.width}x{self.height} map")
        self._tiles[y][x] = tile

    def all_tiles(self) -> Iterator[MapTile]:
        """Iterate row by row, left to right."""
        for row in self._tiles:
            yield from row

    def positions_with_tag(self, tag: Tag) -> list[tuple[int, int]]:
        """All (x, y) positions whose tile carries `tag`."""
        return [
            (x, y)
            for y, row in enumerate(self._tiles)
            for x, tile in enumerate(row)
            if tile.has_tag(tag)
        ]

    def tag_counts(self) -> dict[Tag, int]:
        """How many tiles carry each primary tag."""
        counts: dict[Tag, int] = {}
        for tile in self.all_tiles():
            counts[tile.primary_tag] = counts.get(tile.primary_tag, 0) + 1
        return counts

    def rows(self) -> list[list[MapTile]]:
        """Copy of the grid as rows, indexed [y][x]."""
        return [list(row) for row in self._tiles]

    def __repr__(self) -> str:
        return f"MapData({self.width}x{self.height})"
