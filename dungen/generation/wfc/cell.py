"""
Cell state for Wave Function Collapse.

A Cell holds the tiles it could still become. Before collapse it is in
superposition; after collapse it holds exactly the chosen tile.

Collapse is always explicit. A cell whose candidates shrink to one is NOT
collapsed until something calls collapse() on it.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple

from ...core.tiles import TileDefinition
from ...errors import InvalidCandidateError


class CellSnapshot(NamedTuple):
    """Frozen copy of a cell's state, used only for grid-level backtracking."""

    candidates: tuple[TileDefinition, ...]
    collapsed: bool


class Cell:
    """
    A single cell in the WFC grid.

    The "entropy" of a cell is how many candidates remain.
    0 = contradiction, 1 = forced, >1 = undetermined.
    """

    __slots__ = ("x", "y", "_candidates", "_collapsed")

    def __init__(self, x: int, y: int, candidates: Iterable[TileDefinition]):
        self.x = x
        self.y = y
        self._candidates: list[TileDefinition] = list(candidates)
        self._collapsed = False

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def candidates(self) -> tuple[TileDefinition, ...]:
        """Remaining candidate tiles, in catalog order."""
        return tuple(self._candidates)

    @property
    def entropy(self) -> int:
        return len(self._candidates)

    @property
    def collapsed(self) -> bool:
        return self._collapsed

    @property
    def collapsed_tile(self) -> TileDefinition | None:
        """The chosen tile, or None if not yet collapsed."""
        if self._collapsed:
            return self._candidates[0]
        return None

    @property
    def is_contradiction(self) -> bool:
        """No candidates left and never collapsed."""
        return not self._candidates and not self._collapsed

    def can_place(self, tile: TileDefinition) -> bool:
        return tile in self._candidates

    def collapse(self, tile: TileDefinition) -> None:
        """Commit this cell to `tile`.

        Raises:
            InvalidCandidateError: If `tile` is not a remaining candidate
        """
        if tile not in self._candidates:
            raise InvalidCandidateError(
                f"Cannot collapse ({self.x}, {self.y}) to tile '{tile.name}' - "
                "not in possible tiles list",
                tile, self.position,
            )
        self._candidates = [tile]
        self._collapsed = True

    def remove_candidates(self, tiles: Iterable[TileDefinition]) -> bool:
        """
        Drop any of `tiles` from the candidates.

        Returns True if the cell changed. Collapsed cells never change.
        """
        if self._collapsed:
            return False

        doomed = list(tiles)
        before = len(self._candidates)
        self._candidates = [tile for tile in self._candidates if tile not in doomed]
        return len(self._candidates) != before

    def create_snapshot(self) -> CellSnapshot:
        return CellSnapshot(tuple(self._candidates), self._collapsed)

    def restore_from_snapshot(self, snapshot: CellSnapshot) -> None:
        self._candidates = list(snapshot.candidates)
        self._collapsed = snapshot.collapsed

    def __repr__(self) -> str:
        if self._collapsed:
            return f"Cell({self.x},{self.y}): {self._candidates[0].name}"
        if self.is_contradiction:
            return f"Cell({self.x},{self.y}): CONTRADICTION"
        return f"Cell({self.x},{self.y}): {self.entropy} options"
