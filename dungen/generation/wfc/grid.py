"""
Grid orchestration for Wave Function Collapse.

The Grid is the "wave function": a 2D array of cells, each in superposition
until it collapses to a single tile. It also owns the ordered constraint
list, its own random source, and the snapshot stack used for backtracking.

The loop:
1. Find the uncollapsed cell with lowest entropy (fewest candidates)
2. Snapshot the grid
3. Collapse it to one tile (weighted random choice)
4. Let every constraint propagate the collapse
5. On contradiction, restore the snapshot and try again

Backtracking rewinds exactly one decision and does not remember which tile
failed, so a retry may repeat the same losing choice. Convergence relies on
randomness and the iteration ceiling. A successful step discards its
snapshot, so the stack never holds more than one.
"""

from __future__ import annotations

import random
from enum import Enum, auto
from typing import Iterable, Iterator

from ...core.map import MapData, MapTile
from ...core.tags import UNDEFINED_TAG
from ...core.tiles import TileDefinition
from ...logging_config import get_logger, log_backtrack, log_step
from .cell import Cell, CellSnapshot
from .constraints import Constraint

logger = get_logger(__name__)

DEFAULT_MAX_ITERATIONS = 10000

# West, east, north, south
NEIGHBOR_OFFSETS_4: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
NEIGHBOR_OFFSETS_8: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


class GridState(Enum):
    """Where a generation attempt currently is."""
    IDLE = auto()           # Constructed, constraints not yet initialized
    INITIALIZING = auto()   # Running constraint initialize()
    STEPPING = auto()       # In the collapse loop
    COMPLETE = auto()       # All cells collapsed without contradiction
    CONTRADICTION = auto()  # Attempt failed


class Grid:
    """
    The 2D grid of cells for one generation attempt.

    Cells are stored row-major and indexed as cells[y][x]. A Grid is built
    fresh for every attempt and never reused.
    """

    def __init__(
        self,
        width: int,
        height: int,
        tiles: Iterable[TileDefinition],
        rng: random.Random | None = None,
    ):
        """
        Create a grid with every cell holding the full tile catalog.

        Args:
            width: Number of cells horizontally
            height: Number of cells vertically
            tiles: The tile catalog (initial superposition for every cell)
            rng: Random source owned by this grid. A fresh one is created if omitted.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")

        self.width = width
        self.height = height
        self.tiles: tuple[TileDefinition, ...] = tuple(tiles)
        self.state = GridState.IDLE
        self.iterations = 0
        self.backtrack_count = 0

        self._random = rng if rng is not None else random.Random()
        self._constraints: list[Constraint] = []
        self._snapshots: list[list[list[CellSnapshot]]] = []

        self.cells: list[list[Cell]] = [
            [Cell(x, y, self.tiles) for x in range(width)]
            for y in range(height)
        ]

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    @property
    def constraints(self) -> tuple[Constraint, ...]:
        return tuple(self._constraints)

    @property
    def snapshot_depth(self) -> int:
        return len(self._snapshots)

    def add_constraint(self, constraint: Constraint) -> None:
        """Register a constraint. Constraints run in registration order."""
        self._constraints.append(constraint)

    def get_cell(self, x: int, y: int) -> Cell | None:
        """Get cell at position, or None if out of bounds."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.cells[y][x]
        return None

    def neighbors(self, x: int, y: int) -> Iterator[Cell]:
        """Yield the 4-directional neighbors of (x, y) that lie inside the grid."""
        for dx, dy in NEIGHBOR_OFFSETS_4:
            neighbor = self.get_cell(x + dx, y + dy)
            if neighbor is not None:
                yield neighbor

    def neighbors8(self, x: int, y: int) -> Iterator[Cell]:
        """Yield the 8-directional neighbors of (x, y) that lie inside the grid."""
        for dx, dy in NEIGHBOR_OFFSETS_8:
            neighbor = self.get_cell(x + dx, y + dy)
            if neighbor is not None:
                yield neighbor

    def all_cells(self) -> Iterator[Cell]:
        """Iterate over all cells in the grid."""
        for row in self.cells:
            yield from row

    @property
    def is_complete(self) -> bool:
        """Check if all cells have collapsed."""
        return all(cell.collapsed for cell in self.all_cells())

    @property
    def is_contradiction(self) -> bool:
        """Check if any cell has run out of candidates."""
        return any(cell.is_contradiction for cell in self.all_cells())

    @property
    def collapsed_count(self) -> int:
        return sum(1 for cell in self.all_cells() if cell.collapsed)

    # -------------------------------------------------------------------------
    # Solving
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """Run every constraint's initialize, in registration order.

        Any exception aborts the attempt before stepping begins.
        """
        self.state = GridState.INITIALIZING
        try:
            for constraint in self._constraints:
                constraint.initialize(self)
        except Exception:
            self.state = GridState.CONTRADICTION
            raise
        self.state = GridState.STEPPING

    def step(self) -> bool:
        """
        Perform one unit of work: collapse one cell and propagate.

        Returns True if progress was made (including a successful backtrack),
        False if the grid is finished, contradictory, or cannot backtrack.
        """
        if self.is_complete or self.is_contradiction:
            return False

        cell = self._find_lowest_entropy_cell()
        if cell is None:
            return False

        self._push_snapshot()

        entropy = cell.entropy
        tile = self._select_tile(cell)
        cell.collapse(tile)
        log_step(logger, self.iterations, cell.position, tile.name, f"entropy={entropy}")

        if self._propagate(cell.x, cell.y):
            # Only the decision just made can be rewound
            self._snapshots.pop()
            return True

        # Contradiction: rewind to just before this decision
        if not self._backtrack():
            logger.warning(f"Contradiction at ({cell.x}, {cell.y}) with no snapshot to restore")
            return False

        log_backtrack(logger, self.iterations, cell.position, len(self._snapshots), f"tile={tile.name}")
        return True

    def generate(self, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> bool:
        """
        Run the complete algorithm until completion, failure, or the ceiling.

        Args:
            max_iterations: Maximum number of steps before giving up

        Returns:
            True iff every cell collapsed and no contradiction remains
        """
        self.initialize()

        self.iterations = 0
        while not self.is_complete and not self.is_contradiction and self.iterations < max_iterations:
            if not self.step():
                break
            self.iterations += 1

        success = self.is_complete and not self.is_contradiction
        self.state = GridState.COMPLETE if success else GridState.CONTRADICTION

        if success:
            logger.debug(
                f"Grid {self.width}x{self.height} complete after {self.iterations} steps, "
                f"{self.backtrack_count} backtracks"
            )
        else:
            logger.debug(
                f"Grid {self.width}x{self.height} failed after {self.iterations} steps, "
                f"{self.backtrack_count} backtracks ({self.collapsed_count} collapsed)"
            )
        return success

    def validate(self) -> bool:
        """Check every constraint against the current grid."""
        return all(constraint.validate(self) for constraint in self._constraints)

    def to_map_data(self) -> MapData:
        """
        Convert the grid to the map representation consumed downstream.

        Uncollapsed cells (which should not exist after a successful run)
        become the "undefined" tag.
        """
        map_data = MapData(self.width, self.height)
        for cell in self.all_cells():
            tile = cell.collapsed_tile
            if tile is not None:
                map_data[cell.x, cell.y] = MapTile.from_tile(tile)
            else:
                map_data[cell.x, cell.y] = MapTile(UNDEFINED_TAG)
        return map_data

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _find_lowest_entropy_cell(self) -> Cell | None:
        """
        Find the uncollapsed cell with minimum entropy above zero.

        Ties are broken uniformly at random. Always picking the first would
        bias the output toward one corner.
        """
        min_entropy: int | None = None
        candidates: list[Cell] = []

        for cell in self.all_cells():
            if cell.collapsed or cell.entropy == 0:
                continue
            if min_entropy is None or cell.entropy < min_entropy:
                min_entropy = cell.entropy
                candidates = [cell]
            elif cell.entropy == min_entropy:
                candidates.append(cell)

        if not candidates:
            return None
        return self._random.choice(candidates)

    def _select_tile(self, cell: Cell) -> TileDefinition:
        """Weighted random choice among the cell's candidates."""
        possibilities = list(cell.candidates)
        weights = [tile.weight for tile in possibilities]

        if sum(weights) <= 0:
            return possibilities[0]
        return self._random.choices(possibilities, weights=weights, k=1)[0]

    def _propagate(self, x: int, y: int) -> bool:
        for constraint in self._constraints:
            if not constraint.propagate(self, x, y):
                return False
        return True

    def _push_snapshot(self) -> None:
        self._snapshots.append([
            [cell.create_snapshot() for cell in row]
            for row in self.cells
        ])

    def _backtrack(self) -> bool:
        """Restore the most recent snapshot. Returns False if there is none."""
        if not self._snapshots:
            return False

        snapshot = self._snapshots.pop()
        for row, saved_row in zip(self.cells, snapshot):
            for cell, saved in zip(row, saved_row):
                cell.restore_from_snapshot(saved)

        self.backtrack_count += 1
        return True

    def __repr__(self) -> str:
        total = self.width * self.height
        return f"Grid({self.width}x{self.height}): {self.collapsed_count}/{total} collapsed"
