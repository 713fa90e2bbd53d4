"""
Pluggable constraints for the WFC grid.

A constraint reacts to three moments in a generation attempt:
- initialize: once, before the loop starts (seeding, seed-driven propagation)
- propagate: after a cell collapses, narrowing whatever it affects
- validate: an audit of the whole grid, independent of propagation history

Constraints hold only read-only references to shared services. All grid
mutation goes through Cell methods.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Iterable, Protocol

from ...core.tags import Tag
from ...core.tiles import TileDefinition
from ...errors import BoundsError, ContradictoryInitialStateError, InvalidCandidateError
from ...logging_config import get_logger, log_constraint
from ...services.tag_relations import TagRelationService
from .cell import Cell

if TYPE_CHECKING:
    from .grid import Grid

logger = get_logger(__name__)


class Constraint(Protocol):
    """Protocol for WFC constraints.

    Grids run their constraints in registration order; the first failure
    stops the rest.
    """

    name: str

    def initialize(self, grid: Grid) -> None:
        """One-time setup before stepping. Raise to abort the attempt."""
        ...

    def propagate(self, grid: Grid, x: int, y: int) -> bool:
        """React to the cell at (x, y) having just collapsed.

        Returns:
            False if a contradiction was detected
        """
        ...

    def validate(self, grid: Grid) -> bool:
        """Check the constraint holds over the whole grid."""
        ...


# Seed placement as (x, y, tile)
Seed = tuple[int, int, TileDefinition]


class SeedConstraint:
    """Pre-places specific tiles before the solver starts.

    Seeds are collapsed during initialize and must survive every later
    step unchanged.
    """

    name = "Seed"

    def __init__(self, seeds: Iterable[Seed]):
        self._seeds: tuple[Seed, ...] = tuple(seeds)

    @property
    def seeds(self) -> tuple[Seed, ...]:
        return self._seeds

    def initialize(self, grid: Grid) -> None:
        """Collapse every seed cell.

        Raises:
            BoundsError: If a seed lies outside the grid
            InvalidCandidateError: If the seed tile is not a candidate there
        """
        for x, y, tile in self._seeds:
            cell = grid.get_cell(x, y)
            if cell is None:
                raise BoundsError(
                    f"Seed position ({x}, {y}) is outside grid bounds "
                    f"{grid.width}x{grid.height}",
                    (x, y),
                )
            if not cell.can_place(tile):
                raise InvalidCandidateError(
                    f"Cannot place seed tile '{tile.name}' at ({x}, {y}) - "
                    "not in possible tiles",
                    tile, (x, y),
                )
            cell.collapse(tile)

        log_constraint(logger, self.name, "initialize", details=f"seeds={len(self._seeds)}")

    def propagate(self, grid: Grid, x: int, y: int) -> bool:
        # Seeding only happens at initialize
        return True

    def validate(self, grid: Grid) -> bool:
        for x, y, tile in self._seeds:
            cell = grid.get_cell(x, y)
            if cell is None or not cell.collapsed or cell.collapsed_tile != tile:
                log_constraint(
                    logger, self.name, "validate", success=False,
                    details=f"seed ({x}, {y}) is not '{tile.name}'",
                )
                return False
        return True


class TagAdjacencyConstraint:
    """Keeps antagonistic tags from touching across 4-adjacent cells.

    When a cell collapses, every live neighbor loses the candidates that
    would clash with it. A neighbor left with a single candidate is
    collapsed on the spot and propagates in turn, so one placement can
    settle a whole region before the outer loop picks another cell.
    """

    name = "TagAdjacency"

    def __init__(self, tag_service: TagRelationService):
        self._tag_service = tag_service

    def initialize(self, grid: Grid) -> None:
        """Propagate from every cell that is already collapsed (i.e. seeds).

        Raises:
            ContradictoryInitialStateError: If the seeds contradict each other
        """
        seeded = [cell for cell in grid.all_cells() if cell.collapsed]
        for cell in seeded:
            if not self.propagate(grid, cell.x, cell.y):
                log_constraint(
                    logger, self.name, "initialize", success=False,
                    details=f"seed at ({cell.x}, {cell.y})",
                )
                raise ContradictoryInitialStateError(
                    f"Initial state is contradictory: propagation from seed at "
                    f"({cell.x}, {cell.y}) failed",
                    (cell.x, cell.y),
                )

        log_constraint(logger, self.name, "initialize", details=f"seeded_cells={len(seeded)}")

    def propagate(self, grid: Grid, x: int, y: int) -> bool:
        """Breadth-first cascade starting from the collapsed cell at (x, y)."""
        start = grid.get_cell(x, y)
        if start is None or start.collapsed_tile is None:
            return True  # Nothing to propagate

        queue: deque[Cell] = deque([start])

        while queue:
            cell = queue.popleft()
            tags = cell.collapsed_tile.tags

            # A tile that clashes with itself can never be placed
            if not self._compatible(tags, tags):
                log_constraint(
                    logger, self.name, "propagate", success=False,
                    details=f"({cell.x}, {cell.y}) '{cell.collapsed_tile.name}' is self-antagonistic",
                )
                return False

            for neighbor in grid.neighbors(cell.x, cell.y):
                if neighbor.collapsed:
                    if not self._compatible(tags, neighbor.collapsed_tile.tags):
                        log_constraint(
                            logger, self.name, "propagate", success=False,
                            details=f"({cell.x}, {cell.y}) clashes with ({neighbor.x}, {neighbor.y})",
                        )
                        return False
                    continue

                doomed = [
                    tile for tile in neighbor.candidates
                    if not self._compatible(tags, tile.tags)
                ]
                if not doomed or not neighbor.remove_candidates(doomed):
                    continue

                if neighbor.is_contradiction:
                    log_constraint(
                        logger, self.name, "propagate", success=False,
                        details=f"({neighbor.x}, {neighbor.y}) has no candidates left",
                    )
                    return False

                if neighbor.entropy == 1:
                    neighbor.collapse(neighbor.candidates[0])
                    queue.append(neighbor)

        return True

    def validate(self, grid: Grid) -> bool:
        """Check every collapsed cell against its collapsed 4-neighbors."""
        for cell in grid.all_cells():
            tile = cell.collapsed_tile
            if tile is None:
                continue

            if not self._compatible(tile.tags, tile.tags):
                log_constraint(
                    logger, self.name, "validate", success=False,
                    details=f"({cell.x}, {cell.y}) '{tile.name}' is self-antagonistic",
                )
                return False

            for neighbor in grid.neighbors(cell.x, cell.y):
                other = neighbor.collapsed_tile
                if other is None:
                    continue
                if not self._compatible(tile.tags, other.tags):
                    log_constraint(
                        logger, self.name, "validate", success=False,
                        details=f"({cell.x}, {cell.y}) '{tile.name}' next to "
                                f"({neighbor.x}, {neighbor.y}) '{other.name}'",
                    )
                    return False

        return True

    def _compatible(self, tags_a: Iterable[Tag], tags_b: Iterable[Tag]) -> bool:
        return self._tag_service.can_be_adjacent(tags_a, tags_b)
