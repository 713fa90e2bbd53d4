"""
Map generation facade.

This is the main entry point: hand it a tile catalog, a populated tag
registry, and optional seeds, and get back a fully resolved MapData.

Every attempt gets a brand new Grid and its own random.Random, drawn from
the solver's seeded generator, so a fixed seed reproduces the same map and
parallel solvers never share random state.
"""

from __future__ import annotations

import random
from typing import Iterable

from ..config import GenerationConfig
from ..core.map import MapData
from ..core.tiles import TileDefinition
from ..errors import GenerationFailedError
from ..logging_config import get_logger, log_attempt
from ..services.tag_relations import TagRelationService
from .wfc import DEFAULT_MAX_ITERATIONS, Grid, Seed, SeedConstraint, TagAdjacencyConstraint

logger = get_logger(__name__)


class WfcSolver:
    """
    Builds and runs WFC grids.

    Usage:
        solver = WfcSolver(tag_service, seed=42)
        map_data = solver.generate(10, 15, catalog)

    Raises GenerationFailedError if no attempt produces a complete grid.
    """

    def __init__(
        self,
        tag_service: TagRelationService,
        seed: int | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        max_attempts: int = 1,
    ):
        """
        Initialize the solver.

        Args:
            tag_service: Registry the adjacency constraint checks against
            seed: Random seed for reproducibility (None = random)
            max_iterations: Step ceiling for each attempt
            max_attempts: Fresh grids to try before giving up
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.tag_service = tag_service
        self.max_iterations = max_iterations
        self.max_attempts = max_attempts
        self._random = random.Random(seed)
        self.last_grid: Grid | None = None

    @classmethod
    def from_config(cls, tag_service: TagRelationService, config: GenerationConfig) -> WfcSolver:
        return cls(
            tag_service,
            seed=config.seed,
            max_iterations=config.max_iterations,
            max_attempts=config.max_attempts,
        )

    def build_grid(
        self,
        width: int,
        height: int,
        tiles: Iterable[TileDefinition],
        seeds: Iterable[Seed] = (),
    ) -> Grid:
        """
        Create a grid with the standard constraint stack.

        Seeds are registered first so the adjacency constraint sees them
        already collapsed when it initializes.
        """
        grid = Grid(width, height, tiles, rng=random.Random(self._random.getrandbits(64)))

        seeds = tuple(seeds)
        if seeds:
            grid.add_constraint(SeedConstraint(seeds))
        grid.add_constraint(TagAdjacencyConstraint(self.tag_service))
        return grid

    def generate(
        self,
        width: int,
        height: int,
        tiles: Iterable[TileDefinition],
        seeds: Iterable[Seed] = (),
    ) -> MapData:
        """
        Generate a map.

        Args:
            width: Map width in cells
            height: Map height in cells
            tiles: Tile catalog (any iterable of TileDefinition, e.g. a TileCatalog)
            seeds: (x, y, tile) placements to make before solving

        Returns:
            MapData with every position resolved to its tile's tags

        Raises:
            BoundsError: If a seed lies outside the grid
            InvalidCandidateError: If a seed tile is not in the catalog
            ContradictoryInitialStateError: If the seeds contradict each other
            GenerationFailedError: If every attempt ends without a complete grid
        """
        tiles = tuple(tiles)
        seeds = tuple(seeds)

        for attempt in range(1, self.max_attempts + 1):
            grid = self.build_grid(width, height, tiles, seeds)
            self.last_grid = grid

            if grid.generate(self.max_iterations):
                log_attempt(
                    logger, attempt, self.max_attempts, "COMPLETE",
                    f"{width}x{height} | steps={grid.iterations} | backtracks={grid.backtrack_count}",
                )
                return grid.to_map_data()

            log_attempt(
                logger, attempt, self.max_attempts, "FAILED",
                f"{width}x{height} | steps={grid.iterations} | backtracks={grid.backtrack_count}",
            )

        logger.warning(
            f"Generation of {width}x{height} map failed after {self.max_attempts} attempt(s)"
        )
        raise GenerationFailedError(
            "WFC generation failed - could not satisfy all constraints",
            width, height, self.max_attempts,
        )


def generate_map(
    width: int,
    height: int,
    tiles: Iterable[TileDefinition],
    tag_service: TagRelationService,
    seeds: Iterable[Seed] = (),
    seed: int | None = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    max_attempts: int = 1,
) -> MapData:
    """
    Generate a map in one call.

    Convenience wrapper around WfcSolver; see WfcSolver.generate for the
    arguments and errors.
    """
    solver = WfcSolver(
        tag_service,
        seed=seed,
        max_iterations=max_iterations,
        max_attempts=max_attempts,
    )
    return solver.generate(width, height, tiles, seeds)
