"""Wave Function Collapse over tag-annotated tiles."""

from .cell import Cell, CellSnapshot
from .constraints import Constraint, Seed, SeedConstraint, TagAdjacencyConstraint
from .grid import Grid, GridState, DEFAULT_MAX_ITERATIONS

__all__ = [
    "Cell",
    "CellSnapshot",
    "Constraint",
    "Seed",
    "SeedConstraint",
    "TagAdjacencyConstraint",
    "Grid",
    "GridState",
    "DEFAULT_MAX_ITERATIONS",
]
