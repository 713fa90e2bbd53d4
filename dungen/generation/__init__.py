"""Map generation for dungen."""

from .solver import WfcSolver, generate_map
from .rulesets import (
    Ruleset,
    SimpleRuleset,
    DungeonRuleset,
    RULESETS,
    get_ruleset,
    WALL,
    FLOOR,
    ENTRANCE,
    TREASURE,
)

__all__ = [
    "WfcSolver",
    "generate_map",
    "Ruleset",
    "SimpleRuleset",
    "DungeonRuleset",
    "RULESETS",
    "get_ruleset",
    "WALL",
    "FLOOR",
    "ENTRANCE",
    "TREASURE",
]
