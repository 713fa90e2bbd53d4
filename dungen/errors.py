"""Exceptions for dungen.

Every error raised by the library derives from DungenError so callers can
catch the whole family at once. Each subclass carries the context that
caused it as attributes, in addition to the message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .core.tags import Tag


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class DungenError(Exception):
    """Base exception for all dungen errors."""

    pass


# -----------------------------------------------------------------------------
# Tagging
# -----------------------------------------------------------------------------


class InvalidTagError(DungenError):
    """Tag name is missing, empty, or whitespace only."""

    def __init__(self, message: str, name: Any = None):
        super().__init__(message)
        self.name = name


class ConflictError(DungenError):
    """A tag pair already holds the opposite relation."""

    def __init__(self, message: str, tag_a: Tag, tag_b: Tag, existing: str):
        super().__init__(message)
        self.tag_a = tag_a
        self.tag_b = tag_b
        self.existing = existing


# -----------------------------------------------------------------------------
# Grid
# -----------------------------------------------------------------------------


class BoundsError(DungenError):
    """Position is outside the grid."""

    def __init__(self, message: str, position: tuple[int, int] | None = None):
        super().__init__(message)
        self.position = position


class InvalidCandidateError(DungenError):
    """Tile is not one of the cell's remaining candidates."""

    def __init__(
        self,
        message: str,
        tile: Any = None,
        position: tuple[int, int] | None = None,
    ):
        super().__init__(message)
        self.tile = tile
        self.position = position


# -----------------------------------------------------------------------------
# Generation
# -----------------------------------------------------------------------------


class GenerationError(DungenError):
    """Base exception for solver failures."""

    pass


class ContradictoryInitialStateError(GenerationError):
    """Seed placement contradicts a constraint before solving begins."""

    def __init__(self, message: str, position: tuple[int, int] | None = None):
        super().__init__(message)
        self.position = position


class GenerationFailedError(GenerationError):
    """No fully collapsed, contradiction-free grid within the iteration ceiling."""

    def __init__(self, message: str, width: int, height: int, attempts: int = 1):
        super().__init__(message)
        self.width = width
        self.height = height
        self.attempts = attempts
