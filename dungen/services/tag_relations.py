"""Tag relationship registry.

Tracks two symmetric relations between tags:
- Affinity: the tags like being next to each other
- Antagonism: the tags must never be next to each other

A pair of tags can hold at most one of the two. Registering the opposite
relation for a pair raises ConflictError and changes nothing.

A tag may be antagonistic with itself. Any tile carrying such a tag can
never be placed, which is how unsatisfiable fixtures are built.
"""

from __future__ import annotations

from typing import Iterable

from ..core.tags import Tag
from ..errors import ConflictError
from ..logging_config import get_logger

logger = get_logger(__name__)

AFFINITY = "affinity"
ANTAGONISM = "antagonism"


class TagRelationService:
    """Registry of symmetric affinity and antagonism relations between tags."""

    def __init__(self):
        self._affinities: dict[Tag, set[Tag]] = {}
        self._antagonisms: dict[Tag, set[Tag]] = {}

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add_affinity(self, tag_a: Tag, tag_b: Tag) -> None:
        """Register that `tag_a` and `tag_b` like being adjacent.

        Raises:
            ConflictError: If the pair is already antagonistic
        """
        if self.have_antagonism(tag_a, tag_b):
            raise ConflictError(
                f"Tags '{tag_a}' and '{tag_b}' are already antagonistic",
                tag_a, tag_b, ANTAGONISM,
            )
        self._link(self._affinities, tag_a, tag_b)
        logger.debug(f"RELATION | {AFFINITY} | {tag_a} <-> {tag_b}")

    def add_antagonism(self, tag_a: Tag, tag_b: Tag) -> None:
        """Register that `tag_a` and `tag_b` must never be adjacent.

        Raises:
            ConflictError: If the pair already has an affinity
        """
        if self.have_affinity(tag_a, tag_b):
            raise ConflictError(
                f"Tags '{tag_a}' and '{tag_b}' already have affinity",
                tag_a, tag_b, AFFINITY,
            )
        self._link(self._antagonisms, tag_a, tag_b)
        logger.debug(f"RELATION | {ANTAGONISM} | {tag_a} <-> {tag_b}")

    @staticmethod
    def _link(relations: dict[Tag, set[Tag]], tag_a: Tag, tag_b: Tag) -> None:
        relations.setdefault(tag_a, set()).add(tag_b)
        relations.setdefault(tag_b, set()).add(tag_a)

    # -------------------------------------------------------------------------
    # Pair queries
    # -------------------------------------------------------------------------

    def are_compatible(self, tag_a: Tag, tag_b: Tag) -> bool:
        """Two tags are compatible unless they are antagonistic."""
        return not self.have_antagonism(tag_a, tag_b)

    def have_affinity(self, tag_a: Tag, tag_b: Tag) -> bool:
        return tag_b in self._affinities.get(tag_a, ())

    def have_antagonism(self, tag_a: Tag, tag_b: Tag) -> bool:
        return tag_b in self._antagonisms.get(tag_a, ())

    def get_affinities(self, tag: Tag) -> set[Tag]:
        """Copy of the tags with affinity to `tag` (empty if none)."""
        return set(self._affinities.get(tag, ()))

    def get_antagonisms(self, tag: Tag) -> set[Tag]:
        """Copy of the tags antagonistic to `tag` (empty if none)."""
        return set(self._antagonisms.get(tag, ()))

    # -------------------------------------------------------------------------
    # Tag-set queries
    # -------------------------------------------------------------------------

    def can_be_adjacent(self, tags_a: Iterable[Tag], tags_b: Iterable[Tag]) -> bool:
        """True if no tag in `tags_a` is antagonistic with any tag in `tags_b`."""
        tags_b = tuple(tags_b)
        for tag_a in tags_a:
            antagonists = self._antagonisms.get(tag_a)
            if antagonists and any(tag_b in antagonists for tag_b in tags_b):
                return False
        return True

    def affinity_score(self, tags_a: Iterable[Tag], tags_b: Iterable[Tag]) -> float:
        """Number of affine pairs across two tag collections."""
        tags_b = tuple(tags_b)
        score = 0.0
        for tag_a in tags_a:
            affinities = self._affinities.get(tag_a, ())
            score += sum(1.0 for tag_b in tags_b if tag_b in affinities)
        return score

    def __repr__(self) -> str:
        affinity_pairs = sum(len(v) for v in self._affinities.values())
        antagonism_pairs = sum(len(v) for v in self._antagonisms.values())
        return (
            f"TagRelationService(affinity_links={affinity_pairs}, "
            f"antagonism_links={antagonism_pairs})"
        )
