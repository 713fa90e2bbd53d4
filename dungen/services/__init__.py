"""Stateful services for dungen."""

from .tag_relations import (
    TagRelationService,
    AFFINITY,
    ANTAGONISM,
)

__all__ = [
    "TagRelationService",
    "AFFINITY",
    "ANTAGONISM",
]
