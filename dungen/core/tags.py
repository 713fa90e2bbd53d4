"""Semantic tags for dungen.

A Tag is a plain immutable value identified by its normalized name. Names are
trimmed and lower-cased on construction, so Tag("Wall") == Tag(" wall ").
There is no global tag registry; create tags wherever they are needed.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ..errors import InvalidTagError


class Tag:
    """An immutable semantic label such as "wall" or "floor"."""

    __slots__ = ("_name",)

    def __init__(self, name: str):
        if not isinstance(name, str) or not name.strip():
            raise InvalidTagError(
                f"Tag name cannot be null, empty, or whitespace: {name!r}", name
            )
        object.__setattr__(self, "_name", name.strip().lower())

    @classmethod
    def try_create(cls, name: str | None) -> Tag | None:
        """Create a tag, or return None if the name is invalid."""
        try:
            return cls(name)
        except InvalidTagError:
            return None

    @property
    def name(self) -> str:
        """The normalized tag name."""
        return self._name

    def __setattr__(self, key, value):
        raise AttributeError("Tag is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"Tag({self._name!r})"

    def __str__(self) -> str:
        return self._name

    def __reduce__(self):
        return (Tag, (self._name,))


# Sentinel for cells that never collapsed
UNDEFINED_TAG = Tag("undefined")


def to_tags(values: Iterable[Tag | str]) -> tuple[Tag, ...]:
    """Normalize a mix of tags and names into a de-duplicated tuple.

    Declaration order is preserved, so the first entry stays first.
    """
    seen: dict[Tag, None] = {}
    for value in values:
        tag = value if isinstance(value, Tag) else Tag(value)
        seen.setdefault(tag, None)
    return tuple(seen)


@runtime_checkable
class Taggable(Protocol):
    """Anything that exposes a set of tags."""

    @property
    def tags(self) -> Iterable[Tag]: ...

    def has_tag(self, tag: Tag) -> bool: ...

    def has_any_tag(self, tags: Iterable[Tag]) -> bool: ...

    def has_all_tags(self, tags: Iterable[Tag]) -> bool: ...
