"""Typed, ordered collections of entities.

GenericCollection holds entities that implement the Entity protocol and
provides query/transform helpers that never touch persistence. Transform
methods return a new collection of the same concrete class; ``add`` and
``remove`` are the only in-place mutations.

Example:
    users = GenericCollection([User(1, "Ann"), User(2, "Bob")])
    names = users.sort_by(lambda u: u.name, ascending=False).to_list()
    by_id = users.index_by("id")
    by_id[2]  # User(2, "Bob")
"""

from __future__ import annotations

import json
from collections.abc import Hashable, Mapping
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from .exceptions import InvalidItemTypeError
from .types import Entity

T = TypeVar("T", bound=Entity)
C = TypeVar("C", bound="GenericCollection")

_MISSING = object()


def field_value(item: Entity, name: str) -> Any:
    """Read a named field from an entity.

    Attributes win over the ``to_dict()`` snapshot. A field absent from
    both reads as None.
    """
    value = getattr(item, name, _MISSING)
    if value is _MISSING:
        value = item.to_dict().get(name)
    return value


def _nulls_first(value: Any) -> tuple:
    # None compares below every real value
    return (0, 0) if value is None else (1, value)


class GenericCollection(Generic[T]):
    """Ordered, homogeneous container of entities."""

    def __init__(self, items: Iterable[T] | Mapping[Hashable, T] = ()):
        """Initialize the collection.

        Args:
            items: Entities in their initial order. A mapping keeps its keys,
                any other iterable is keyed 0..n-1.

        Raises:
            InvalidItemTypeError: If any item does not implement Entity.
        """
        pairs = items.items() if isinstance(items, Mapping) else enumerate(items)
        self._items: dict[Hashable, T] = {}
        for key, item in pairs:
            self._check(item)
            self._items[key] = item

    @staticmethod
    def _check(item: object) -> None:
        if not isinstance(item, Entity):
            raise InvalidItemTypeError(item)

    def _new(self: C, items: Iterable[T] | Mapping[Hashable, T]) -> C:
        return type(self)(items)

    # ── Container protocol ────────────────────────────────

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __getitem__(self, key: Hashable) -> T:
        return self._items[key]

    def __contains__(self, item: object) -> bool:
        return any(current is item for current in self._items.values())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items.values())!r})"

    def get(self, key: Hashable, default: T | None = None) -> T | None:
        """Return the item stored under ``key`` or ``default``."""
        return self._items.get(key, default)

    def keys(self) -> list[Hashable]:
        """Return the collection keys in order."""
        return list(self._items.keys())

    def count(self) -> int:
        """Return the number of items in the collection."""
        return len(self._items)

    # ── Snapshots ─────────────────────────────────────────

    def to_list(self) -> list[dict[str, Any]]:
        """Return one ``to_dict()`` snapshot per item, in order."""
        return [item.to_dict() for item in self._items.values()]

    def to_json(self, **kwargs: Any) -> str:
        """Serialize the snapshots returned by ``to_list()`` as JSON.

        Args:
            **kwargs: Passed through to ``json.dumps``; pass ``default=str`` to
                stringify values JSON cannot encode.
        """
        return json.dumps(self.to_list(), **kwargs)

    # ── Access ────────────────────────────────────────────

    def first(self) -> T | None:
        """Return the first item or None if the collection is empty."""
        return next(iter(self._items.values()), None)

    def last(self) -> T | None:
        """Return the last item or None if the collection is empty."""
        return next(reversed(self._items.values()), None)

    # ── Transforms ────────────────────────────────────────

    def filter(self: C, predicate: Callable[[T], bool]) -> C:
        """Return a new collection with the items for which predicate holds."""
        return self._new(item for item in self._items.values() if predicate(item))

    def map(self: C, transform: Callable[[T], Any]) -> C:
        """Return a new collection of transformed items.

        Raises:
            InvalidItemTypeError: If transform returns a non-entity.
        """
        return self._new(transform(item) for item in self._items.values())

    def sort_by(self: C, key: Callable[[T], Any], ascending: bool = True) -> C:
        """Return a new collection sorted by ``key(item)``.

        The sort is stable in both directions: items with equal keys keep
        their relative order.
        """
        return self._new(sorted(self._items.values(), key=key, reverse=not ascending))

    def sort_by_property(self: C, name: str, ascending: bool = True) -> C:
        """Return a new collection sorted by a named field.

        Items missing the field sort as the smallest key: first when
        ascending, last when descending.
        """
        return self.sort_by(lambda item: _nulls_first(field_value(item, name)), ascending)

    def pluck(self: C, name: str) -> C:
        """Return a new collection of the items that have ``name`` set.

        This filters entities by field presence; it does not extract values.
        """
        return self.filter(lambda item: field_value(item, name) is not None)

    def group_by(self: C, key: Callable[[T], Hashable]) -> dict[Hashable, C]:
        """Partition items by ``key(item)``.

        Returns:
            Mapping of key to a new collection, in first-encounter key order.
        """
        groups: dict[Hashable, C] = {}
        for item in self._items.values():
            group_key = key(item)
            if group_key not in groups:
                groups[group_key] = self._new(())
            groups[group_key].add(item)
        return groups

    def index_by(self: C, name: str) -> C:
        """Return a new collection keyed by the value of a named field.

        Later items overwrite earlier ones sharing a key. Items whose field
        is None or absent are dropped.
        """
        indexed: dict[Hashable, T] = {}
        for item in self._items.values():
            key = field_value(item, name)
            if key is not None:
                indexed[key] = item
        return self._new(indexed)

    # ── Mutation ──────────────────────────────────────────

    def add(self, item: T) -> None:
        """Append an item in place.

        Raises:
            InvalidItemTypeError: If item does not implement Entity.
        """
        self._check(item)
        int_keys = [key for key in self._items if type(key) is int]
        self._items[max(int_keys, default=-1) + 1] = item

    def remove(self, item: T) -> None:
        """Remove every occurrence of ``item`` (by identity) in place.

        Remaining items are re-keyed 0..n-1 in order.
        """
        self._items = dict(
            enumerate(current for current in self._items.values() if current is not item)
        )
