"""Type definitions for entityrepo."""

from dataclasses import asdict, is_dataclass
from typing import Any, Mapping, Protocol, TypeAlias, runtime_checkable

EntityId: TypeAlias = int | str
Row: TypeAlias = dict[str, Any]
Criteria: TypeAlias = Mapping[str, Any]


@runtime_checkable
class Entity(Protocol):
    """Anything that can produce a key-value snapshot of itself."""

    def to_dict(self) -> dict[str, Any]:
        """Convert the entity to a plain dictionary."""
        ...


class EntityMixin:
    """Provide ``to_dict`` for dataclass entities.

    Example:
        @dataclass(frozen=True)
        class User(EntityMixin):
            id: int
            name: str

        User(1, "Ann").to_dict()  # {"id": 1, "name": "Ann"}
    """

    def to_dict(self) -> dict[str, Any]:
        """Convert the dataclass fields to a dictionary."""
        if not is_dataclass(self):
            raise TypeError(f"{type(self).__name__} is not a dataclass; override to_dict()")
        return asdict(self)
