"""Entities shared by the tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from entityrepo.core.types import EntityMixin


@dataclass(frozen=True)
class User(EntityMixin):
    """User entity backed by the users table."""

    id: int
    name: str
    email: Optional[str] = None
    role: Optional[str] = None


def row_to_user(row: dict) -> User:
    """Map a users row to a User."""
    return User(**row)


class Tag:
    """Entity with a dict-only snapshot and no dataclass fields."""

    def __init__(self, **data: Any):
        self._data = data

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"Tag({self._data!r})"
