"""Configuration management for entityrepo."""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_db_path() -> Path:
    """Get default database path."""
    cache_dir = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    return cache_dir / "entityrepo" / "store.db"


@dataclass
class Config:
    """Main library configuration."""

    db_path: Path = field(default_factory=_default_db_path)
    default_page_size: int = 10
    primary_key: str = "id"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()

        if path := os.environ.get("ENTITYREPO_DB_PATH"):
            config.db_path = Path(path)

        if page_size := os.environ.get("ENTITYREPO_PAGE_SIZE"):
            config.default_page_size = int(page_size)

        if primary_key := os.environ.get("ENTITYREPO_PRIMARY_KEY"):
            config.primary_key = primary_key

        return config
