from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field


class Configuration(BaseModel):
    # Storage
    storage_path: Optional[str] = Field(default=None)
    key_prefix: str = Field(default="@ronaldo_eats")

    # Catalog
    catalog_path: Optional[str] = Field(default=None)

    # Feed defaults
    feed_count: int = Field(default=10)
    exclude_rated: bool = Field(default=False)

    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "storage_path": os.getenv("RONALDO_EATS_STORAGE_PATH"),
            "key_prefix": os.getenv("RONALDO_EATS_KEY_PREFIX"),
            "catalog_path": os.getenv("RONALDO_EATS_CATALOG_PATH"),
            "feed_count": os.getenv("RONALDO_EATS_FEED_COUNT"),
            "exclude_rated": os.getenv("RONALDO_EATS_EXCLUDE_RATED"),
            "log_level": os.getenv("RONALDO_EATS_LOG_LEVEL"),
        }

        bool_fields = {"exclude_rated"}

        for k, v in env_map.items():
            if v is None:
                continue
            if k in bool_fields:
                raw[k] = str(v).lower() in {"1", "true", "yes", "on"}
            else:
                raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    @property
    def persistent(self) -> bool:
        return bool(self.storage_path)

    def log_summary(self) -> str:
        return "storage=%s prefix=%s catalog=%s feed_count=%s exclude_rated=%s" % (
            self.storage_path or "memory",
            self.key_prefix,
            self.catalog_path or "bundled",
            self.feed_count,
            self.exclude_rated,
        )
