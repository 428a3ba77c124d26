from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from loguru import logger

from ronaldo_eats.models import Restaurant


BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "restaurants.json"


class RestaurantCatalog:
    """Read-only set of reference restaurants, keyed by id."""

    def __init__(self, restaurants: Iterable[Restaurant]) -> None:
        self._restaurants: List[Restaurant] = list(restaurants)
        self._by_id: Dict[str, Restaurant] = {}
        for r in self._restaurants:
            if r.id in self._by_id:
                raise ValueError(f"duplicate restaurant id in catalog: {r.id}")
            self._by_id[r.id] = r

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "RestaurantCatalog":
        source = Path(path) if path else BUNDLED_CATALOG
        raw = json.loads(source.read_text(encoding="utf-8"))
        catalog = cls(Restaurant.from_dict(item) for item in raw)
        logger.debug("loaded {} restaurants from {}", len(catalog), source)
        return catalog

    def all(self) -> List[Restaurant]:
        return list(self._restaurants)

    def get(self, restaurant_id: str) -> Optional[Restaurant]:
        return self._by_id.get(restaurant_id)

    def by_ids(self, restaurant_ids: Iterable[str]) -> List[Restaurant]:
        """Resolve ids in the given order, skipping ones the catalog does not know."""
        return [self._by_id[rid] for rid in restaurant_ids if rid in self._by_id]

    def cuisines(self) -> List[str]:
        return sorted({r.cuisine for r in self._restaurants})

    def __len__(self) -> int:
        return len(self._restaurants)
