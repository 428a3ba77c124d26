"""Persistence of ratings, saved lists and the preference profile.

Each record lives in its own key of a key-value backend as a JSON string.
Read failures degrade to empty defaults and write failures are logged, so
callers (ranking, the HTTP layer) always get well-formed values back.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional

from loguru import logger

from ronaldo_eats.config import Configuration
from ronaldo_eats.models import UserList, UserPreferences, UserRating
from ronaldo_eats.services.backends import JsonFileBackend, KeyValueBackend, MemoryBackend
from ronaldo_eats.services.preferences import apply_rating
from ronaldo_eats.utils import now_ms


@dataclass
class RatingWrite:
    saved: bool
    previous: Optional[UserRating] = None  # rating replaced for the same restaurant


class PreferenceStore:
    def __init__(self, backend: KeyValueBackend, key_prefix: str = "@ronaldo_eats") -> None:
        self.backend = backend
        self.ratings_key = f"{key_prefix}_ratings"
        self.lists_key = f"{key_prefix}_lists"
        self.preferences_key = f"{key_prefix}_preferences"

    # Raw slot access, raises on backend or decode errors

    def _load(self, key: str) -> Any:
        data = self.backend.get_item(key)
        return json.loads(data) if data else None

    def _dump(self, key: str, value: Any) -> None:
        self.backend.set_item(key, json.dumps(value))

    def _load_ratings(self) -> List[UserRating]:
        return [UserRating.from_dict(item) for item in self._load(self.ratings_key) or []]

    def _load_lists(self) -> List[UserList]:
        return [UserList.from_dict(item) for item in self._load(self.lists_key) or []]

    def _load_preferences(self) -> UserPreferences:
        data = self._load(self.preferences_key)
        return UserPreferences.from_dict(data) if data else UserPreferences.default()

    def _dump_lists(self, lists: List[UserList]) -> None:
        self._dump(self.lists_key, [l.to_dict() for l in lists])

    # Ratings

    def get_ratings(self) -> List[UserRating]:
        try:
            return self._load_ratings()
        except Exception as exc:
            logger.error("Error getting ratings: {}", exc)
            return []

    def get_rating_for_restaurant(self, restaurant_id: str) -> Optional[UserRating]:
        try:
            return next((r for r in self._load_ratings() if r.restaurant_id == restaurant_id), None)
        except Exception as exc:
            logger.error("Error getting rating for restaurant {}: {}", restaurant_id, exc)
            return None

    def save_rating(self, rating: UserRating) -> RatingWrite:
        """Store ``rating``, replacing any earlier one for the same restaurant.

        ``saved`` is False when the read or write failed; ``previous`` is the
        replaced rating, or None if this restaurant was not rated before.
        """
        try:
            ratings = self._load_ratings()
            previous: Optional[UserRating] = None
            for idx, existing in enumerate(ratings):
                if existing.restaurant_id == rating.restaurant_id:
                    previous = existing
                    ratings[idx] = rating
                    break
            else:
                ratings.append(rating)
            self._dump(self.ratings_key, [r.to_dict() for r in ratings])
            logger.debug("saved rating restaurant={} rating={} replaced={}", rating.restaurant_id, rating.rating, previous is not None)
            return RatingWrite(saved=True, previous=previous)
        except Exception:
            logger.exception("Error saving rating")
            return RatingWrite(saved=False)

    # Lists

    def get_lists(self) -> List[UserList]:
        try:
            return self._load_lists()
        except Exception as exc:
            logger.error("Error getting lists: {}", exc)
            return []

    def get_list(self, list_id: str) -> Optional[UserList]:
        return next((l for l in self.get_lists() if l.id == list_id), None)

    def save_list(self, user_list: UserList) -> bool:
        try:
            lists = self._load_lists()
            for idx, existing in enumerate(lists):
                if existing.id == user_list.id:
                    lists[idx] = user_list
                    break
            else:
                lists.append(user_list)
            self._dump_lists(lists)
            return True
        except Exception:
            logger.exception("Error saving list")
            return False

    def create_list(self, name: str) -> Optional[UserList]:
        """Create and store an empty list; returns None if it could not be stored."""
        name = (name or "").strip()
        if not name:
            raise ValueError("Please enter a list name")
        user_list = UserList(id=uuid.uuid4().hex, name=name, restaurant_ids=[], created_at=now_ms())
        if not self.save_list(user_list):
            return None
        logger.debug("created list id={} name={}", user_list.id, name)
        return user_list

    def delete_list(self, list_id: str) -> bool:
        try:
            lists = self._load_lists()
            remaining = [l for l in lists if l.id != list_id]
            self._dump_lists(remaining)
            return len(remaining) != len(lists)
        except Exception:
            logger.exception("Error deleting list")
            return False

    def add_restaurant_to_list(self, list_id: str, restaurant_id: str) -> Optional[UserList]:
        try:
            lists = self._load_lists()
            user_list = next((l for l in lists if l.id == list_id), None)
            if user_list is None:
                return None
            if user_list.add_restaurant(restaurant_id):
                self._dump_lists(lists)
            return user_list
        except Exception:
            logger.exception("Error adding restaurant to list")
            return None

    def remove_restaurant_from_list(self, list_id: str, restaurant_id: str) -> Optional[UserList]:
        try:
            lists = self._load_lists()
            user_list = next((l for l in lists if l.id == list_id), None)
            if user_list is None:
                return None
            if user_list.remove_restaurant(restaurant_id):
                self._dump_lists(lists)
            return user_list
        except Exception:
            logger.exception("Error removing restaurant from list")
            return None

    # Preferences

    def get_preferences(self) -> UserPreferences:
        try:
            return self._load_preferences()
        except Exception as exc:
            logger.error("Error getting preferences: {}", exc)
            return UserPreferences.default()

    def save_preferences(self, preferences: UserPreferences) -> bool:
        try:
            self._dump(self.preferences_key, preferences.to_dict())
            return True
        except Exception:
            logger.exception("Error saving preferences")
            return False

    def update_preferences_from_rating(
        self,
        rating: UserRating,
        cuisine: str,
        previous: Optional[UserRating] = None,
    ) -> UserPreferences:
        """Fold ``rating`` into the stored profile and return the new profile."""
        try:
            updated = apply_rating(self._load_preferences(), rating, cuisine, previous=previous)
            self._dump(self.preferences_key, updated.to_dict())
            return updated
        except Exception:
            logger.exception("Error updating preferences")
            return self.get_preferences()

    def clear_all(self) -> bool:
        try:
            self.backend.multi_remove([self.ratings_key, self.lists_key, self.preferences_key])
            logger.info("cleared all stored data")
            return True
        except Exception:
            logger.exception("Error clearing data")
            return False


def build_store(cfg: Configuration) -> PreferenceStore:
    backend: KeyValueBackend
    if cfg.persistent:
        backend = JsonFileBackend(cfg.storage_path)
    else:
        backend = MemoryBackend()
    return PreferenceStore(backend, key_prefix=cfg.key_prefix)
