"""Data models for the restaurant recommender."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


DEFAULT_PRICE_LEVEL = 2


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Restaurant:
    id: str
    name: str
    cuisine: str
    rating: float  # 0-5
    price_level: int  # 1-4 ($ .. $$$$)
    latitude: float
    longitude: float
    description: str = ""
    address: str = ""
    image: str = ""
    distance: Optional[float] = None  # miles, set per ranking pass

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Restaurant":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            cuisine=data["cuisine"],
            rating=float(data["rating"]),
            price_level=int(data["price_level"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            description=data.get("description", ""),
            address=data.get("address", ""),
            image=data.get("image", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class UserRating:
    restaurant_id: str
    rating: int  # 1-5
    timestamp: int  # epoch ms

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRating":
        return cls(
            restaurant_id=str(data["restaurant_id"]),
            rating=data["rating"],
            timestamp=int(data.get("timestamp", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class UserList:
    id: str
    name: str
    restaurant_ids: List[str] = field(default_factory=list)
    created_at: int = 0  # epoch ms

    def add_restaurant(self, restaurant_id: str) -> bool:
        """Append a restaurant id; returns False if it was already in the list."""
        if restaurant_id in self.restaurant_ids:
            return False
        self.restaurant_ids.append(restaurant_id)
        return True

    def remove_restaurant(self, restaurant_id: str) -> bool:
        before = len(self.restaurant_ids)
        self.restaurant_ids = [rid for rid in self.restaurant_ids if rid != restaurant_id]
        return len(self.restaurant_ids) != before

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserList":
        ids = [str(rid) for rid in data.get("restaurant_ids", [])]
        return cls(
            id=str(data["id"]),
            name=data["name"],
            restaurant_ids=list(dict.fromkeys(ids)),
            created_at=int(data.get("created_at", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class UserPreferences:
    cuisine_preferences: Dict[str, float] = field(default_factory=dict)  # cuisine -> affinity in [-1, 1]
    price_level_preference: int = DEFAULT_PRICE_LEVEL  # 1-4
    average_rating: float = 0.0
    total_ratings: int = 0

    @classmethod
    def default(cls) -> "UserPreferences":
        return cls()

    def affinity(self, cuisine: str) -> float:
        return self.cuisine_preferences.get(cuisine, 0.0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserPreferences":
        return cls(
            cuisine_preferences={str(k): float(v) for k, v in (data.get("cuisine_preferences") or {}).items()},
            price_level_preference=data.get("price_level_preference", DEFAULT_PRICE_LEVEL),
            average_rating=float(data.get("average_rating", 0.0)),
            total_ratings=int(data.get("total_ratings", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
