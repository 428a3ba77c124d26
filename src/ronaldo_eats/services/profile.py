from __future__ import annotations

from typing import Any, Dict, Sequence

from ronaldo_eats.models import UserList, UserPreferences
from ronaldo_eats.services.preferences import TOP_CUISINES_LIMIT, affinity_label, top_cuisines
from ronaldo_eats.utils import price_string


def build_profile_summary(
    preferences: UserPreferences,
    lists: Sequence[UserList],
    top_limit: int = TOP_CUISINES_LIMIT,
) -> Dict[str, Any]:
    return {
        "total_ratings": preferences.total_ratings,
        "average_rating": round(preferences.average_rating, 1),
        "cuisines_tried": len(preferences.cuisine_preferences),
        "top_cuisines": [
            {"cuisine": name, "score": round(score, 4), "label": affinity_label(score)}
            for name, score in top_cuisines(preferences, top_limit)
        ],
        "price_preference": {
            "level": preferences.price_level_preference,
            "display": price_string(preferences.price_level_preference),
        },
        "list_count": len(lists),
    }
