from __future__ import annotations

from typing import List, Optional, Tuple

from ronaldo_eats.models import UserPreferences, UserRating


NEUTRAL_RATING = 3
TOP_CUISINES_LIMIT = 5

LOVE_THRESHOLD = 0.3
DISLIKE_THRESHOLD = -0.3


def rating_weight(value: float) -> float:
    """Map a 1-5 star rating onto [-1, 1] (1 -> -1, 3 -> 0, 5 -> 1)."""
    return (value - NEUTRAL_RATING) / 2


def blend_affinity(current: float, weight: float) -> float:
    # Fixed 0.5 decay toward the newest signal
    return (current + weight) / 2


def apply_rating(
    preferences: UserPreferences,
    rating: UserRating,
    cuisine: str,
    previous: Optional[UserRating] = None,
) -> UserPreferences:
    """Fold a rating into a profile and return the updated copy.

    ``previous`` is the rating this one replaces for the same restaurant, if
    any. A replacement keeps ``total_ratings`` as is and swaps the old value
    out of the running average instead of counting the restaurant twice.
    The cuisine affinity blends the new signal either way, and the price
    level preference is left untouched.
    """
    cuisine_preferences = dict(preferences.cuisine_preferences)
    current = cuisine_preferences.get(cuisine, 0.0)
    cuisine_preferences[cuisine] = blend_affinity(current, rating_weight(rating.rating))

    count = preferences.total_ratings
    if previous is not None and count > 0:
        average = (preferences.average_rating * count - previous.rating + rating.rating) / count
    else:
        new_total = count + 1
        average = (preferences.average_rating * count + rating.rating) / new_total
        count = new_total

    return UserPreferences(
        cuisine_preferences=cuisine_preferences,
        price_level_preference=preferences.price_level_preference,
        average_rating=average,
        total_ratings=count,
    )


def top_cuisines(preferences: UserPreferences, limit: int = TOP_CUISINES_LIMIT) -> List[Tuple[str, float]]:
    ranked = sorted(preferences.cuisine_preferences.items(), key=lambda kv: kv[1], reverse=True)
    return ranked[: max(limit, 0)]


def affinity_label(score: float) -> str:
    if score > LOVE_THRESHOLD:
        return "love"
    if score > 0:
        return "like"
    if score < DISLIKE_THRESHOLD:
        return "dislike"
    return "neutral"
