from __future__ import annotations

from typing import Optional

from ronaldo_eats.models import Location, Restaurant, UserPreferences
from ronaldo_eats.utils import clamp, haversine_miles


RATING_WEIGHT = 20.0
CUISINE_WEIGHT = 20.0
PRICE_MISMATCH_PENALTY = 5.0
QUALITY_THRESHOLD = 4.5
QUALITY_BONUS = 10.0
MIN_SCORE = 0.0
MAX_SCORE = 100.0


def distance_miles(location: Location, restaurant: Restaurant) -> float:
    return haversine_miles(
        location.latitude,
        location.longitude,
        restaurant.latitude,
        restaurant.longitude,
    )


def distance_bonus(miles: float) -> float:
    """Step bonus for proximity; first matching band wins."""
    if miles < 1:
        return 15.0
    elif miles < 3:
        return 10.0
    elif miles < 5:
        return 5.0
    elif miles > 10:
        return -10.0
    return 0.0


def score_restaurant(
    restaurant: Restaurant,
    preferences: UserPreferences,
    location: Optional[Location] = None,
) -> float:
    """Suitability of a restaurant for a profile, in [0, 100].

    Combines the restaurant's own rating, the learned cuisine affinity,
    proximity to ``location`` (skipped when unknown), distance from the
    preferred price level and a bonus for top rated places.
    """
    score = restaurant.rating * RATING_WEIGHT
    score += preferences.affinity(restaurant.cuisine) * CUISINE_WEIGHT  # -20 .. +20

    if location is not None:
        score += distance_bonus(distance_miles(location, restaurant))

    price_diff = abs(restaurant.price_level - preferences.price_level_preference)
    score -= price_diff * PRICE_MISMATCH_PENALTY

    if restaurant.rating >= QUALITY_THRESHOLD:
        score += QUALITY_BONUS

    return clamp(score, MIN_SCORE, MAX_SCORE)
