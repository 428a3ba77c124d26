from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Set

from ronaldo_eats.models import Location, Restaurant, UserPreferences, UserRating
from ronaldo_eats.services.scoring import distance_miles, score_restaurant


DEFAULT_DIVERSE_COUNT = 10


def annotate_distances(restaurants: Iterable[Restaurant], location: Location) -> List[Restaurant]:
    """Return copies of ``restaurants`` carrying their distance (miles) from ``location``."""
    return [replace(r, distance=distance_miles(location, r)) for r in restaurants]


def rank_restaurants(
    restaurants: Sequence[Restaurant],
    preferences: UserPreferences,
    location: Optional[Location] = None,
    *,
    exclude_rated: bool = False,
    rating_history: Iterable[UserRating] = (),
) -> List[Restaurant]:
    working: List[Restaurant] = list(restaurants)

    if exclude_rated:
        rated_ids = {r.restaurant_id for r in rating_history}
        working = [r for r in working if r.id not in rated_ids]

    if location is not None:
        working = annotate_distances(working, location)

    scores = [score_restaurant(r, preferences, location) for r in working]
    # sorted() is stable with reverse=True, equal scores keep input order
    order = sorted(range(len(working)), key=lambda i: scores[i], reverse=True)
    return [working[i] for i in order]


def score_map(
    restaurants: Iterable[Restaurant],
    preferences: UserPreferences,
    location: Optional[Location] = None,
) -> Dict[str, float]:
    return {r.id: score_restaurant(r, preferences, location) for r in restaurants}


def diversify(ranked: Sequence[Restaurant], count: int) -> List[Restaurant]:
    """Pick up to ``count`` restaurants, one per cuisine first, then backfill by rank."""
    if count <= 0:
        return []

    picked: List[Restaurant] = []
    picked_ids: Set[str] = set()
    seen_cuisines: Set[str] = set()

    # First pass: best restaurant of each cuisine
    for restaurant in ranked:
        if len(picked) >= count:
            break
        if restaurant.cuisine in seen_cuisines or restaurant.id in picked_ids:
            continue
        picked.append(restaurant)
        picked_ids.add(restaurant.id)
        seen_cuisines.add(restaurant.cuisine)

    # Second pass: fill remaining slots by raw rank
    for restaurant in ranked:
        if len(picked) >= count:
            break
        if restaurant.id in picked_ids:
            continue
        picked.append(restaurant)
        picked_ids.add(restaurant.id)

    return picked


def recommend_diverse(
    restaurants: Sequence[Restaurant],
    preferences: UserPreferences,
    location: Optional[Location] = None,
    count: int = DEFAULT_DIVERSE_COUNT,
    *,
    exclude_rated: bool = False,
    rating_history: Iterable[UserRating] = (),
) -> List[Restaurant]:
    ranked = rank_restaurants(
        restaurants,
        preferences,
        location,
        exclude_rated=exclude_rated,
        rating_history=rating_history,
    )
    return diversify(ranked, count)
