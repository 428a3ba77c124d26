from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from ronaldo_eats.models import Location, Restaurant, UserPreferences, UserRating
from ronaldo_eats.services.ranking import DEFAULT_DIVERSE_COUNT, annotate_distances, recommend_diverse


MODE_RECOMMENDED = "recommended"
MODE_BROWSE = "browse"
FEED_MODES = (MODE_RECOMMENDED, MODE_BROWSE)


@dataclass
class FeedResult:
    mode: str
    restaurants: List[Restaurant] = field(default_factory=list)


def browse(restaurants: Sequence[Restaurant], location: Optional[Location] = None) -> List[Restaurant]:
    """Unpersonalized listing: nearest first when a location is known, else best rated first."""
    if location is not None:
        annotated = annotate_distances(restaurants, location)
        return sorted(annotated, key=lambda r: r.distance or 0.0)
    return sorted(restaurants, key=lambda r: r.rating, reverse=True)


def build_feed(
    restaurants: Sequence[Restaurant],
    preferences: UserPreferences,
    location: Optional[Location] = None,
    mode: str = MODE_RECOMMENDED,
    count: int = DEFAULT_DIVERSE_COUNT,
    *,
    exclude_rated: bool = False,
    rating_history: Iterable[UserRating] = (),
) -> FeedResult:
    if mode not in FEED_MODES:
        raise ValueError(f"unknown feed mode: {mode}")

    # Personalized results need at least one rating to learn from
    if mode == MODE_RECOMMENDED and preferences.total_ratings > 0:
        picked = recommend_diverse(
            restaurants,
            preferences,
            location,
            count,
            exclude_rated=exclude_rated,
            rating_history=rating_history,
        )
        return FeedResult(mode=MODE_RECOMMENDED, restaurants=picked)

    return FeedResult(mode=MODE_BROWSE, restaurants=browse(restaurants, location))
