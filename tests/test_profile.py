from __future__ import annotations

from ronaldo_eats.models import UserList, UserPreferences
from ronaldo_eats.services.profile import build_profile_summary


def test_empty_profile_summary() -> None:
    summary = build_profile_summary(UserPreferences.default(), [])
    assert summary == {
        "total_ratings": 0,
        "average_rating": 0.0,
        "cuisines_tried": 0,
        "top_cuisines": [],
        "price_preference": {"level": 2, "display": "$$"},
        "list_count": 0,
    }


def test_profile_summary_with_history() -> None:
    prefs = UserPreferences(
        cuisine_preferences={"Sushi": 0.75, "BBQ": -0.5, "Thai": 0.1},
        price_level_preference=3,
        average_rating=3.666,
        total_ratings=3,
    )
    lists = [UserList(id="1", name="a"), UserList(id="2", name="b")]

    summary = build_profile_summary(prefs, lists)
    assert summary["average_rating"] == 3.7
    assert summary["cuisines_tried"] == 3
    assert summary["list_count"] == 2
    assert summary["price_preference"]["display"] == "$$$"
    assert [(c["cuisine"], c["label"]) for c in summary["top_cuisines"]] == [
        ("Sushi", "love"),
        ("Thai", "like"),
        ("BBQ", "dislike"),
    ]
