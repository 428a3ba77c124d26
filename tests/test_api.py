from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ronaldo_eats.config import Configuration
from ronaldo_eats.main import create_app
from ronaldo_eats.services.backends import MemoryBackend
from ronaldo_eats.services.catalog import RestaurantCatalog
from ronaldo_eats.services.storage import PreferenceStore


class FlakyBackend(MemoryBackend):
    """Memory backend whose writes to selected keys can be switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.failing: set[str] = set()

    def set_item(self, key: str, value: str) -> None:
        if key in self.failing:
            raise OSError(f"write refused for {key}")
        super().set_item(key, value)


# Union Square, San Francisco
USER_LAT = 37.7880
USER_LON = -122.4075


@pytest.fixture
def client() -> TestClient:
    app = create_app(
        Configuration(),
        store=PreferenceStore(MemoryBackend()),
        catalog=RestaurantCatalog.from_file(),
    )
    return TestClient(app)


def test_healthz(client: TestClient) -> None:
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_restaurants(client: TestClient) -> None:
    resp = client.get("/restaurants")
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) > 10

    one = client.get(f"/restaurants/{body[0]['id']}")
    assert one.json()["name"] == body[0]["name"]
    assert client.get("/restaurants/does-not-exist").status_code == 404


def test_feed_browses_until_first_rating(client: TestClient) -> None:
    body = client.get("/feed").json()
    assert body["mode"] == "browse"
    ratings = [r["rating"] for r in body["restaurants"]]
    assert ratings == sorted(ratings, reverse=True)

    located = client.get("/feed", params={"lat": USER_LAT, "lon": USER_LON}).json()
    distances = [r["distance"] for r in located["restaurants"]]
    assert distances == sorted(distances)


def test_feed_requires_both_coordinates(client: TestClient) -> None:
    assert client.get("/feed", params={"lat": USER_LAT}).status_code == 400


def test_feed_rejects_unknown_mode(client: TestClient) -> None:
    assert client.get("/feed", params={"mode": "trending"}).status_code == 400


def test_rating_updates_profile_and_feed(client: TestClient) -> None:
    resp = client.post("/ratings", json={"restaurant_id": "1", "rating": 5})
    assert resp.status_code == 200
    body = resp.json()
    assert body["replaced"] is False
    assert body["preferences"]["cuisine_preferences"] == {"Sushi": 0.5}
    assert body["preferences"]["total_ratings"] == 1

    feed = client.get("/feed", params={"lat": USER_LAT, "lon": USER_LON}).json()
    assert feed["mode"] == "recommended"
    items = feed["restaurants"]
    assert len(items) == 10
    assert len({r["cuisine"] for r in items}) == 10
    assert len({r["id"] for r in items}) == 10
    scores = [r["score"] for r in items]
    assert scores == sorted(scores, reverse=True)

    assert len(client.get("/feed", params={"count": 3}).json()["restaurants"]) == 3
    skipped = client.get("/feed", params={"exclude_rated": "true"}).json()
    assert "1" not in [r["id"] for r in skipped["restaurants"]]


def test_rerating_replaces_without_double_count(client: TestClient) -> None:
    client.post("/ratings", json={"restaurant_id": "1", "rating": 5})
    resp = client.post("/ratings", json={"restaurant_id": "1", "rating": 3})
    body = resp.json()

    assert body["replaced"] is True
    assert body["preferences"]["total_ratings"] == 1
    assert body["preferences"]["average_rating"] == 3.0
    assert body["preferences"]["cuisine_preferences"]["Sushi"] == 0.25
    assert len(client.get("/ratings").json()) == 1


def test_rating_validation(client: TestClient) -> None:
    assert client.post("/ratings", json={"restaurant_id": "1", "rating": 6}).status_code == 422
    assert client.post("/ratings", json={"restaurant_id": "1", "rating": 0}).status_code == 422
    assert client.post("/ratings", json={"restaurant_id": "nope", "rating": 4}).status_code == 404


def test_list_flow(client: TestClient) -> None:
    assert client.post("/lists", json={"name": "  "}).status_code == 400

    created = client.post("/lists", json={"name": "Date night"}).json()
    list_id = created["id"]
    assert created["restaurant_ids"] == []

    client.post(f"/lists/{list_id}/restaurants", json={"restaurant_id": "3"})
    resp = client.post(f"/lists/{list_id}/restaurants", json={"restaurant_id": "3"})
    assert resp.json()["restaurant_ids"] == ["3"]
    client.post(f"/lists/{list_id}/restaurants", json={"restaurant_id": "10"})

    names = [r["name"] for r in client.get(f"/lists/{list_id}/restaurants").json()]
    assert names == ["Trattoria Nonna", "Le Petit Bistro"]

    resp = client.delete(f"/lists/{list_id}/restaurants/3")
    assert resp.json()["restaurant_ids"] == ["10"]

    assert client.post(f"/lists/{list_id}/restaurants", json={"restaurant_id": "ghost"}).status_code == 404
    assert client.post("/lists/ghost/restaurants", json={"restaurant_id": "3"}).status_code == 404

    assert client.delete(f"/lists/{list_id}").status_code == 200
    assert client.get("/lists").json() == []
    assert client.delete(f"/lists/{list_id}").status_code == 404


def test_profile_and_clear(client: TestClient) -> None:
    client.post("/ratings", json={"restaurant_id": "1", "rating": 5})
    client.post("/ratings", json={"restaurant_id": "11", "rating": 1})
    client.post("/lists", json={"name": "Favorites"})

    profile = client.get("/profile").json()
    assert profile["total_ratings"] == 2
    assert profile["average_rating"] == 3.0
    assert profile["list_count"] == 1
    assert [c["cuisine"] for c in profile["top_cuisines"]] == ["Sushi", "BBQ"]

    assert client.delete("/data").status_code == 200
    assert client.get("/ratings").json() == []
    assert client.get("/lists").json() == []
    assert client.get("/preferences").json() == {
        "cuisine_preferences": {},
        "price_level_preference": 2,
        "average_rating": 0.0,
        "total_ratings": 0,
    }


def test_failed_rerating_leaves_profile_consistent() -> None:
    backend = FlakyBackend()
    store = PreferenceStore(backend)
    client = TestClient(create_app(Configuration(), store=store, catalog=RestaurantCatalog.from_file()))

    assert client.post("/ratings", json={"restaurant_id": "1", "rating": 5}).status_code == 200

    backend.failing.add(store.ratings_key)
    resp = client.post("/ratings", json={"restaurant_id": "1", "rating": 1})
    assert resp.status_code == 500

    prefs = client.get("/preferences").json()
    assert prefs["total_ratings"] == len(client.get("/ratings").json()) == 1
    assert prefs["average_rating"] == 5.0
    assert prefs["cuisine_preferences"] == {"Sushi": 0.5}


def test_failed_list_create_is_not_reported_as_created() -> None:
    backend = FlakyBackend()
    store = PreferenceStore(backend)
    backend.failing.add(store.lists_key)
    client = TestClient(create_app(Configuration(), store=store, catalog=RestaurantCatalog.from_file()))

    assert client.post("/lists", json={"name": "Brunch"}).status_code == 500
    assert client.get("/lists").json() == []
