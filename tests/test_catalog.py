from __future__ import annotations

import json

import pytest

from ronaldo_eats.models import Restaurant
from ronaldo_eats.services.catalog import RestaurantCatalog


def test_bundled_catalog_loads() -> None:
    catalog = RestaurantCatalog.from_file()
    assert len(catalog) > 0
    for r in catalog.all():
        assert 0.0 <= r.rating <= 5.0
        assert r.price_level in (1, 2, 3, 4)
        assert r.distance is None
    assert "Sushi" in catalog.cuisines()


def test_lookup_and_ordered_resolution(tmp_path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([
        {"id": "a", "name": "A", "cuisine": "Thai", "rating": 4.1, "price_level": 2, "latitude": 1.0, "longitude": 2.0},
        {"id": "b", "name": "B", "cuisine": "Sushi", "rating": 3.2, "price_level": 3, "latitude": 1.5, "longitude": 2.5},
    ]))
    catalog = RestaurantCatalog.from_file(path)

    assert catalog.get("a").name == "A"
    assert catalog.get("zzz") is None
    assert [r.id for r in catalog.by_ids(["b", "missing", "a"])] == ["b", "a"]


def test_duplicate_ids_rejected() -> None:
    r = Restaurant(id="x", name="X", cuisine="Thai", rating=4.0, price_level=2, latitude=0.0, longitude=0.0)
    with pytest.raises(ValueError):
        RestaurantCatalog([r, r])


def test_all_returns_a_copy() -> None:
    catalog = RestaurantCatalog.from_file()
    items = catalog.all()
    items.clear()
    assert len(catalog.all()) == len(catalog)
