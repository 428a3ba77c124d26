from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from ronaldo_eats.config import Configuration
from ronaldo_eats.models import Location, Restaurant, UserList, UserPreferences, UserRating
from ronaldo_eats.services.catalog import RestaurantCatalog
from ronaldo_eats.services.feed import MODE_RECOMMENDED, build_feed
from ronaldo_eats.services.profile import build_profile_summary
from ronaldo_eats.services.ranking import score_map
from ronaldo_eats.services.storage import PreferenceStore, build_store
from ronaldo_eats.utils import now_ms


class RestaurantPayload(BaseModel):
    id: str
    name: str
    cuisine: str
    rating: float
    price_level: int
    description: str = ""
    address: str = ""
    latitude: float
    longitude: float
    image: str = ""
    distance: Optional[float] = None
    score: Optional[float] = None


class FeedResponse(BaseModel):
    mode: str
    restaurants: List[RestaurantPayload]


class RatingRequest(BaseModel):
    restaurant_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5, description="Star rating, 1-5")


class RatingPayload(BaseModel):
    restaurant_id: str
    rating: int
    timestamp: int


class PreferencesPayload(BaseModel):
    cuisine_preferences: Dict[str, float] = {}
    price_level_preference: int = 2
    average_rating: float = 0.0
    total_ratings: int = 0


class RatingResponse(BaseModel):
    rating: RatingPayload
    replaced: bool
    preferences: PreferencesPayload


class ListPayload(BaseModel):
    id: str
    name: str
    restaurant_ids: List[str] = []
    created_at: int


class CreateListRequest(BaseModel):
    name: str


class ListRestaurantRequest(BaseModel):
    restaurant_id: str = Field(..., min_length=1)


def _restaurant_payload(r: Restaurant, score: Optional[float] = None) -> RestaurantPayload:
    return RestaurantPayload(**r.to_dict(), score=score)


def _list_payload(user_list: UserList) -> ListPayload:
    return ListPayload(**user_list.to_dict())


def _preferences_payload(preferences: UserPreferences) -> PreferencesPayload:
    return PreferencesPayload(**preferences.to_dict())


def _resolve_location(lat: Optional[float], lon: Optional[float]) -> Optional[Location]:
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise ValueError("lat and lon must be given together")
    return Location(latitude=lat, longitude=lon)


def create_app(
    cfg: Optional[Configuration] = None,
    store: Optional[PreferenceStore] = None,
    catalog: Optional[RestaurantCatalog] = None,
) -> FastAPI:
    cfg = cfg or Configuration.from_env()
    store = store or build_store(cfg)
    catalog = catalog or RestaurantCatalog.from_file(cfg.catalog_path)

    app = FastAPI(title="Ronaldo Eats")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.cfg = cfg
    app.state.store = store
    app.state.catalog = catalog

    def _require_list(list_id: str) -> UserList:
        user_list = store.get_list(list_id)
        if user_list is None:
            raise HTTPException(status_code=404, detail=f"list not found: {list_id}")
        return user_list

    def _require_restaurant(restaurant_id: str) -> Restaurant:
        restaurant = catalog.get(restaurant_id)
        if restaurant is None:
            raise HTTPException(status_code=404, detail=f"restaurant not found: {restaurant_id}")
        return restaurant

    @app.get("/healthz")
    def healthz() -> dict:
        logger.info("cfg: {}", cfg.log_summary())
        return {"status": "ok", "restaurants": len(catalog)}

    # Restaurants

    @app.get("/restaurants", response_model=List[RestaurantPayload])
    def list_restaurants() -> List[RestaurantPayload]:
        return [_restaurant_payload(r) for r in catalog.all()]

    @app.get("/restaurants/{restaurant_id}", response_model=RestaurantPayload)
    def get_restaurant(restaurant_id: str) -> RestaurantPayload:
        return _restaurant_payload(_require_restaurant(restaurant_id))

    # Feed

    @app.get("/feed", response_model=FeedResponse)
    def feed(
        lat: Optional[float] = Query(None, description="User latitude"),
        lon: Optional[float] = Query(None, description="User longitude"),
        mode: str = Query(MODE_RECOMMENDED, description="recommended or browse"),
        count: Optional[int] = Query(None, ge=1, le=50),
        exclude_rated: Optional[bool] = Query(None),
    ) -> FeedResponse:
        try:
            location = _resolve_location(lat, lon)
            preferences = store.get_preferences()
            ratings = store.get_ratings()
            result = build_feed(
                catalog.all(),
                preferences,
                location,
                mode=mode,
                count=count or cfg.feed_count,
                exclude_rated=cfg.exclude_rated if exclude_rated is None else exclude_rated,
                rating_history=ratings,
            )
            scores = score_map(result.restaurants, preferences, location)
            logger.info(
                "feed mode={} located={} results={} total_ratings={}",
                result.mode,
                location is not None,
                len(result.restaurants),
                preferences.total_ratings,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except Exception as exc:
            logger.exception("feed failed: {}", exc)
            raise HTTPException(status_code=500, detail="internal error")

        return FeedResponse(
            mode=result.mode,
            restaurants=[_restaurant_payload(r, round(scores[r.id], 2)) for r in result.restaurants],
        )

    # Ratings

    @app.get("/ratings", response_model=List[RatingPayload])
    def get_ratings() -> List[RatingPayload]:
        return [RatingPayload(**r.to_dict()) for r in store.get_ratings()]

    @app.post("/ratings", response_model=RatingResponse)
    def rate(req: RatingRequest) -> RatingResponse:
        restaurant = _require_restaurant(req.restaurant_id)
        rating = UserRating(restaurant_id=restaurant.id, rating=req.rating, timestamp=now_ms())

        write = store.save_rating(rating)
        if not write.saved:
            logger.error("rating for restaurant={} was not stored, profile left unchanged", restaurant.id)
            raise HTTPException(status_code=500, detail="rating could not be saved")
        previous = write.previous
        preferences = store.update_preferences_from_rating(rating, restaurant.cuisine, previous=previous)
        logger.info(
            "rating restaurant={} cuisine={} rating={} replaced={}",
            restaurant.id,
            restaurant.cuisine,
            rating.rating,
            previous is not None,
        )
        return RatingResponse(
            rating=RatingPayload(**rating.to_dict()),
            replaced=previous is not None,
            preferences=_preferences_payload(preferences),
        )

    # Lists

    @app.get("/lists", response_model=List[ListPayload])
    def get_lists() -> List[ListPayload]:
        return [_list_payload(l) for l in store.get_lists()]

    @app.post("/lists", response_model=ListPayload)
    def create_list(req: CreateListRequest) -> ListPayload:
        try:
            user_list = store.create_list(req.name)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        if user_list is None:
            raise HTTPException(status_code=500, detail="list could not be saved")
        return _list_payload(user_list)

    @app.delete("/lists/{list_id}")
    def delete_list(list_id: str) -> dict:
        _require_list(list_id)
        store.delete_list(list_id)
        return {"status": "deleted", "id": list_id}

    @app.get("/lists/{list_id}/restaurants", response_model=List[RestaurantPayload])
    def list_restaurants_in_list(list_id: str) -> List[RestaurantPayload]:
        user_list = _require_list(list_id)
        return [_restaurant_payload(r) for r in catalog.by_ids(user_list.restaurant_ids)]

    @app.post("/lists/{list_id}/restaurants", response_model=ListPayload)
    def add_to_list(list_id: str, req: ListRestaurantRequest) -> ListPayload:
        _require_list(list_id)
        _require_restaurant(req.restaurant_id)
        updated = store.add_restaurant_to_list(list_id, req.restaurant_id)
        if updated is None:
            raise HTTPException(status_code=500, detail="internal error")
        return _list_payload(updated)

    @app.delete("/lists/{list_id}/restaurants/{restaurant_id}", response_model=ListPayload)
    def remove_from_list(list_id: str, restaurant_id: str) -> ListPayload:
        _require_list(list_id)
        updated = store.remove_restaurant_from_list(list_id, restaurant_id)
        if updated is None:
            raise HTTPException(status_code=500, detail="internal error")
        return _list_payload(updated)

    # Profile

    @app.get("/preferences", response_model=PreferencesPayload)
    def get_preferences() -> PreferencesPayload:
        return _preferences_payload(store.get_preferences())

    @app.get("/profile")
    def profile() -> Dict[str, Any]:
        return build_profile_summary(store.get_preferences(), store.get_lists())

    @app.delete("/data")
    def clear_data() -> dict:
        store.clear_all()
        return {"status": "cleared"}

    return app


def configure_logging(cfg: Configuration) -> None:
    logger.remove()
    logger.add(sys.stderr, level=cfg.log_level.upper())


def main() -> None:
    import uvicorn

    load_dotenv()
    cfg = Configuration.from_env()
    configure_logging(cfg)
    logger.info("starting with {}", cfg.log_summary())
    uvicorn.run(create_app(cfg), host="0.0.0.0", port=8010)


if __name__ == "__main__":
    main()
