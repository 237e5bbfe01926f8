# file: services/catalog_filters.py

from datetime import date
from typing import List, Literal, Optional, Sequence

from app.models.catalog import Event, Hotel, Island
from app.models.itinerary import ItineraryItem

ISLAND_CANDIDATE_LIMIT = 10
EVENT_CANDIDATE_LIMIT = 20
HOTEL_CANDIDATE_LIMIT = 15

PRICE_ORDER = {"$": 1, "$$": 2, "$$$": 3, "$$$$": 4}

HotelSort = Literal["rating", "stars", "price"]


def island_candidate(island: Island) -> ItineraryItem:
    return ItineraryItem(
        id=f"island-{island.id}",
        type="island",
        title=f"Explore {island.name}",
        description=island.description or f"Discover the beauty of {island.name}",
        day=1,
        time="09:00",
        duration="Full Day",
        location=island.name,
        price=0,
        image=island.image_url,
        category="destination",
        rating=4.8,
    )


def event_candidate(event: Event) -> ItineraryItem:
    return ItineraryItem(
        id=f"event-{event.id}",
        type="event",
        title=event.title,
        description=event.description or "",
        day=1,
        time=event.start_time or "10:00",
        duration="3 hours",
        location=event.location or "",
        price=event.price or 0,
        image=event.image_url,
        category=event.type.lower() if event.type else "activity",
        rating=4.5,
    )


def hotel_candidate(hotel: Hotel) -> ItineraryItem:
    return ItineraryItem(
        id=f"hotel-{hotel.id}",
        type="hotel",
        title=hotel.name,
        description=hotel.description or f"Stay at {hotel.name}",
        day=1,
        time="15:00",
        duration="Overnight",
        location=hotel.location or "",
        price=hotel.price_per_night or 200,
        image=hotel.image_url,
        category="accommodation",
        rating=hotel.rating or 4.0,
    )


def build_candidates(islands: Sequence[Island], events: Sequence[Event],
                     hotels: Sequence[Hotel]) -> List[ItineraryItem]:
    return (
        [island_candidate(i) for i in islands[:ISLAND_CANDIDATE_LIMIT]]
        + [event_candidate(e) for e in events[:EVENT_CANDIDATE_LIMIT]]
        + [hotel_candidate(h) for h in hotels[:HOTEL_CANDIDATE_LIMIT]]
    )


def search_candidates(candidates: List[ItineraryItem], term: str = "",
                      category: str = "all") -> List[ItineraryItem]:
    term = (term or "").lower()
    results = []
    for item in candidates:
        matches_search = term in (item.title or "").lower() or term in (item.description or "").lower()
        matches_category = category == "all" or item.category == category
        if matches_search and matches_category:
            results.append(item)
    return results


def filter_hotels(hotels: List[Hotel], query: str = "", star_ratings: Sequence[int] = (),
                  island_slugs: Sequence[str] = (), price_ranges: Sequence[str] = (),
                  amenities: Sequence[str] = (), sort_by: HotelSort = "rating") -> List[Hotel]:
    query = (query or "").lower()
    filtered = []
    for hotel in hotels:
        if query:
            haystacks = [hotel.name, hotel.description or "", hotel.island.name if hotel.island else ""]
            if not any(query in h.lower() for h in haystacks):
                continue
        if star_ratings and hotel.star_rating not in star_ratings:
            continue
        if island_slugs and (not hotel.island or hotel.island.slug not in island_slugs):
            continue
        if price_ranges and hotel.price_range not in price_ranges:
            continue
        if amenities and not all(
                any(wanted in amenity for amenity in hotel.amenities or []) for wanted in amenities):
            continue
        filtered.append(hotel)

    if sort_by == "rating":
        filtered.sort(key=lambda h: h.rating or 0, reverse=True)
    elif sort_by == "stars":
        filtered.sort(key=lambda h: h.star_rating or 0, reverse=True)
    elif sort_by == "price":
        filtered.sort(key=lambda h: PRICE_ORDER.get(h.price_range, 0))
    return filtered


def filter_events(events: List[Event], query: str = "", event_types: Sequence[str] = (),
                  island_slugs: Sequence[str] = (), start: Optional[date] = None,
                  end: Optional[date] = None) -> List[Event]:
    query = (query or "").lower()
    filtered = []
    for event in events:
        if query and query not in event.title.lower() and query not in (event.description or "").lower():
            continue
        if event_types and event.type not in event_types:
            continue
        if island_slugs and (not event.island or event.island.slug not in island_slugs):
            continue
        if start and event.start_date < start:
            continue
        if end and event.start_date > end:
            continue
        filtered.append(event)
    return filtered
