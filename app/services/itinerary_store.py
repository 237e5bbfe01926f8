# file: services/itinerary_store.py

import time
from typing import Dict, List, Optional

from app.models.itinerary import (
    DaySlot,
    ItineraryItem,
    ItineraryState,
    ItinerarySummary,
    TripDetailsUpdate,
)
from app.models.trip import TripItemCreate
from app.services import trip_days


def _check_day(day: int) -> int:
    if day < 1:
        raise ValueError(f"Day must be 1 or greater, got {day}")
    return day


def _timestamp_ms() -> int:
    return time.time_ns() // 1_000_000


def new_item_id(candidate_id: str, existing_ids, timestamp: Optional[int] = None) -> str:
    """
    Builds `{candidate_id}-{timestamp}`. The timestamp is bumped until the id
    is unused so that adding the same candidate twice in one millisecond
    still yields two distinct items.
    """
    stamp = timestamp if timestamp is not None else _timestamp_ms()
    item_id = f"{candidate_id}-{stamp}"
    while item_id in existing_ids:
        stamp += 1
        item_id = f"{candidate_id}-{stamp}"
    return item_id


def external_ref(item_id: str) -> str:
    """Catalog id embedded in an item id, i.e. everything before the timestamp suffix."""
    head, sep, tail = item_id.rpartition("-")
    if sep and tail.isdigit():
        return head
    return item_id


def add_item(state: ItineraryState, candidate: ItineraryItem, day: Optional[int] = None,
             timestamp: Optional[int] = None) -> ItineraryState:
    target_day = _check_day(day if day is not None else state.selectedDay)
    existing_ids = {item.id for item in state.items}
    new_item = candidate.model_copy(update={
        "id": new_item_id(candidate.id, existing_ids, timestamp),
        "day": target_day,
    })
    return state.model_copy(update={"items": [*state.items, new_item]})


def remove_item(state: ItineraryState, item_id: str) -> ItineraryState:
    return state.model_copy(update={"items": [item for item in state.items if item.id != item_id]})


def move_item(state: ItineraryState, item_id: str, new_day: int) -> ItineraryState:
    # No upper bound: moving past the last day stretches the trip.
    _check_day(new_day)
    items = [
        item.model_copy(update={"day": new_day}) if item.id == item_id else item
        for item in state.items
    ]
    return state.model_copy(update={"items": items})


def set_trip_details(state: ItineraryState, details: TripDetailsUpdate) -> ItineraryState:
    changes = details.model_dump(exclude_unset=True)
    return state.model_copy(update={"trip": state.trip.model_copy(update=changes)})


def select_day(state: ItineraryState, day: int) -> ItineraryState:
    return state.model_copy(update={"selectedDay": _check_day(day)})


def add_day(state: ItineraryState) -> ItineraryState:
    return state.model_copy(update={"selectedDay": total_days(state) + 1})


def total_days(state: ItineraryState) -> int:
    return trip_days.total_days(state.trip.startDate, state.trip.endDate, state.items)


def total_cost(items: List[ItineraryItem]) -> float:
    return sum(item.price for item in items)


def items_for_day(items: List[ItineraryItem], day: int) -> List[ItineraryItem]:
    # Plain string ordering on "HH:MM"; sorted() keeps insertion order for ties.
    return sorted((item for item in items if item.day == day), key=lambda item: item.time or "")


def visible_days(state: ItineraryState) -> List[int]:
    """Every day from 1 up to the trip length, plus a freshly added empty day."""
    last_day = max(total_days(state), state.selectedDay)
    return list(range(1, last_day + 1))


def group_by_day(state: ItineraryState) -> Dict[int, List[ItineraryItem]]:
    return {day: items_for_day(state.items, day) for day in visible_days(state)}


def summarize(state: ItineraryState) -> ItinerarySummary:
    return ItinerarySummary(
        state=state,
        totalDays=total_days(state),
        totalCost=total_cost(state.items),
        days=[DaySlot(day=day, items=items) for day, items in group_by_day(state).items()],
    )


def to_trip_items(items: List[ItineraryItem]) -> List[TripItemCreate]:
    """Rows for `trip_items`, ordered by day then time."""
    rows = []
    for day in sorted({item.day for item in items}):
        for position, item in enumerate(items_for_day(items, day)):
            rows.append(TripItemCreate(
                type=item.type,
                title=item.title,
                description=item.description,
                day=item.day,
                time=item.time,
                duration=item.duration,
                location=item.location,
                price=item.price,
                image_url=item.image,
                category=item.category,
                rating=item.rating,
                external_id=external_ref(item.id),
                external_type=item.type,
                sort_order=position,
            ))
    return rows


def from_trip_items(rows) -> List[ItineraryItem]:
    """
    Rebuilds store items from persisted `trip_items` rows. Ids are rebuilt as
    `{external_id}-{position}` so that saving the trip again keeps the
    catalog reference in `external_id`.
    """
    return [
        ItineraryItem(
            id=f"{row.external_id or row.id}-{position}",
            type=row.type,
            title=row.title,
            description=row.description or "",
            location=row.location or "",
            day=row.day,
            time=row.time or "",
            duration=row.duration or "",
            price=row.price or 0,
            image=row.image_url,
            category=row.category,
            rating=row.rating,
        )
        for position, row in enumerate(rows)
    ]
