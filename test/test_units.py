import pytest
from datetime import date, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

from pydantic import ValidationError
from sqlalchemy.sql.dml import Delete


def make_item(item_id="island-1-1", day=1, time="09:00", price=0.0, type="island", **extra):
    return ItineraryItem(id=item_id, type=type, title=f"Item {item_id}", day=day, time=time, price=price, **extra)


###############################################################
# 1. Unit Tests for `app/services/trip_days.py`
###############################################################
from app.models.itinerary import ItineraryItem, ItineraryState, TripDetails, TripDetailsUpdate
from app.services.trip_days import total_days, date_span_days, validate_trip_dates, parse_trip_date, MAX_TRIP_DAYS


def test_utc_001_total_days_without_dates_uses_max_item_day():
    assert total_days(None, None, []) == 1
    items = [make_item(day=1), make_item("b-1", day=4), make_item("c-1", day=2)]
    assert total_days(None, None, items) == 4
    assert total_days("2030-06-01", None, items) == 4


def test_utc_002_total_days_from_date_span():
    assert total_days("2024-06-01", "2024-06-05", []) == 5
    assert date_span_days("2024-06-01", "2024-06-02") == 2


def test_utc_003_total_days_item_beyond_span_wins():
    items = [make_item(day=2), make_item("b-1", day=9)]
    assert total_days("2024-06-01", "2024-06-05", items) == 9
    assert total_days("2024-06-01", "2024-06-05", [make_item(day=3)]) == 5


def test_utc_004_total_days_unordered_range_falls_back_to_items():
    items = [make_item(day=3)]
    assert total_days("2024-06-05", "2024-06-01", items) == 3
    assert total_days("2024-06-05", "2024-06-05", []) == 1
    assert date_span_days("2024-06-05", "2024-06-01") is None


def test_utc_005_parse_trip_date_accepts_dates_and_rejects_garbage():
    assert parse_trip_date(date(2024, 6, 1)).day == 1
    assert parse_trip_date("") is None
    assert parse_trip_date("not-a-date") is None
    assert total_days("not-a-date", "2024-06-05", [make_item(day=2)]) == 2


def test_utc_006_validate_trip_dates():
    today = date(2030, 1, 10)
    assert validate_trip_dates(None, None, today=today) is None
    assert validate_trip_dates("2030-01-12", "2030-01-15", today=today) is None
    assert validate_trip_dates("2030-01-09", "2030-01-15", today=today) == "Start date cannot be in the past"
    assert validate_trip_dates("2030-01-15", "2030-01-15", today=today) == "End date must be after start date"
    assert validate_trip_dates("2030-01-15", "2030-01-12", today=today) == "End date must be after start date"
    assert "30 days" in validate_trip_dates("2030-01-12", "2030-02-12", today=today)
    assert validate_trip_dates("garbage", None, today=today) == "Start date is not a valid date"


def test_utc_007_validate_trip_dates_span_limit_is_inclusive():
    start = date(2030, 3, 1)
    last_allowed = start + timedelta(days=MAX_TRIP_DAYS - 1)
    assert validate_trip_dates(start, last_allowed, today=date(2030, 1, 1)) is None
    assert validate_trip_dates(start, last_allowed + timedelta(days=1), today=date(2030, 1, 1)) is not None


###############################################################
# 2. Unit Tests for `app/services/itinerary_store.py`
###############################################################
from app.services import itinerary_store as store


def test_utc_008_empty_trip_scenario():
    state = ItineraryState()
    assert store.total_days(state) == 1
    assert store.total_cost(state.items) == 0
    assert store.items_for_day(state.items, 1) == []


def test_utc_009_add_item_clones_candidate_onto_selected_day():
    candidate = make_item("hotel-42", day=1, price=200, type="hotel")
    state = ItineraryState(selectedDay=3)
    state = store.add_item(state, candidate, timestamp=1700000000000)

    added = state.items[0]
    assert added.id == "hotel-42-1700000000000"
    assert added.day == 3
    assert added.price == 200
    assert candidate.id == "hotel-42"
    assert candidate.day == 1


def test_utc_010_add_same_candidate_twice_yields_two_items():
    candidate = make_item("event-7", type="event")
    state = store.add_item(ItineraryState(), candidate, timestamp=5)
    state = store.add_item(state, candidate, timestamp=5)
    assert len(state.items) == 2
    assert state.items[0].id != state.items[1].id


def test_utc_011_add_item_does_not_mutate_previous_state():
    before = ItineraryState()
    after = store.add_item(before, make_item())
    assert before.items == []
    assert len(after.items) == 1


def test_utc_012_move_item_changes_day_and_stretches_trip():
    state = ItineraryState(items=[make_item("a-1", day=1), make_item("b-1", day=2)])
    moved = store.move_item(state, "a-1", 6)

    assert "a-1" not in [i.id for i in store.items_for_day(moved.items, 1)]
    assert "a-1" in [i.id for i in store.items_for_day(moved.items, 6)]
    assert store.total_days(moved) == 6


def test_utc_013_move_unknown_item_is_noop():
    state = ItineraryState(items=[make_item("a-1", day=1)])
    assert store.move_item(state, "missing", 2).items == state.items


def test_utc_014_day_below_one_is_rejected():
    state = ItineraryState(items=[make_item("a-1", day=1)])
    with pytest.raises(ValueError):
        store.move_item(state, "a-1", 0)
    with pytest.raises(ValueError):
        store.add_item(state, make_item("b"), day=-1)
    with pytest.raises(ValueError):
        store.select_day(state, 0)
    with pytest.raises(ValidationError):
        make_item(day=0)


def test_utc_015_total_cost_tracks_adds_and_removes():
    state = ItineraryState(items=[make_item("a-1", price=120.5), make_item("b-1", price=79.5)])
    assert store.total_cost(state.items) == 200

    with_free = store.add_item(state, make_item("island-9", price=0))
    assert store.total_cost(with_free.items) == 200

    without_a = store.remove_item(with_free, "a-1")
    assert store.total_cost(without_a.items) == 200 - 120.5


def test_utc_016_items_for_day_orders_by_time_string():
    items = [
        make_item("late", day=2, time="18:00"),
        make_item("early", day=2, time="08:30"),
        make_item("other-day", day=1, time="07:00"),
        make_item("first-noon", day=2, time="12:00"),
        make_item("second-noon", day=2, time="12:00"),
    ]
    ordered = [i.id for i in store.items_for_day(items, 2)]
    assert ordered == ["early", "first-noon", "second-noon", "late"]


def test_utc_017_items_at_days_1_1_3():
    state = ItineraryState(items=[make_item("a-1", day=1), make_item("b-1", day=1), make_item("c-1", day=3)])
    assert store.total_days(state) == 3
    assert store.items_for_day(state.items, 2) == []
    assert store.visible_days(state) == [1, 2, 3]


def test_utc_018_add_day_selects_a_new_empty_day():
    state = ItineraryState(items=[make_item("a-1", day=2)])
    state = store.add_day(state)
    assert state.selectedDay == 3
    assert store.total_days(state) == 2
    summary = store.summarize(state)
    assert [slot.day for slot in summary.days] == [1, 2, 3]
    assert summary.days[2].items == []

    state = store.add_item(state, make_item("hotel-1", type="hotel"))
    assert state.items[-1].day == 3
    assert store.total_days(state) == 3


def test_utc_019_set_trip_details_merges_partial_update():
    state = ItineraryState(trip=TripDetails(name="Old", travelers=2))
    state = store.set_trip_details(state, TripDetailsUpdate(startDate="2024-06-01", endDate="2024-06-05"))
    assert state.trip.name == "Old"
    assert state.trip.travelers == 2
    assert store.total_days(state) == 5


def test_utc_020_to_trip_items_orders_and_extracts_external_ids():
    items = [
        make_item("hotel-abc-1700000000001", day=2, time="15:00", type="hotel", image="/h.jpg"),
        make_item("event-xyz-1700000000002", day=1, time="10:00", type="event"),
        make_item("island-q-1700000000003", day=2, time="09:00"),
    ]
    rows = store.to_trip_items(items)
    assert [(r.day, r.sort_order, r.external_id) for r in rows] == [
        (1, 0, "event-xyz"),
        (2, 0, "island-q"),
        (2, 1, "hotel-abc"),
    ]
    assert rows[2].external_type == "hotel"
    assert rows[2].image_url == "/h.jpg"


def test_utc_021_external_ref_keeps_ids_without_timestamp():
    assert store.external_ref("island-bali") == "island-bali"
    assert store.external_ref("island-123-99") == "island-123"


###############################################################
# 3. Unit Tests for `app/services/match_scorer.py`
###############################################################
from app.models.catalog import Island, Event, Hotel
from app.models.recommendations import UserPreferences
from app.services import match_scorer


def test_utc_022_beach_lover_on_tropical_island():
    prefs = UserPreferences(interests=["Beach activities"])
    island = Island(id="1", name="Bali", slug="bali", climate="Tropical")
    assert match_scorer.score_island(island, prefs) == pytest.approx(0.8)
    reasons = match_scorer.island_reasons(island, prefs)
    assert any("beach" in r.lower() for r in reasons)


def test_utc_023_scores_are_capped_at_one():
    prefs = UserPreferences(interests=["Beach activities", "Hiking"], travelStyle=["Adventure"])
    island = Island(id="1", name="Big", slug="big", climate="Tropical", area_km2=500)
    assert match_scorer.score_island(island, prefs) == 1.0

    activity_prefs = UserPreferences(interests=["Water sports", "Cultural", "Adventure sports"])
    activity = Event(id="e", title="Dive", type="Water Sports", start_date=date(2030, 1, 1), price=200)
    score = match_scorer.score_activity(activity, activity_prefs)
    assert 0 <= score <= 1
    assert score == 1.0


def test_utc_024_activity_budget_rule():
    prefs = UserPreferences(budgetRange=(1000, 5000))
    in_budget = Event(id="e1", title="Tour", type="Cultural", start_date=date(2030, 1, 1), price=100)
    too_cheap = Event(id="e2", title="Walk", type="Cultural", start_date=date(2030, 1, 1), price=None)
    assert match_scorer.score_activity(in_budget, prefs) == pytest.approx(0.6)
    assert match_scorer.score_activity(too_cheap, prefs) == pytest.approx(0.4)


def test_utc_025_hotel_daily_budget_and_type_rules():
    prefs = UserPreferences(budgetRange=(1000, 7000), duration=7, accommodationType=["Resort"])
    # daily budget 1000, room allowance 400
    affordable_resort = Hotel(id="h1", name="A", type="Resort", price_per_night=350)
    pricey_resort = Hotel(id="h2", name="B", type="Resort", price_per_night=900)
    unpriced = Hotel(id="h3", name="C", type="Hostel")
    assert match_scorer.score_hotel(affordable_resort, prefs) == pytest.approx(0.9)
    assert match_scorer.score_hotel(pricey_resort, prefs) == pytest.approx(0.6)
    assert match_scorer.score_hotel(unpriced, prefs) == pytest.approx(0.7)


def test_utc_026_reasons_are_truncated_to_three():
    prefs = UserPreferences(interests=["Beach activities"], travelStyle=["Adventure", "Cultural"])
    island = Island(id="1", name="Bali", slug="bali", climate="Tropical")
    assert match_scorer.island_reasons(island, prefs) == [
        "Perfect for beach lovers",
        "Great for adventure activities",
        "Beautiful tropical climate",
    ]
    hotel = Hotel(id="h", name="H", rating=4.9)
    assert match_scorer.hotel_reasons(hotel, UserPreferences(travelStyle=["Luxury", "Romantic"])) == [
        "Excellent guest reviews", "Luxury amenities", "Perfect for couples"]


def test_utc_027_recommend_sorts_caps_and_skips_dismissed():
    prefs = UserPreferences(interests=["Beach activities"])
    islands = [Island(id=str(n), name=f"Isle {n}", slug=f"isle-{n}", climate="Tropical" if n % 2 else "Arid")
               for n in range(10)]
    hotels = [Hotel(id=str(n), name=f"Hotel {n}") for n in range(6)]
    recs = match_scorer.recommend(islands, [], hotels, prefs, dismissed=["island-1"])

    assert len(recs) == match_scorer.MAX_RECOMMENDATIONS
    assert "island-1" not in [r.id for r in recs]
    scores = [r.matchScore for r in recs]
    assert scores == sorted(scores, reverse=True)
    assert recs[0].type == "island" and recs[0].matchScore == pytest.approx(0.8)
    assert all(r.matchScore > match_scorer.MIN_MATCH_SCORE for r in recs)


def test_utc_028_user_preferences_reject_inverted_budget():
    with pytest.raises(ValidationError):
        UserPreferences(budgetRange=(5000, 1000))


###############################################################
# 4. Unit Tests for `app/services/catalog_filters.py`
###############################################################
from app.models.catalog import IslandRef
from app.services import catalog_filters


def test_utc_029_catalog_candidates_use_builder_defaults():
    island = Island(id="i1", name="Bali", slug="bali")
    event = Event(id="e1", title="Dance", type="Cultural", start_date=date(2030, 1, 1))
    hotel = Hotel(id="h1", name="Inn")
    candidates = catalog_filters.build_candidates([island], [event], [hotel])

    assert [c.id for c in candidates] == ["island-i1", "event-e1", "hotel-h1"]
    assert candidates[0].title == "Explore Bali"
    assert candidates[0].description == "Discover the beauty of Bali"
    assert candidates[1].time == "10:00" and candidates[1].category == "cultural"
    assert candidates[2].price == 200 and candidates[2].rating == 4.0


def test_utc_030_search_candidates_by_term_and_category():
    candidates = catalog_filters.build_candidates(
        [Island(id="i1", name="Bali", slug="bali")], [],
        [Hotel(id="h1", name="Bali Beach Inn"), Hotel(id="h2", name="Harbour Lodge")])
    assert len(catalog_filters.search_candidates(candidates, "BALI")) == 2
    assert [c.id for c in catalog_filters.search_candidates(candidates, "bali", "accommodation")] == ["hotel-h1"]
    assert len(catalog_filters.search_candidates(candidates, "", "all")) == 3


def test_utc_031_filter_hotels_and_sort():
    bali = IslandRef(name="Bali", slug="bali")
    hotels = [
        Hotel(id="1", name="Cheap", price_range="$", star_rating=2, rating=3.9, island=bali, amenities=["Free WiFi"]),
        Hotel(id="2", name="Lux", price_range="$$$$", star_rating=5, rating=4.9, island=bali,
              amenities=["Infinity Pool", "Free WiFi"]),
        Hotel(id="3", name="Mid", price_range="$$", star_rating=4, rating=4.2, amenities=["Pool"]),
    ]
    assert [h.id for h in catalog_filters.filter_hotels(hotels)] == ["2", "3", "1"]
    assert [h.id for h in catalog_filters.filter_hotels(hotels, sort_by="price")] == ["1", "3", "2"]
    assert [h.id for h in catalog_filters.filter_hotels(hotels, island_slugs=["bali"], sort_by="stars")] == ["2", "1"]
    assert [h.id for h in catalog_filters.filter_hotels(hotels, amenities=["Pool", "WiFi"])] == ["2"]
    assert [h.id for h in catalog_filters.filter_hotels(hotels, query="bali")] == ["2", "1"]


def test_utc_032_filter_events_by_type_island_and_dates():
    bali = IslandRef(name="Bali", slug="bali")
    events = [
        Event(id="1", title="Surf", type="Water Sports", start_date=date(2030, 1, 5), island=bali),
        Event(id="2", title="Temple", type="Cultural", start_date=date(2030, 2, 5), island=bali),
        Event(id="3", title="Market", type="Cultural", start_date=date(2030, 3, 5)),
    ]
    assert [e.id for e in catalog_filters.filter_events(events, event_types=["Cultural"])] == ["2", "3"]
    assert [e.id for e in catalog_filters.filter_events(events, island_slugs=["bali"])] == ["1", "2"]
    assert [e.id for e in catalog_filters.filter_events(events, start=date(2030, 2, 1),
                                                        end=date(2030, 2, 28))] == ["2"]


###############################################################
# 5. Unit Tests for sharing and PDF export
###############################################################
from app.services.sharing import generate_short_id, create_shareable_url, SHORT_ID_ALPHABET
from app.services.pdf_export import build_trip_pdf, format_trip_date


def test_utc_033_short_ids_are_eight_alphanumerics():
    for _ in range(50):
        short_id = generate_short_id()
        assert len(short_id) == 8
        assert all(c in SHORT_ID_ALPHABET for c in short_id)
    assert create_shareable_url("ABCD1234").endswith("/trip/ABCD1234")


def test_utc_034_pdf_export_renders_document():
    trip = TripDetails(name="Island Hopping – Bali", startDate="2030-06-01", endDate="2030-06-03")
    items = [make_item("a-1", day=1, price=50, location="Ubud"), make_item("b-1", day=3, description="Sunset")]
    content = build_trip_pdf(trip, items)
    assert content.startswith(b"%PDF")
    assert format_trip_date("2030-06-01") == "June 1, 2030"
    assert format_trip_date(None) == "Not specified"


###############################################################
# 6. Unit Tests for `app/services/trip_service.py`
###############################################################
from app.models.trip import TripCreate, TripItemCreate, TripUpdate
from app.services import trip_service


@pytest.mark.asyncio
async def test_utc_035_save_trip_removes_trip_when_items_fail(mock_db_session):
    mock_db_session.commit.side_effect = [None, Exception("items insert failed"), None]
    items = [TripItemCreate(type="island", title="Explore Bali", day=1)]

    result = await trip_service.save_trip(mock_db_session, TripCreate(name="Bali"), items)

    assert result is None
    mock_db_session.rollback.assert_awaited_once()
    executed = [call.args[0] for call in mock_db_session.execute.await_args_list]
    assert any(isinstance(stmt, Delete) for stmt in executed)
    assert mock_db_session.commit.await_count == 3


@pytest.mark.asyncio
async def test_utc_036_save_trip_without_items_skips_item_insert(mock_db_session):
    result = await trip_service.save_trip(mock_db_session, TripCreate(name="Empty"), [])
    assert result is not None
    assert len(result.short_id) == 8
    mock_db_session.add_all.assert_not_called()
    mock_db_session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_utc_037_save_trip_returns_none_when_trip_insert_fails(mock_db_session):
    mock_db_session.commit.side_effect = Exception("insert failed")
    items = [TripItemCreate(type="island", title="Explore Bali", day=1)]
    assert await trip_service.save_trip(mock_db_session, TripCreate(name="Bali"), items) is None
    mock_db_session.add_all.assert_not_called()


@pytest.mark.asyncio
async def test_utc_038_load_unknown_short_id_returns_none(mock_db_session):
    assert await trip_service.load_trip_by_short_id(mock_db_session, "NOPE0000") is None
    mock_db_session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_utc_039_update_trip_stops_when_item_delete_fails(mock_db_session):
    mock_db_session.get = AsyncMock(return_value=SimpleNamespace(name="Old"))
    mock_db_session.execute.side_effect = Exception("delete failed")

    ok = await trip_service.update_trip(mock_db_session, "trip-1", TripUpdate(name="New"),
                                        [TripItemCreate(type="hotel", title="Inn", day=1)])
    assert ok is False
    mock_db_session.add_all.assert_not_called()


def test_utc_040_trip_create_rejects_blank_name():
    with pytest.raises(ValidationError):
        TripCreate(name="   ")


###############################################################
# 7. Unit Tests for date offsets, reloaded items and download names
###############################################################
from app.services.pdf_export import pdf_filename, content_disposition


def test_utc_041_offset_dates_compare_with_plain_dates():
    assert total_days("2030-06-01T00:00:00+07:00", "2030-06-05", []) == 5
    assert date_span_days("2030-06-05T00:00:00+07:00", "2030-06-01") is None
    assert validate_trip_dates("2030-06-01T00:00:00+07:00", "2030-06-05", today=date(2030, 1, 1)) is None
    assert parse_trip_date("2030-06-01T08:00:00-05:00").tzinfo is None


def test_utc_042_started_trip_can_extend_its_end_date():
    today = date(2030, 1, 10)
    assert validate_trip_dates("2030-01-08", "2030-01-20", today=today) == "Start date cannot be in the past"
    assert validate_trip_dates("2030-01-08", "2030-01-20", today=today, check_past=False) is None
    assert validate_trip_dates("2030-01-08", "2030-01-05", today=today,
                               check_past=False) == "End date must be after start date"


def test_utc_043_reloaded_items_keep_catalog_reference_on_resave():
    rows = [
        SimpleNamespace(id="5a1c9e2e-7d1b-4c55-9a6e-1f2e3d4c5b6a", external_id="hotel-htl-1", type="hotel",
                        title="Ocean Resort", description=None, location=None, day=1, time="15:00",
                        duration=None, price=450, image_url=None, category="accommodation", rating=4.8,
                        sort_order=0),
        SimpleNamespace(id="0f8fa1b2-1111-2222-3333-123456789012", external_id=None, type="event",
                        title="Night Market", description=None, location=None, day=2, time=None,
                        duration=None, price=None, image_url=None, category=None, rating=None,
                        sort_order=0),
    ]
    items = store.from_trip_items(rows)
    assert len({item.id for item in items}) == 2

    resaved = store.to_trip_items(items)
    assert [r.external_id for r in resaved] == ["hotel-htl-1", "0f8fa1b2-1111-2222-3333-123456789012"]


def test_utc_044_download_name_is_header_safe():
    assert pdf_filename("Bali Escape") == "Bali-Escape-itinerary.pdf"

    header = content_disposition(pdf_filename("Phuket ทริป"))
    header.encode("latin-1")
    assert 'filename="Phuket-itinerary.pdf"' in header
    assert "filename*=UTF-8''Phuket-%E0%B8%97" in header

    header = content_disposition(pdf_filename('The "Big" Trip'))
    assert 'filename="The-Big-Trip-itinerary.pdf"' in header
    assert "%22Big%22" in header
