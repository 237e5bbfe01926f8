# file: services/match_scorer.py

from typing import Callable, Iterable, List, NamedTuple, Sequence

from app.models.catalog import Event, Hotel, Island
from app.models.recommendations import Recommendation, UserPreferences

MIN_MATCH_SCORE = 0.3
MAX_RECOMMENDATIONS = 12
MAX_REASONS = 3

DEFAULT_HOTEL_PRICE = 200
ISLAND_RATING = 4.5
ACTIVITY_RATING = 4.4
DEFAULT_HOTEL_RATING = 4.0


class ScoreRule(NamedTuple):
    weight: float
    applies: Callable[[object, UserPreferences], bool]


class ReasonRule(NamedTuple):
    text: str
    applies: Callable[[object, UserPreferences], bool]


def _activity_price(activity: Event) -> float:
    return activity.price or 0


def _hotel_price(hotel: Hotel) -> float:
    return hotel.price_per_night or DEFAULT_HOTEL_PRICE


def _activity_in_budget(activity: Event, prefs: UserPreferences) -> bool:
    low, high = prefs.budgetRange
    return low / 10 <= _activity_price(activity) <= high / 10


def _hotel_in_daily_budget(hotel: Hotel, prefs: UserPreferences) -> bool:
    # A room should take no more than ~40% of the daily budget.
    daily_budget = prefs.budgetRange[1] / prefs.duration
    return _hotel_price(hotel) <= daily_budget * 0.4


ISLAND_BASE_SCORE = 0.5
ISLAND_RULES = (
    ScoreRule(0.3, lambda i, p: "Beach activities" in p.interests and i.climate == "Tropical"),
    ScoreRule(0.2, lambda i, p: "Hiking" in p.interests and (i.area_km2 or 0) > 100),
    ScoreRule(0.2, lambda i, p: "Adventure" in p.travelStyle and i.climate == "Tropical"),
    ScoreRule(0.2, lambda i, p: "Relaxation" in p.travelStyle and i.climate == "Mediterranean"),
)
ISLAND_REASONS = (
    ReasonRule("Perfect for beach lovers", lambda i, p: "Beach activities" in p.interests),
    ReasonRule("Great for adventure activities", lambda i, p: "Adventure" in p.travelStyle),
    ReasonRule("Beautiful tropical climate", lambda i, p: i.climate == "Tropical"),
    ReasonRule("Rich cultural heritage", lambda i, p: "Cultural" in p.travelStyle),
)

ACTIVITY_BASE_SCORE = 0.4
ACTIVITY_RULES = (
    ScoreRule(0.4, lambda a, p: "Water sports" in p.interests and a.type == "Water Sports"),
    ScoreRule(0.4, lambda a, p: "Cultural" in p.interests and a.type == "Cultural"),
    ScoreRule(0.4, lambda a, p: "Adventure sports" in p.interests and a.type == "Adventure"),
    ScoreRule(0.2, _activity_in_budget),
)
ACTIVITY_REASONS = (
    ReasonRule("Matches your water sports interest", lambda a, p: "Water sports" in p.interests),
    ReasonRule("Perfect for adventure seekers", lambda a, p: "Adventure" in p.travelStyle),
    ReasonRule("Within your budget range", lambda a, p: _activity_price(a) <= p.budgetRange[1] / 10),
    ReasonRule("Highly rated by travelers", lambda a, p: True),
)

HOTEL_BASE_SCORE = 0.4
HOTEL_RULES = (
    ScoreRule(0.3, _hotel_in_daily_budget),
    ScoreRule(0.2, lambda h, p: "Resort" in p.accommodationType and h.type == "Resort"),
    ScoreRule(0.2, lambda h, p: "Boutique hotel" in p.accommodationType and h.type == "Boutique"),
)
HOTEL_REASONS = (
    ReasonRule("Excellent guest reviews", lambda h, p: (h.rating or 0) >= 4.5),
    ReasonRule("Luxury amenities", lambda h, p: "Luxury" in p.travelStyle),
    ReasonRule("Perfect for couples", lambda h, p: "Romantic" in p.travelStyle),
    ReasonRule("Great location", lambda h, p: True),
)


def calculate_match_score(candidate, prefs: UserPreferences, base_score: float,
                          rules: Sequence[ScoreRule]) -> float:
    score = base_score
    for rule in rules:
        if rule.applies(candidate, prefs):
            score += rule.weight
    return min(round(score, 4), 1.0)


def generate_reasons(candidate, prefs: UserPreferences, rules: Sequence[ReasonRule]) -> List[str]:
    return [rule.text for rule in rules if rule.applies(candidate, prefs)][:MAX_REASONS]


def score_island(island: Island, prefs: UserPreferences) -> float:
    return calculate_match_score(island, prefs, ISLAND_BASE_SCORE, ISLAND_RULES)


def score_activity(activity: Event, prefs: UserPreferences) -> float:
    return calculate_match_score(activity, prefs, ACTIVITY_BASE_SCORE, ACTIVITY_RULES)


def score_hotel(hotel: Hotel, prefs: UserPreferences) -> float:
    return calculate_match_score(hotel, prefs, HOTEL_BASE_SCORE, HOTEL_RULES)


def island_reasons(island: Island, prefs: UserPreferences) -> List[str]:
    return generate_reasons(island, prefs, ISLAND_REASONS)


def activity_reasons(activity: Event, prefs: UserPreferences) -> List[str]:
    return generate_reasons(activity, prefs, ACTIVITY_REASONS)


def hotel_reasons(hotel: Hotel, prefs: UserPreferences) -> List[str]:
    return generate_reasons(hotel, prefs, HOTEL_REASONS)


def recommend(islands: Iterable[Island], activities: Iterable[Event], hotels: Iterable[Hotel],
              prefs: UserPreferences, dismissed: Iterable[str] = ()) -> List[Recommendation]:
    recommendations = []

    for island in islands:
        score = score_island(island, prefs)
        if score > MIN_MATCH_SCORE:
            recommendations.append(Recommendation(
                id=f"island-{island.id}", type="island", title=island.name,
                description=island.description or "", image_url=island.image_url or "",
                location=island.country or island.location or "", price=0,
                rating=ISLAND_RATING, matchScore=score,
                reasons=island_reasons(island, prefs),
                tags=[t for t in [island.climate, "Destination"] if t],
            ))

    for activity in activities:
        score = score_activity(activity, prefs)
        if score > MIN_MATCH_SCORE:
            recommendations.append(Recommendation(
                id=f"activity-{activity.id}", type="activity", title=activity.title,
                description=activity.description or "", image_url=activity.image_url or "",
                location=activity.location or "", price=_activity_price(activity),
                rating=ACTIVITY_RATING, matchScore=score,
                reasons=activity_reasons(activity, prefs),
                tags=[t for t in [activity.type, "Activity"] if t],
            ))

    for hotel in hotels:
        score = score_hotel(hotel, prefs)
        if score > MIN_MATCH_SCORE:
            recommendations.append(Recommendation(
                id=f"hotel-{hotel.id}", type="hotel", title=hotel.name,
                description=hotel.description or "", image_url=hotel.image_url or "",
                location=hotel.location or "", price=_hotel_price(hotel),
                rating=hotel.rating or DEFAULT_HOTEL_RATING, matchScore=score,
                reasons=hotel_reasons(hotel, prefs),
                tags=["Accommodation"],
            ))

    dismissed = set(dismissed)
    kept = [rec for rec in recommendations if rec.id not in dismissed]
    kept.sort(key=lambda rec: rec.matchScore, reverse=True)
    return kept[:MAX_RECOMMENDATIONS]
