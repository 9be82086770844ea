# core/models.py

from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import List, Tuple, Union

BUDGET_STYLES = ("budget", "moderate", "luxury")
MIN_GUESTS, MAX_GUESTS = 1, 20


@dataclass
class TripFormData:
    destination: str
    start_date: date
    end_date: date
    guests: int = 2
    budget: str = "moderate"

    def __post_init__(self):
        self.destination = self.destination.strip()
        if not self.destination:
            raise ValueError("Destination is required.")
        if self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date.")
        if not MIN_GUESTS <= self.guests <= MAX_GUESTS:
            raise ValueError(f"Guests must be between {MIN_GUESTS} and {MAX_GUESTS}.")
        if self.budget not in BUDGET_STYLES:
            raise ValueError(f"Unknown budget style « {self.budget} ».")

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def to_payload(self) -> dict:
        """JSON body expected by the itinerary webhook."""
        return {
            "destination": self.destination,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "guests": self.guests,
            "budget": self.budget,
        }


# ──────────────────────────────────────────────────────────────────────────────
# Free-text itinerary (webhook response)
# ──────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ParsedDay:
    title: str
    activities: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedItinerary:
    destination: str = ""
    duration: str = ""
    budget: str = ""
    days: Tuple[ParsedDay, ...] = ()
    raw_text: str = ""

    @property
    def has_days(self) -> bool:
        return len(self.days) > 0

    def to_dict(self) -> dict:
        return {
            "destination": self.destination,
            "duration": self.duration,
            "budget": self.budget,
            "days": [
                {"title": d.title, "activities": list(d.activities)}
                for d in self.days
            ],
            "raw_text": self.raw_text,
        }


@dataclass(frozen=True)
class Plain:
    text: str


@dataclass(frozen=True)
class Emphasized:
    text: str


FormattedSegment = Union[Plain, Emphasized]


# ──────────────────────────────────────────────────────────────────────────────
# Structured itinerary (Gemini JSON schema)
# ──────────────────────────────────────────────────────────────────────────────
class ActivityType(str, Enum):
    SIGHTSEEING = "sightseeing"
    FOOD = "food"
    RELAX = "relax"
    ADVENTURE = "adventure"
    CULTURE = "culture"


@dataclass
class Activity:
    time: str
    title: str
    description: str
    location: str
    type: ActivityType
    cost_estimate: str


@dataclass
class DayPlan:
    day_number: int
    date: str
    theme: str
    activities: List[Activity] = field(default_factory=list)


@dataclass
class Itinerary:
    trip_title: str
    destination_summary: str
    total_estimated_cost: str
    daily_plans: List[DayPlan] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        for day in data["daily_plans"]:
            for act in day["activities"]:
                act["type"] = act["type"].value
        return data
