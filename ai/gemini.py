# ai/gemini.py
# ------------------------------------------------------------------------------
import datetime as dt
import json
import logging
import os
import textwrap

import google.generativeai as genai
from core.models import Activity, ActivityType, DayPlan, Itinerary, TripFormData

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


# ──────────────────────────────────────────────────────────────────────────────
# Helper: get a configured Gemini model
# ──────────────────────────────────────────────────────────────────────────────
def _get_model():
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise RuntimeError("API Key is missing. Please check your environment configuration.")
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(os.getenv("GEMINI_MODEL", DEFAULT_MODEL))


def days_between(start: dt.date, end: dt.date) -> int:
    """Inclusive number of days between two dates, in either order."""
    return abs((end - start).days) + 1


# ──────────────────────────────────────────────────────────────────────────────
# Prompt + response schema
# ──────────────────────────────────────────────────────────────────────────────
_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    Create a detailed {days}-day travel itinerary for {guests} people to {destination}.
    The trip starts on {start} and ends on {end}.
    The budget style is {budget}.

    For each day, provide a theme and a list of activities including meals, sightseeing, and relaxation.
    Include specific location names, estimated costs, and a brief description of what to do.
    Make it realistic with travel times considered.
    """
)

_ACTIVITY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "time": {"type": "STRING", "description": "e.g., 09:00 AM"},
        "title": {"type": "STRING", "description": "Name of the activity or place"},
        "description": {"type": "STRING", "description": "What to do there"},
        "location": {"type": "STRING", "description": "Address or area name"},
        "type": {
            "type": "STRING",
            "format": "enum",
            "enum": [t.value for t in ActivityType],
            "description": "Category of activity",
        },
        "costEstimate": {"type": "STRING", "description": "Estimated cost for this activity"},
    },
    "required": ["time", "title", "description", "location", "type", "costEstimate"],
}

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "tripTitle": {"type": "STRING", "description": "A catchy title for the trip"},
        "destinationSummary": {
            "type": "STRING",
            "description": "A 2-sentence summary of the destination vibe",
        },
        "totalEstimatedCost": {
            "type": "STRING",
            "description": "Estimated total cost range for the group",
        },
        "dailyPlans": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "dayNumber": {"type": "INTEGER"},
                    "date": {"type": "STRING", "description": "YYYY-MM-DD format"},
                    "theme": {
                        "type": "STRING",
                        "description": "Theme of the day, e.g., 'Historical Exploration'",
                    },
                    "activities": {"type": "ARRAY", "items": _ACTIVITY_SCHEMA},
                },
                "required": ["dayNumber", "date", "theme", "activities"],
            },
        },
    },
    "required": ["tripTitle", "destinationSummary", "totalEstimatedCost", "dailyPlans"],
}


def build_prompt(form: TripFormData) -> str:
    """Return the itinerary prompt string for Gemini."""
    return _PROMPT_TEMPLATE.format(
        days=days_between(form.start_date, form.end_date),
        guests=form.guests,
        destination=form.destination,
        start=form.start_date.isoformat(),
        end=form.end_date.isoformat(),
        budget=form.budget,
    )


# ──────────────────────────────────────────────────────────────────────────────
# JSON → Itinerary
# ──────────────────────────────────────────────────────────────────────────────
def parse_itinerary_json(raw_json: str) -> Itinerary:
    try:
        data = json.loads(raw_json.strip("`json \n"))
        days = [
            DayPlan(
                day_number=int(d["dayNumber"]),
                date=d["date"],
                theme=d["theme"],
                activities=[
                    Activity(
                        time=a["time"],
                        title=a["title"],
                        description=a["description"],
                        location=a["location"],
                        type=ActivityType(a["type"]),
                        cost_estimate=a["costEstimate"],
                    )
                    for a in d["activities"]
                ],
            )
            for d in data["dailyPlans"]
        ]
        return Itinerary(
            trip_title=data["tripTitle"],
            destination_summary=data["destinationSummary"],
            total_estimated_cost=data["totalEstimatedCost"],
            daily_plans=days,
        )
    except (ValueError, KeyError, TypeError) as e:
        logger.error("Failed to parse JSON response: %s", e)
        raise RuntimeError("Failed to generate a valid itinerary format.") from e


def _response_text(resp) -> str:
    if not resp.candidates or not resp.candidates[0].content.parts:
        return ""
    return resp.candidates[0].content.parts[0].text or ""


# ──────────────────────────────────────────────────────────────────────────────
# Generate itinerary from scratch
# ──────────────────────────────────────────────────────────────────────────────
def generate_itinerary(form: TripFormData) -> Itinerary:
    model = _get_model()
    try:
        resp = model.generate_content(
            build_prompt(form),
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": RESPONSE_SCHEMA,
            },
        )
    except Exception as e:
        logger.error("Gemini request failed: %s", e)
        raise RuntimeError(f"Gemini request failed: {e}") from e
    text = _response_text(resp)
    if not text:
        raise RuntimeError("No response from AI")
    return parse_itinerary_json(text)
