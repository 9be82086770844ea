# tests/test_gemini.py

import datetime
import json
from types import SimpleNamespace

import pytest

from ai import gemini
from core.models import ActivityType, TripFormData

PAYLOAD = {
    "tripTitle": "Kyoto in Bloom",
    "destinationSummary": "Temples and tea. Quiet mornings.",
    "totalEstimatedCost": "$1,200 - $1,600",
    "dailyPlans": [
        {
            "dayNumber": 1,
            "date": "2025-04-01",
            "theme": "Arrival",
            "activities": [
                {
                    "time": "09:00 AM",
                    "title": "Fushimi Inari",
                    "description": "Walk the torii gates",
                    "location": "Fushimi",
                    "type": "culture",
                    "costEstimate": "Free",
                }
            ],
        }
    ],
}


@pytest.fixture
def form():
    return TripFormData(
        destination="Kyoto",
        start_date=datetime.date(2025, 4, 1),
        end_date=datetime.date(2025, 4, 3),
        guests=4,
        budget="luxury",
    )


def _fake_model(text, calls):
    def generate_content(prompt, generation_config=None):
        calls.update(prompt=prompt, config=generation_config)
        parts = [SimpleNamespace(text=text)] if text is not None else []
        return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])
    return SimpleNamespace(generate_content=generate_content)


def test_days_between_is_inclusive_and_symmetric():
    a, b = datetime.date(2025, 4, 1), datetime.date(2025, 4, 3)
    assert gemini.days_between(a, b) == 3
    assert gemini.days_between(b, a) == 3
    assert gemini.days_between(a, a) == 1


def test_build_prompt(form):
    prompt = gemini.build_prompt(form)
    assert "3-day travel itinerary for 4 people to Kyoto" in prompt
    assert "starts on 2025-04-01 and ends on 2025-04-03" in prompt
    assert "budget style is luxury" in prompt


def test_parse_itinerary_json():
    itin = gemini.parse_itinerary_json(json.dumps(PAYLOAD))
    assert itin.trip_title == "Kyoto in Bloom"
    act = itin.daily_plans[0].activities[0]
    assert act.type is ActivityType.CULTURE
    assert act.cost_estimate == "Free"
    assert itin.to_dict()["daily_plans"][0]["activities"][0]["type"] == "culture"


def test_parse_strips_code_fence():
    itin = gemini.parse_itinerary_json("```json\n" + json.dumps(PAYLOAD) + "\n```")
    assert itin.daily_plans[0].day_number == 1


@pytest.mark.parametrize("raw", ["not json", json.dumps({"tripTitle": "x"}),
                                 json.dumps({**PAYLOAD, "dailyPlans": [{"dayNumber": 1}]})])
def test_parse_invalid(raw):
    with pytest.raises(RuntimeError, match="valid itinerary format"):
        gemini.parse_itinerary_json(raw)


def test_unknown_activity_type_is_invalid():
    bad = json.loads(json.dumps(PAYLOAD))
    bad["dailyPlans"][0]["activities"][0]["type"] = "shopping"
    with pytest.raises(RuntimeError):
        gemini.parse_itinerary_json(json.dumps(bad))


def test_generate_itinerary_uses_schema(form, monkeypatch):
    calls = {}
    monkeypatch.setattr(gemini, "_get_model", lambda: _fake_model(json.dumps(PAYLOAD), calls))
    itin = gemini.generate_itinerary(form)
    assert itin.total_estimated_cost == "$1,200 - $1,600"
    assert calls["config"]["response_mime_type"] == "application/json"
    assert calls["config"]["response_schema"] is gemini.RESPONSE_SCHEMA


def test_generate_itinerary_empty_response(form, monkeypatch):
    monkeypatch.setattr(gemini, "_get_model", lambda: _fake_model(None, {}))
    with pytest.raises(RuntimeError, match="No response from AI"):
        gemini.generate_itinerary(form)


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(RuntimeError, match="API Key is missing"):
        gemini._get_model()


class QuotaExceeded(Exception):
    pass


def test_sdk_error_becomes_runtime_error(form, monkeypatch):
    def generate_content(prompt, generation_config=None):
        raise QuotaExceeded("429 quota exhausted")

    monkeypatch.setattr(gemini, "_get_model", lambda: SimpleNamespace(generate_content=generate_content))
    with pytest.raises(RuntimeError, match="quota exhausted") as info:
        gemini.generate_itinerary(form)
    assert isinstance(info.value.__cause__, QuotaExceeded)
