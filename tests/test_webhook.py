# tests/test_webhook.py

import datetime
import json

import pytest
import requests

from core.models import TripFormData
from services import webhook
from services.webhook import SubmissionError, extract_output, submit_trip_request


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def form():
    return TripFormData(
        destination="Kyoto, Japan",
        start_date=datetime.date(2025, 4, 1),
        end_date=datetime.date(2025, 4, 3),
        guests=2,
        budget="moderate",
    )


@pytest.fixture
def captured(monkeypatch):
    calls = {}

    def install(response=None, exc=None):
        def fake_post(url, json=None, headers=None, timeout=None):
            calls.update(url=url, json=json, headers=headers, timeout=timeout)
            if exc:
                raise exc
            return response
        monkeypatch.setattr(webhook.requests, "post", fake_post)
        return calls

    return install


def test_posts_payload_and_returns_output(form, captured, monkeypatch):
    monkeypatch.setenv("WEBHOOK_URL", "http://hook.test/trip")
    monkeypatch.setenv("WEBHOOK_TIMEOUT", "5")
    calls = captured(FakeResponse(payload={"output": "Destination: Kyoto"}))

    assert submit_trip_request(form) == "Destination: Kyoto"
    assert calls["url"] == "http://hook.test/trip"
    assert calls["timeout"] == 5.0
    assert calls["json"] == {
        "destination": "Kyoto, Japan",
        "startDate": "2025-04-01",
        "endDate": "2025-04-03",
        "guests": 2,
        "budget": "moderate",
    }


def test_default_url(form, captured, monkeypatch):
    monkeypatch.delenv("WEBHOOK_URL", raising=False)
    calls = captured(FakeResponse(payload=[{"output": "ok"}]))
    submit_trip_request(form)
    assert calls["url"] == webhook.DEFAULT_WEBHOOK_URL


def test_non_2xx_raises(form, captured):
    captured(FakeResponse(status_code=500, text="boom"))
    with pytest.raises(SubmissionError, match="Server responded with 500"):
        submit_trip_request(form, url="http://hook.test")


def test_connection_error_raises(form, captured):
    captured(exc=requests.ConnectionError("refused"))
    with pytest.raises(SubmissionError, match="refused"):
        submit_trip_request(form, url="http://hook.test")


def test_invalid_json_raises(form, captured):
    captured(FakeResponse(payload=ValueError("no json")))
    with pytest.raises(SubmissionError, match="invalid JSON"):
        submit_trip_request(form, url="http://hook.test")


def test_extract_output_list_and_dict():
    assert extract_output([{"output": "from list"}, {"output": "ignored"}]) == "from list"
    assert extract_output({"output": "from dict"}) == "from dict"


@pytest.mark.parametrize("payload", [
    {"result": "no output key"},
    {"output": ""},
    [],
    [{"other": 1}],
    ["plain string"],
    None,
])
def test_extract_output_falls_back_to_dump(payload):
    assert extract_output(payload) == json.dumps(payload, indent=2, ensure_ascii=False)


def test_dump_keeps_unicode():
    assert "Kyōto" in extract_output({"city": "Kyōto"})
