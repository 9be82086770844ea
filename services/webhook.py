"""
services/webhook.py
-------------------
Sends the trip form to the itinerary webhook (n8n / LLM backend) and returns
the generated itinerary as plain text.
- POST JSON {destination, startDate, endDate, guests, budget}
- Reads the `output` field of the JSON answer (object or one-element list)
- Any network / HTTP failure is raised as SubmissionError
"""

from __future__ import annotations
import json
import logging
import os
from typing import Any

import requests
from core.models import TripFormData

logger = logging.getLogger(__name__)

DEFAULT_WEBHOOK_URL = (
    "http://localhost:5678/webhook-test/e4b72ae1-e9e8-4334-923f-779e11ae1cad"
)
DEFAULT_TIMEOUT = 120.0


class SubmissionError(RuntimeError):
    """The webhook could not be reached or answered with an error."""


def _url() -> str:
    return os.getenv("WEBHOOK_URL") or DEFAULT_WEBHOOK_URL


def _timeout() -> float:
    raw = os.getenv("WEBHOOK_TIMEOUT")
    return float(raw) if raw else DEFAULT_TIMEOUT


def extract_output(payload: Any) -> str:
    """
    Text of the itinerary inside the webhook answer.
    Falls back to a pretty-printed dump of the whole payload.
    """
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        output = payload[0].get("output")
        if output and isinstance(output, str):
            return output
    elif isinstance(payload, dict):
        output = payload.get("output")
        if output and isinstance(output, str):
            return output
    return json.dumps(payload, indent=2, ensure_ascii=False)


def submit_trip_request(
    form: TripFormData,
    url: str | None = None,
    timeout: float | None = None,
) -> str:
    endpoint = url or _url()
    logger.info("Submitting trip request for %s to %s", form.destination, endpoint)
    try:
        r = requests.post(
            endpoint,
            json=form.to_payload(),
            headers={"Content-Type": "application/json"},
            timeout=timeout or _timeout(),
        )
    except requests.RequestException as exc:
        raise SubmissionError(f"Could not reach the itinerary service: {exc}") from exc

    if not 200 <= r.status_code < 300:
        logger.warning("Webhook answered %s: %s", r.status_code, r.text[:200])
        raise SubmissionError(f"Server responded with {r.status_code}")

    try:
        payload = r.json()
    except ValueError as exc:
        raise SubmissionError("The itinerary service returned invalid JSON.") from exc

    return extract_output(payload)
