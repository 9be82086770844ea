# main.py

import datetime
import logging
from typing import Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()

from core.models import TripFormData
from core.parser import parse_itinerary_text
from services import webhook
from ai import gemini

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Wanderlust Planner API", version="0.1.0")


# Trip form as posted by a client
class TripRequest(BaseModel):
    destination: str = Field(min_length=1)
    start_date: datetime.date
    end_date: datetime.date
    guests: int = Field(default=2, ge=1, le=20)
    budget: Literal["budget", "moderate", "luxury"] = "moderate"


class ParseRequest(BaseModel):
    text: str = ""


def _to_form(req: TripRequest) -> TripFormData:
    try:
        return TripFormData(
            destination=req.destination,
            start_date=req.start_date,
            end_date=req.end_date,
            guests=req.guests,
            budget=req.budget,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.post("/api/parse", response_model=dict)
def parse_endpoint(req: ParseRequest):
    return parse_itinerary_text(req.text).to_dict()


@app.post("/api/itinerary", response_model=dict)
def itinerary_endpoint(req: TripRequest):
    form = _to_form(req)
    try:
        output = webhook.submit_trip_request(form)
    except webhook.SubmissionError as e:
        logger.error("Trip submission failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return parse_itinerary_text(output).to_dict()


@app.post("/api/generate", response_model=dict)
def generate_endpoint(req: TripRequest):
    form = _to_form(req)
    try:
        itin = gemini.generate_itinerary(form)
    except Exception as e:
        logger.error("Gemini itinerary generation failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return itin.to_dict()
