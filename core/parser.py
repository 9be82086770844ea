"""
core/parser.py
--------------
Turns the free-text itinerary returned by the webhook into a ParsedItinerary.

The text is expected to look roughly like:

    Destination: Kyoto, Japan
    Number of Days: 3
    Total Budget: ¥150,000
    Itinerary:
    **Day 1: Arrival**
    * Check in at the ryokan
    * Evening walk through Gion

Anything that does not fit degrades to empty fields / an empty day list;
callers show `raw_text` when no day could be extracted.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple, Optional, Tuple

from core.models import ParsedDay, ParsedItinerary

logger = logging.getLogger(__name__)

# Line whitespace: Unicode spaces plus the BOM (U+FEFF), without the
# \x1c-\x1f and \x85 separators that str.strip() also removes.
_SPACE_CHARS = (
    "\t\n\x0b\x0c\r \u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005"
    "\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)
_SPACE = "[" + _SPACE_CHARS + "]"
_FLAGS = re.IGNORECASE | re.ASCII

ITINERARY_TOKEN = "Itinerary:"
_ITINERARY_RE = re.compile(re.escape(ITINERARY_TOKEN), _FLAGS)

# Checked in this order; the first matching prefix wins for a given line.
_META_PREFIXES = (
    ("destination", re.compile(r"Destination:", _FLAGS)),
    ("duration", re.compile(r"Number of Days:", _FLAGS)),
    ("budget", re.compile(r"Total Budget:", _FLAGS)),
)

# "Day 1", "Day 1:", "**Day 1**", "**Day 2: Temples**" ... up to end of line.
# Line terminators other than "\n" end a line too but do not close a header.
_DAY_HEADER_RE = re.compile(
    r"(?:\A|\n)(?:\*\*)?Day" + _SPACE + r"+[0-9]+[^\n\r\u2028\u2029]*?(?=\n|\Z)",
    _FLAGS,
)
_BULLET_RE = re.compile(r"^[*\-•]" + _SPACE + "+")


def _trim(s: str) -> str:
    return s.strip(_SPACE_CHARS)


class Segments(NamedTuple):
    destination: str
    duration: str
    budget: str
    body: str


def segment_response(text: Optional[str]) -> Segments:
    """Split `text` into summary fields and the day-by-day itinerary body."""
    fields = {"destination": "", "duration": "", "budget": ""}
    if not text:
        return Segments(body="", **fields)

    parts = _ITINERARY_RE.split(text)
    meta_part = parts[0]
    body = ITINERARY_TOKEN.join(parts[1:])

    for line in meta_part.split("\n"):
        clean = _trim(line)
        for name, prefix in _META_PREFIXES:
            m = prefix.match(clean)
            if m:
                fields[name] = _trim(clean[m.end():])
                break

    return Segments(body=body, **fields)


def _clean_title(header: str) -> str:
    title = _trim(header).replace("*", "")
    if title.endswith(":"):
        title = title[:-1]
    return title


def _extract_activities(content: str) -> Tuple[str, ...]:
    activities = []
    for line in content.split("\n"):
        trimmed = _trim(line)
        if _BULLET_RE.match(trimmed):
            activities.append(_BULLET_RE.sub("", trimmed, count=1))
    return tuple(activities)


def extract_days(body: str) -> Tuple[ParsedDay, ...]:
    """
    Return one ParsedDay per day header that is followed by bullet lines.

    Headers whose content holds no bullet (prose-only days) are dropped.
    """
    headers = _DAY_HEADER_RE.findall(body)
    contents = _DAY_HEADER_RE.split(body)  # contents[0] is the preamble

    days = []
    for idx, header in enumerate(headers):
        content = contents[idx + 1] if idx + 1 < len(contents) else ""
        if not content:
            continue
        activities = _extract_activities(content)
        if activities:
            days.append(ParsedDay(title=_clean_title(header), activities=activities))
        else:
            logger.debug("Dropping day %r: no bullet lines", header.strip())
    return tuple(days)


def parse_itinerary_text(text: Optional[str]) -> ParsedItinerary:
    """Parse a raw webhook response into a ParsedItinerary (never raises)."""
    raw = text if text is not None else ""
    if not raw:
        return ParsedItinerary(raw_text=raw)

    seg = segment_response(raw)
    days = extract_days(seg.body)
    logger.debug("Parsed %d day(s) for destination %r", len(days), seg.destination)
    return ParsedItinerary(
        destination=seg.destination,
        duration=seg.duration,
        budget=seg.budget,
        days=days,
        raw_text=raw,
    )
