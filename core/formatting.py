# core/formatting.py

import html
import re
from typing import Iterable, List

from core.models import Emphasized, FormattedSegment, Plain

BOLD_MARKER = "**"
_BOLD_RE = re.compile(r"(\*\*[^\n\r\u2028\u2029]*?\*\*)")


def format_inline(text: str) -> List[FormattedSegment]:
    """
    Split an activity string on **bold** spans.

    "Visit the **Golden Pavilion** at dawn" →
    [Plain("Visit the "), Emphasized("Golden Pavilion"), Plain(" at dawn")]
    """
    if not text:
        return []

    segments: List[FormattedSegment] = []
    for part in _BOLD_RE.split(text):
        if part.startswith(BOLD_MARKER) and part.endswith(BOLD_MARKER):
            segments.append(Emphasized(part[2:-2]))
        else:
            segments.append(Plain(part))
    return segments


def plain_text(segments: Iterable[FormattedSegment]) -> str:
    return "".join(s.text for s in segments)


def to_html(segments: Iterable[FormattedSegment]) -> str:
    """HTML fragment for st.markdown(..., unsafe_allow_html=True)."""
    out = []
    for s in segments:
        if isinstance(s, Emphasized):
            out.append(f"<strong>{html.escape(s.text)}</strong>")
        else:
            out.append(html.escape(s.text))
    return "".join(out)
