# app.py

import datetime
from dotenv import load_dotenv

load_dotenv()  # ← Must precede any import depending on .env

import streamlit as st

from core.formatting import format_inline, to_html
from core.models import ActivityType, BUDGET_STYLES, MAX_GUESTS, MIN_GUESTS, TripFormData
from core.parser import parse_itinerary_text
from services import webhook
from ai import gemini

BUDGET_LABELS = {
    "budget": "Budget-Friendly",
    "moderate": "Moderate",
    "luxury": "Luxury",
}

ACTIVITY_ICONS = {
    ActivityType.FOOD: "🍽️",
    ActivityType.SIGHTSEEING: "📷",
    ActivityType.RELAX: "☕",
    ActivityType.ADVENTURE: "☀️",
    ActivityType.CULTURE: "⭐",
}


def activity_icon(kind: ActivityType) -> str:
    return ACTIVITY_ICONS.get(kind, "📍")


# ──────────────────────────────────────────────────────────────────────────────
# 0. Streamlit configuration
# ──────────────────────────────────────────────────────────────────────────────
st.set_page_config(page_title="Wanderlust Planner", layout="wide")

# ──────────────────────────────────────────────────────────────────────────────
# 1. session_state initialisation (default values)
# ──────────────────────────────────────────────────────────────────────────────
defaults = {
    "status": "idle",        # idle | loading | success | error
    "raw_output": None,      # webhook text, verbatim
    "parsed": None,          # ParsedItinerary
    "structured": None,      # Itinerary (Gemini engine)
    "error": "",
}
for k, v in defaults.items():
    st.session_state.setdefault(k, v)


def reset():
    for k, v in defaults.items():
        st.session_state[k] = v


# ──────────────────────────────────────────────────────────────────────────────
# 2. Hero + sidebar
# ──────────────────────────────────────────────────────────────────────────────
st.markdown("# 🧭 Your Next Adventure, Starts Here.")
st.markdown(
    "Enter your destination, dates, and preferences below to request "
    "your personalized travel itinerary."
)

engine = st.sidebar.radio("Itinerary engine:", ["Webhook", "Gemini (structured)"])

# ──────────────────────────────────────────────────────────────────────────────
# 3. Input form (hidden once a result is displayed)
# ──────────────────────────────────────────────────────────────────────────────
if st.session_state.status != "success":
    today = datetime.date.today()
    with st.form("trip_form"):
        destination = st.text_input("Where to?", placeholder="e.g. Kyoto, Japan")
        col1, col2, col3, col4 = st.columns(4)
        start_date = col1.date_input("Check-in", today)
        end_date = col2.date_input("Check-out", today + datetime.timedelta(days=2))
        guests = col3.number_input("Travelers", min_value=MIN_GUESTS,
                                   max_value=MAX_GUESTS, value=2, step=1)
        budget = col4.selectbox("Budget Style", BUDGET_STYLES, index=1,
                                format_func=BUDGET_LABELS.get)
        submitted = st.form_submit_button("✈️ Submit Trip Request")

    if submitted:
        st.session_state.status = "loading"
        st.session_state.parsed = None
        st.session_state.structured = None
        try:
            form = TripFormData(
                destination=destination,
                start_date=start_date,
                end_date=end_date,
                guests=int(guests),
                budget=budget,
            )
            if engine == "Webhook":
                with st.spinner("Sending Request…"):
                    output = webhook.submit_trip_request(form)
                st.session_state.raw_output = output
                st.session_state.parsed = parse_itinerary_text(output)
            else:
                with st.spinner("🤖 Generating itinerary with Gemini…"):
                    st.session_state.structured = gemini.generate_itinerary(form)
            st.session_state.status = "success"
            st.session_state.error = ""
        except Exception as e:
            st.session_state.status = "error"
            st.session_state.error = str(e) or "Something went wrong."
        st.rerun()

# ──────────────────────────────────────────────────────────────────────────────
# 4. Error state
# ──────────────────────────────────────────────────────────────────────────────
if st.session_state.status == "error":
    st.error(f"**Submission Failed**\n\n{st.session_state.error}")
    if st.button("Try Again"):
        st.session_state.status = "idle"
        st.session_state.error = ""
        st.rerun()

# ──────────────────────────────────────────────────────────────────────────────
# 5.A Success: free-text itinerary as cards
# ──────────────────────────────────────────────────────────────────────────────
if st.session_state.status == "success" and st.session_state.parsed:
    parsed = st.session_state.parsed

    with st.container(border=True):
        st.caption("✅ TRIP READY")
        st.header(parsed.destination or "Your Itinerary")
        chips = []
        if parsed.duration:
            chips.append(f"📅 {parsed.duration}")
        if parsed.budget:
            chips.append(f"💰 {parsed.budget}")
        if chips:
            st.markdown("  ·  ".join(chips))

    if parsed.has_days:
        for idx, day in enumerate(parsed.days, start=1):
            with st.container(border=True):
                st.subheader(f"{idx}. {day.title}")
                for activity in day.activities:
                    st.markdown(
                        f"🕒 {to_html(format_inline(activity))}",
                        unsafe_allow_html=True,
                    )
    else:
        # Parsing found no day: show the answer as-is
        with st.container(border=True):
            st.subheader("Itinerary Details")
            st.code(parsed.raw_text, language=None)

# ──────────────────────────────────────────────────────────────────────────────
# 5.B Success: structured itinerary (Gemini)
# ──────────────────────────────────────────────────────────────────────────────
if st.session_state.status == "success" and st.session_state.structured:
    itin = st.session_state.structured

    st.markdown(f"💵 **Est. Cost:** {itin.total_estimated_cost}")
    st.header(itin.trip_title)
    st.write(itin.destination_summary)

    for day in itin.daily_plans:
        with st.expander(f"Day {day.day_number} — {day.date} — {day.theme}",
                         expanded=day.day_number == 1):
            for a in day.activities:
                st.markdown(f"**{a.time}** · {activity_icon(a.type)} {a.type.value.capitalize()}")
                st.markdown(f"#### {a.title}")
                st.write(a.description)
                st.caption(f"📍 {a.location}   ·   💵 {a.cost_estimate}")
                st.markdown("---")

if st.session_state.status == "success":
    if st.button("⬅️ Plan Another Trip"):
        reset()
        st.rerun()

st.markdown("---")
st.caption(f"© {datetime.date.today().year} Wanderlust Planner. All rights reserved.")
