# run.py

import argparse
import datetime
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()   # Must precede imports reading the environment

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.text import Text

from core.formatting import format_inline
from core.models import BUDGET_STYLES, Emphasized, ParsedItinerary, TripFormData
from core.parser import parse_itinerary_text
from services import webhook
from ai import gemini

console = Console()


def activity_text(activity: str) -> Text:
    """Rich Text with **bold** spans styled."""
    text = Text()
    for seg in format_inline(activity):
        text.append(seg.text, style="bold" if isinstance(seg, Emphasized) else None)
    return text


def print_parsed(parsed: ParsedItinerary) -> None:
    console.print(f"[bold magenta]{escape(parsed.destination or 'Your Itinerary')}[/]")
    if parsed.duration:
        console.print(f"  📅 {escape(parsed.duration)}")
    if parsed.budget:
        console.print(f"  💰 {escape(parsed.budget)}")
    console.print()

    if not parsed.has_days:
        console.print("[bold]Itinerary Details[/]")
        console.print(parsed.raw_text, markup=False, highlight=False)
        return

    for idx, day in enumerate(parsed.days, start=1):
        console.print(f"[yellow]{idx}. {escape(day.title)}[/]", highlight=False)
        for act in day.activities:
            console.print(Text("   • ").append_text(activity_text(act)))
        console.print()


def print_structured(itin) -> None:
    console.print(f"[bold magenta]{escape(itin.trip_title)}[/]  (est. {escape(itin.total_estimated_cost)})")
    console.print(itin.destination_summary + "\n", markup=False)
    for day in itin.daily_plans:
        console.print(f"[yellow]Day {day.day_number}[/] {escape(day.date)} — {escape(day.theme)}")
        for a in day.activities:
            console.print(f"   {a.time:>9}  [{a.type.value}] {a.title} @ {a.location} ({a.cost_estimate})", markup=False)
        console.print()


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Request and display a travel itinerary.")
    p.add_argument("--destination", "--city")
    p.add_argument("--start")   # YYYY-MM-DD
    p.add_argument("--end")     # YYYY-MM-DD
    p.add_argument("--guests", type=int, default=2)
    p.add_argument("--budget", choices=BUDGET_STYLES, default="moderate")
    p.add_argument("--engine", choices=("webhook", "gemini"), default="webhook")
    p.add_argument("--from-file", type=Path,
                   help="parse a saved webhook response instead of submitting")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    if args.from_file:
        print_parsed(parse_itinerary_text(args.from_file.read_text(encoding="utf-8")))
        return 0

    if not (args.destination and args.start and args.end):
        p.error("--destination, --start and --end are required unless --from-file is given")

    try:
        form = TripFormData(
            destination=args.destination,
            start_date=datetime.date.fromisoformat(args.start),
            end_date=datetime.date.fromisoformat(args.end),
            guests=args.guests,
            budget=args.budget,
        )
    except ValueError as e:
        console.print(f"[bold red]🛑 {escape(str(e))}[/]")
        return 1

    try:
        if args.engine == "gemini":
            console.print("[bold cyan]→ Generating itinerary with Gemini…[/]")
            print_structured(gemini.generate_itinerary(form))
        else:
            console.print("[bold cyan]→ Sending trip request…[/]")
            print_parsed(parse_itinerary_text(webhook.submit_trip_request(form)))
    except Exception as e:
        console.print(f"[bold red]Submission Failed: {escape(str(e))}[/]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
