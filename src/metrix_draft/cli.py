"""
Metrix Draft CLI

Command-line interface for running a draft wheel without the API server.
"""

import argparse
import asyncio
import random
import sys
import webbrowser
from pathlib import Path
from typing import Sequence

import httpx

from metrix_draft.clients.metrix import DraftContext, MetrixAPIError, MetrixClient
from metrix_draft.config import get_settings
from metrix_draft.errors import DraftError, NoSegmentMatchedError
from metrix_draft.models.participant import Participant
from metrix_draft.models.wheel import Segment
from metrix_draft.services.animation import SpinAnimator
from metrix_draft.services.draft import DraftSession
from metrix_draft.services.wheel import find_segment
from metrix_draft.visualization import charts


class TerminalSink:
    """Rendering sink that shows who is under the pointer while spinning."""

    def __init__(self, stream=sys.stdout):
        self.stream = stream

    def render_frame(self, segments: Sequence[Segment], rotation: float) -> None:
        try:
            name = find_segment(segments, rotation).participant.name
        except NoSegmentMatchedError:
            return
        self.stream.write(f"\r  🎡 {name:<30}")
        self.stream.flush()

    def render_winner(self, winner: Participant) -> None:
        self.stream.write("\r" + " " * 36 + "\r")
        self.stream.flush()


def parse_rating_overrides(values: list[str]) -> dict[str, float]:
    """Parse NAME=VALUE pairs; an empty value clears the rating."""
    overrides: dict[str, float] = {}
    for item in values:
        name, sep, value = item.rpartition("=")
        if not sep or not name:
            raise ValueError(f"Expected NAME=VALUE, got {item!r}")
        overrides[name] = float(value) if value.strip() else 0.0
    return overrides


def apply_overrides(
    session: DraftSession, exclude: list[str], ratings: dict[str, float]
) -> list[str]:
    """Apply CLI exclusions and rating corrections; returns unknown names."""
    by_name = {p.name: p for p in session.roster}
    unknown = []

    for name, rating in ratings.items():
        if name not in by_name:
            unknown.append(name)
            continue
        session.set_baseline_rating(by_name[name].id, rating)

    for name in exclude:
        if name not in by_name:
            unknown.append(name)
            continue
        session.set_active(by_name[name].id, False)

    return unknown


def print_tickets(session: DraftSession) -> None:
    """Print the ticket table."""
    print(f"{'Player':<28} {'Score':<7} {'Prior':<7} {'Rated':<7} {'Tickets':<8}")
    print("-" * 62)
    pool_ids = {p.id for p in session.pool}
    for p in session.roster:
        prior = f"{p.baseline_rating:g}" if p.baseline_rating else "-"
        rated = str(p.derived_rating) if p.derived_rating is not None else "-"
        tickets = str(p.weight) if p.weight is not None else "-"
        marker = "" if p.id in pool_ids else "  (out)"
        print(f"{p.name:<28} {p.raw_score:<7g} {prior:<7} {rated:<7} {tickets:<8}{marker}")
    print(f"\nTotal tickets in pool: {session.total_tickets}")


async def load_context(
    client: MetrixClient,
    game_id: str,
    course_id: str | None = None,
    rng: random.Random | None = None,
) -> DraftContext:
    """Fetch the competition, exiting with a message if Metrix fails."""
    print(f"🔍 Fetching competition {game_id}...")
    try:
        return await DraftContext.create(client, game_id, course_id, rng=rng)
    except MetrixAPIError as e:
        print(f"❌ {e.message}")
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"❌ Metrix request failed: {e}")
        sys.exit(1)


async def run_draft(
    session: DraftSession, rng: random.Random, animate: bool = False
) -> None:
    """Spin until everyone has been picked, printing each winner."""
    animator = SpinAnimator(session.settings)
    sink = TerminalSink() if animate else None

    while session.pool:
        if animate:
            result = await animator.run(session, rng, sink)
        else:
            result = session.spin(rng)

        entry = session.winner_entries()[-1]
        suffix = " (All players picked)" if result.complete else ""
        print(f"  {entry.label}{suffix}")

        if animate and session.pool:
            await asyncio.sleep(session.settings.winner_pause_ms / 1000)


async def cli_main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Rating-weighted draft wheel for Disc Golf Metrix competitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show ratings and tickets for a competition
  metrix-draft tickets 2912345

  # Run a full draft with a fixed seed
  metrix-draft run 2912345 --seed 42

  # Exclude a player, correct a rating, animate and save the wheel
  metrix-draft run 2912345 --exclude "Jane Doe" --rating "John Roe=912" --animate -o wheel.html
        """,
    )

    parser.add_argument(
        "--course-id",
        help="Course to read rating parameters from (default: competition's course)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # tickets command
    tickets_parser = subparsers.add_parser("tickets", help="Show ratings and tickets")
    tickets_parser.add_argument("game_id", help="Metrix competition ID")

    # run command
    run_parser = subparsers.add_parser("run", help="Run a full draft")
    run_parser.add_argument("game_id", help="Metrix competition ID")
    run_parser.add_argument("--seed", type=int, help="Random seed for reproducible draws")
    run_parser.add_argument(
        "--exclude", action="append", default=[], metavar="NAME",
        help="Leave a player out of the draw (repeatable)",
    )
    run_parser.add_argument(
        "--rating", action="append", default=[], metavar="NAME=VALUE",
        help="Override a player's prior rating (repeatable)",
    )
    run_parser.add_argument(
        "--animate", action="store_true", help="Spin in real time"
    )
    run_parser.add_argument("--output", "-o", help="Save the draft page as HTML")
    run_parser.add_argument(
        "--open", action="store_true", help="Open the saved page in a browser"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    rng = random.Random(getattr(args, "seed", None))

    async with MetrixClient(settings) as client:
        ctx = await load_context(client, args.game_id, args.course_id, rng=rng)

    session = ctx.new_session(settings)
    print(f"🥏 {ctx.name or args.game_id}: {len(session.roster)} players")
    if not ctx.anchors.is_valid:
        print("⚠️  Course rating parameters missing, using prior ratings")
    print()

    if args.command == "tickets":
        print_tickets(session)
        return

    try:
        unknown = apply_overrides(
            session, args.exclude, parse_rating_overrides(args.rating)
        )
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(2)
    for name in unknown:
        print(f"⚠️  No player named {name!r}")

    print_tickets(session)
    print()

    if not session.pool:
        print("❌ No players selected!")
        sys.exit(1)

    initial = session.restart()
    print("🎯 Drawing...\n")
    try:
        await run_draft(session, rng, animate=args.animate)
    except DraftError as e:
        print(f"❌ {e.message}")
        sys.exit(1)

    if args.output:
        html = charts.generate_draft_page(
            wheel_html=charts.wheel_chart(initial.segments, initial.rotation),
            tickets_html=charts.tickets_chart(session.roster),
            winners_html=charts.winners_chart(session.winner_entries()),
            title=ctx.name or "Draft Wheel",
        )
        Path(args.output).write_text(html)
        print(f"\n📊 Draft saved to: {args.output}")

        if args.open:
            output_path = Path(args.output).absolute()
            webbrowser.open(f"file://{output_path}")
            print(f"🌐 Opened in browser: {output_path}")


def run_cli():
    """Entry point for CLI."""
    asyncio.run(cli_main())


if __name__ == "__main__":
    run_cli()
