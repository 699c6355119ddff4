"""Command-line interface for review-guesser."""

import argparse
import logging
import sys
from typing import Callable, List, Optional

from review_guesser.config import Settings
from review_guesser.core import ReviewGuesser, store_url
from review_guesser.models import LAYOUTS, MODES
from review_guesser.storage import MemoryStorage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-guesser",
        description="Pick a random Steam game to guess reviews for and keep score.",
    )
    parser.add_argument(
        "--data-dir", type=str, default=None,
        help="Directory holding data/*.csv catalogs (env: REVIEW_GUESSER_DATA_DIR)",
    )
    parser.add_argument(
        "--data-url", type=str, default=None,
        help="Base URL to fetch catalogs from instead of disk (env: REVIEW_GUESSER_DATA_URL)",
    )
    parser.add_argument(
        "--state-dir", type=str, default=None,
        help="Where stats and preferences are stored (env: REVIEW_GUESSER_STATE_DIR)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose/debug logging",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    next_cmd = sub.add_parser("next", help="Print the store URL of the next game")
    next_cmd.add_argument("--mode", choices=MODES, default=None,
                          help="Selection mode (default: saved preference)")

    play_cmd = sub.add_parser("play", help="Play rounds interactively, tracking the streak")
    play_cmd.add_argument("--mode", choices=MODES, default=None,
                          help="Selection mode (default: saved preference)")

    sub.add_parser("stats", help="Show lifetime stats")
    sub.add_parser("clear-stats", help="Reset lifetime stats")

    mode_cmd = sub.add_parser("mode", help="Show or set the selection mode")
    mode_cmd.add_argument("value", nargs="?", default=None, help=f"One of: {', '.join(MODES)}")

    layout_cmd = sub.add_parser("layout", help="Show or set the guess layout")
    layout_cmd.add_argument("value", nargs="?", default=None, help=f"One of: {', '.join(LAYOUTS)}")

    sub.add_parser("released-ids", help="List released app ids")
    return parser


def play(guesser: ReviewGuesser, mode: Optional[str] = None,
         ask: Callable[[str], str] = input) -> int:
    """Run rounds until the user quits; return the number of rounds played."""
    rounds = 0
    while True:
        app_id = guesser.go_next(mode)
        print(f"Next game: {store_url(app_id)}")

        answer = ""
        while answer not in ("y", "n", "q"):
            try:
                answer = ask("Was your guess correct? [y/n/q] ").strip().lower()[:1]
            except EOFError:
                answer = "q"
        if answer == "q":
            return rounds

        result = guesser.record_outcome(answer == "y")
        rounds += 1
        print(f"Current Streak: {result.streak}  Lifetime: {result.lifetime}")


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    settings = Settings.from_env().override(
        data_dir=args.data_dir,
        data_url=args.data_url,
        state_dir=args.state_dir,
    )

    with ReviewGuesser.from_settings(settings, session_storage=MemoryStorage()) as guesser:
        if args.command == "next":
            print(store_url(guesser.next_app_id(args.mode)))

        elif args.command == "play":
            rounds = play(guesser, args.mode)
            print(f"Played {rounds} round(s). Lifetime: {guesser.stats.get_lifetime()}")

        elif args.command == "stats":
            stats = guesser.stats.get_lifetime()
            print(f"Lifetime: {stats} ({stats.accuracy:.0%})")

        elif args.command == "clear-stats":
            guesser.clear_lifetime()
            print("Lifetime stats cleared.")

        elif args.command == "mode":
            if args.value is not None and args.value not in MODES:
                print(f"Error: unknown mode {args.value!r}", file=sys.stderr)
                sys.exit(1)
            value = guesser.preferences.set_mode(args.value) if args.value else guesser.preferences.get_mode()
            print(value)

        elif args.command == "layout":
            if args.value is not None and args.value not in LAYOUTS:
                print(f"Error: unknown layout {args.value!r}", file=sys.stderr)
                sys.exit(1)
            value = guesser.preferences.set_layout(args.value) if args.value else guesser.preferences.get_layout()
            print(value)

        elif args.command == "released-ids":
            ids = guesser.policy.released_ids()
            if not ids:
                print("Error: released catalog is empty or unavailable", file=sys.stderr)
                sys.exit(1)
            for app_id in ids:
                print(app_id)


if __name__ == "__main__":
    main()
