"""
Deep Regrets CLI - Command-line interface for the engine.

Usage:
    deepregrets simulate [--seats N] [--difficulty TIER] [--seed S]
    deepregrets validate
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Deep Regrets - Fishing Game Engine",
        prog="deepregrets",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every day transition")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a game between scripted anglers")
    simulate_parser.add_argument("--seats", type=int, default=3, help="Number of anglers (1-5)")
    simulate_parser.add_argument(
        "--difficulty",
        choices=["easy", "medium", "hard"],
        default="medium",
        help="Difficulty tier for every angler",
    )
    simulate_parser.add_argument("--seed", type=int, default=0, help="Game seed")
    simulate_parser.add_argument("--show-actions", action="store_true", help="Print every action taken")

    # Validate command
    subparsers.add_parser("validate", help="Validate the bundled game content")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "validate":
        cmd_validate(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Play a full game with scripted seats and print the standings."""
    from .engine_core.payloads import SeatSetup
    from .games.deep_regrets import create_deep_regrets_content, CHARACTERS
    from .session import play_game

    content = create_deep_regrets_content()
    rules = content.rules
    if not rules.min_seats <= args.seats <= rules.max_seats:
        print(f"Error: seats must be between {rules.min_seats} and {rules.max_seats}")
        sys.exit(1)

    seats = [
        SeatSetup(
            seat_id=f"angler_{i + 1}",
            name=CHARACTERS[i % len(CHARACTERS)].name,
            character_id=CHARACTERS[i % len(CHARACTERS)].id,
            is_scripted=True,
            difficulty=args.difficulty,
        )
        for i in range(args.seats)
    ]

    print(f"Simulating {args.seats} {args.difficulty} angler(s), seed {args.seed}...")
    result = play_game(content, seats, seed=args.seed)

    if args.show_actions:
        for line in result.automa_actions:
            print(f"  {line}")

    print(f"\nGame over after {result.state.day_number} day(s), {result.steps} actions")
    ranked = sorted(result.final_scores.items(), key=lambda item: -item[1])
    for seat_id, score in ranked:
        seat = result.state.get_seat(seat_id)
        marker = " (winner)" if seat_id == result.winner else ""
        print(f"  {seat.name:<12} {score:>4}{marker}")


def cmd_validate(args):
    """Validate the bundled content tables."""
    from .games.deep_regrets import create_deep_regrets_content
    from .spec_schema import validate_content

    content = create_deep_regrets_content()
    result = validate_content(content)

    print(f"Content: {content.content_id}")
    print(f"Fish: {len(content.fish)}  Dinks: {len(content.dinks)}  Regrets: {len(content.regrets)}")
    print(f"Upgrades: {len(content.upgrades)}  Tackle dice: {len(content.tackle_dice)}")

    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")

    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  - {e}")
        sys.exit(1)

    print("\nContent is valid")


if __name__ == "__main__":
    main()
