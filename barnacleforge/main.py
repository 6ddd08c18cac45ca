"""
Command line entry point.

Usage:
    barnacleforge template [--deck-type starter] [--output Deck_Template.json]
    barnacleforge deck <deck name>
    barnacleforge interactive-deck <deck name> [--deck-type starter]
    barnacleforge cards
    barnacleforge examples
"""

import argparse
import logging
import random
from pathlib import Path

from barnacleforge.config import Settings, settings
from barnacleforge.models.deck import DeckRecord, DeckType
from barnacleforge.models.failure import KnownError
from barnacleforge.prompts import Prompter
from barnacleforge.services.config_store import load_config
from barnacleforge.services.workflows import (
    build_deck_from_directory,
    build_deck_interactively,
    emit_example_decks,
    emit_template,
    generate_cards,
)

logger = logging.getLogger(__name__)

DECK_TYPE_CHOICES = [deck_type.value for deck_type in DeckType]


def build_parser(defaults: Settings = settings) -> argparse.ArgumentParser:
    """Argument parser for all commands."""
    parser = argparse.ArgumentParser(prog="barnacleforge", description="Generate balanced cards")
    parser.add_argument(
        "--config",
        type=Path,
        default=defaults.config_path,
        help=f"Game config file (default: {defaults.config_path})",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=defaults.output_dir,
        help="Directory for decks and cards (default: current directory)",
    )
    parser.add_argument("--seed", type=int, default=defaults.seed, help="Seed for power rolls")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    template = commands.add_parser("template", help="Write a blank deck template")
    template.add_argument("--deck-type", choices=DECK_TYPE_CHOICES, help="Roster shape")
    template.add_argument(
        "--output",
        type=Path,
        default=Path(defaults.template_name),
        help=f"Template path (default: {defaults.template_name})",
    )

    deck = commands.add_parser("deck", help="Build a deck from <deck>/<deck>.deck")
    deck.add_argument("deck_name", help="Deck name; must match its folder name")

    interactive = commands.add_parser("interactive-deck", help="Build a deck by answering prompts")
    interactive.add_argument("deck_name", help="Deck name (folder to write into)")
    interactive.add_argument("--deck-type", choices=DECK_TYPE_CHOICES, help="Roster shape")

    commands.add_parser("cards", help="Create standalone cards until an empty name")
    commands.add_parser("examples", help="Write and build an example deck per deck type")

    return parser


def _report(record: DeckRecord) -> None:
    logger.info("Deck %s: %d card(s) written", record.name, len(record.cards))
    if record.skipped:
        logger.warning("Deck %s: no feasible card for %s", record.name, ", ".join(record.skipped))


def run(args: argparse.Namespace, defaults: Settings = settings) -> int:
    """
    Dispatch one parsed command.

    Returns:
        Process exit code
    """
    rng = random.Random(args.seed)
    deck_type = DeckType(args.deck_type) if getattr(args, "deck_type", None) else None

    if args.command == "template":
        emit_template(args.output, deck_type)
        return 0

    config = load_config(args.config)

    if args.command == "deck":
        _report(
            build_deck_from_directory(
                args.deck_name, args.output_dir, config, defaults.replay_attempts, rng
            )
        )
    elif args.command == "interactive-deck":
        _report(
            build_deck_interactively(
                args.deck_name, deck_type, args.output_dir, config, Prompter(), rng
            )
        )
    elif args.command == "cards":
        cards = generate_cards(Prompter(), config, args.output_dir, rng)
        logger.info("Created %d card(s)", len(cards))
    elif args.command == "examples":
        for record in emit_example_decks(args.output_dir, config, defaults.replay_attempts, rng):
            _report(record)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return run(args)
    except KnownError as e:
        logger.error("%s", e.describe())
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
