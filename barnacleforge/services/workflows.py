"""
Command workflows.

One entry point per command. Each takes already-validated, typed
arguments and returns finished cards or rosters; argument parsing lives in
`barnacleforge.main`.

Failure policy:
- Template problems (MissingTemplateError, UnparseableTemplateError)
  propagate and abort the deck before anything is written
- Failing to clear stale cards (CardIOError) aborts that deck
- A single card file that cannot be written is logged and skipped
"""

import logging
import random
from pathlib import Path

from barnacleforge.models.card import Card
from barnacleforge.models.deck import DeckInputs, DeckRecord, DeckType
from barnacleforge.models.failure import CardIOError
from barnacleforge.models.tables import ForgeConfig
from barnacleforge.prompts import Prompter, interactive_source
from barnacleforge.services.card_formatter import format_card
from barnacleforge.services.card_store import (
    clear_stale_cards,
    deck_dir,
    deck_file,
    load_deck_inputs,
    write_card,
    write_cards,
    write_deck_inputs,
)
from barnacleforge.services.deck_assembly import (
    assemble_deck,
    blank_template,
    example_inputs,
    replay_source,
)

logger = logging.getLogger(__name__)


def emit_template(path: Path, deck_type: DeckType | None = None) -> Path:
    """Write a blank, fill-in deck template."""
    return write_deck_inputs(blank_template(deck_type), path)


def build_deck_from_directory(
    deck_name: str,
    output_dir: Path,
    config: ForgeConfig,
    replay_attempts: int,
    rng: random.Random | None = None,
) -> DeckRecord:
    """
    Regenerate a deck's cards from `<output>/<deck>/<deck>.deck`.

    The template is written back with the names and powers used, so the
    next run rebuilds the same cards.

    Raises:
        MissingTemplateError: No readable template in the deck folder
        UnparseableTemplateError: Template matches no known shape
        CardIOError: Stale card files could not be cleared
    """
    inputs = load_deck_inputs(deck_file(output_dir, deck_name))
    directory = deck_dir(output_dir, deck_name)
    clear_stale_cards(directory)

    record = assemble_deck(deck_name, inputs, config, replay_source(replay_attempts), rng)
    write_cards(record.cards, directory)
    if record.template is not None:
        _write_template_logged(record.template, deck_file(output_dir, deck_name))
    return record


def build_deck_interactively(
    deck_name: str,
    deck_type: DeckType | None,
    output_dir: Path,
    config: ForgeConfig,
    prompter: Prompter,
    rng: random.Random | None = None,
) -> DeckRecord:
    """
    Prompt for every slot of a new deck, then write its cards and template.

    The written template replays the designer's choices with the names and
    powers used.
    """
    directory = deck_dir(output_dir, deck_name)
    clear_stale_cards(directory)

    record = assemble_deck(
        deck_name, blank_template(deck_type), config, interactive_source(prompter, config, rng), rng
    )
    write_cards(record.cards, directory)
    if record.template is not None:
        _write_template_logged(record.template, deck_file(output_dir, deck_name))
    return record


def generate_cards(
    prompter: Prompter,
    config: ForgeConfig,
    output_dir: Path,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Create standalone cards until the designer enters an empty name.

    Each successful card is shown and written to `<output>/<name>.card`.
    Infeasible cards are reported and nothing is written for them.
    """
    cards: list[Card] = []
    while True:
        name = prompter.get_name()
        if not name:
            break

        result = prompter.draft_card(name, config, rng)
        if not result.ok:
            assert result.failure is not None
            prompter.write(f"ERROR: {result.failure.message()}")
            continue

        card = result.unwrap()
        cards.append(card)
        prompter.write(f"\nGenerated Card:\n{format_card(card)}")
        try:
            write_card(card, output_dir)
        except CardIOError as e:
            logger.error("%s", e.describe())
    return cards


def emit_example_decks(
    output_dir: Path,
    config: ForgeConfig,
    replay_attempts: int,
    rng: random.Random | None = None,
) -> list[DeckRecord]:
    """
    Write an example template for each deck type and build its cards.

    Decks are written to `<output>/<Type>_Example/`.
    """
    records: list[DeckRecord] = []
    for deck_type in DeckType:
        deck_name = f"{deck_type.value.title()}_Example"
        template_path = deck_file(output_dir, deck_name)
        try:
            write_deck_inputs(example_inputs(deck_type), template_path)
            records.append(
                build_deck_from_directory(deck_name, output_dir, config, replay_attempts, rng)
            )
        except CardIOError as e:
            logger.error("Skipping example deck %s: %s", deck_name, e.describe())
    return records


def _write_template_logged(template: DeckInputs, path: Path) -> None:
    try:
        write_deck_inputs(template, path)
    except CardIOError as e:
        logger.error("%s", e.describe())
