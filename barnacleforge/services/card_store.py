"""
Card and deck file management.

Layout under the output directory:

    <output>/<name>.card               standalone cards
    <output>/<deck>/<deck>.deck        deck template (replay input)
    <output>/<deck>/<card name>.card   cards of a deck

Every file is fully written or read in a single step.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from barnacleforge.config import CARD_EXTENSION, DECK_EXTENSION
from barnacleforge.models.card import Card
from barnacleforge.models.deck import DeckInputs, dump_deck_inputs, parse_deck_inputs
from barnacleforge.models.failure import CardIOError, MissingTemplateError, UnparseableTemplateError
from barnacleforge.services.card_formatter import format_card

logger = logging.getLogger(__name__)


def card_file_name(name: str) -> str:
    """File name for a card; path separators in the name are replaced."""
    return name.replace("/", "_").replace("\\", "_") + CARD_EXTENSION


def deck_dir(output_dir: Path, deck_name: str) -> Path:
    return output_dir / deck_name


def deck_file(output_dir: Path, deck_name: str) -> Path:
    return deck_dir(output_dir, deck_name) / f"{deck_name}{DECK_EXTENSION}"


# =============================================================================
# TEMPLATES
# =============================================================================


def load_deck_inputs(path: Path) -> DeckInputs:
    """
    Read and parse a deck template.

    Raises:
        MissingTemplateError: If the file does not exist or cannot be read
        UnparseableTemplateError: If the contents match no template shape
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise MissingTemplateError(str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise MissingTemplateError(str(path), detail=str(e)) from e

    try:
        return parse_deck_inputs(text)
    except ValidationError as e:
        raise UnparseableTemplateError(str(path), detail=f"{e.error_count()} validation error(s)") from e


def write_deck_inputs(inputs: DeckInputs, path: Path) -> Path:
    """
    Write a deck template, truncating any existing file.

    Raises:
        CardIOError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_deck_inputs(inputs), encoding="utf-8")
    except OSError as e:
        raise CardIOError(str(path), "write template", detail=str(e)) from e
    logger.info("Wrote template to %s", path)
    return path


# =============================================================================
# CARDS
# =============================================================================


def clear_stale_cards(directory: Path) -> list[Path]:
    """
    Remove every .card file in a directory.

    All-or-nothing for the caller: any failure aborts the deck's
    regeneration so stale and fresh cards never mix.

    Returns:
        Paths that were removed

    Raises:
        CardIOError: If a file cannot be removed
    """
    removed: list[Path] = []
    if not directory.is_dir():
        return removed
    for path in sorted(directory.glob(f"*{CARD_EXTENSION}")):
        try:
            path.unlink()
        except OSError as e:
            raise CardIOError(str(path), "remove existing card file", detail=str(e)) from e
        removed.append(path)
    logger.debug("Removed %d stale card file(s) from %s", len(removed), directory)
    return removed


def write_card(card: Card, directory: Path) -> Path:
    """
    Write one card report.

    Raises:
        CardIOError: If the file cannot be written
    """
    path = directory / card_file_name(card.name)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(format_card(card), encoding="utf-8")
    except OSError as e:
        raise CardIOError(str(path), "write card", detail=str(e)) from e
    logger.info("Wrote card to file: %s", path)
    return path


def write_cards(cards: list[Card], directory: Path) -> tuple[list[Path], list[CardIOError]]:
    """
    Write several card reports; a failed file does not stop the rest.

    Returns:
        (written paths, errors for files that could not be written)
    """
    written: list[Path] = []
    errors: list[CardIOError] = []
    for card in cards:
        try:
            written.append(write_card(card, directory))
        except CardIOError as e:
            logger.error("%s", e.describe())
            errors.append(e)
    return written, errors
