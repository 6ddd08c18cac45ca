"""
Deck assembly workflow.

Drives the engine once per roster slot until every slot holds a feasible
card.

STATES:
    EMPTY -> COLLECTING(slot i) -> RESOLVED(slot i) -> ... -> COMPLETE
    any state -> ABORTED (an exception escaped; no partial deck is returned)

Retry policy belongs to the ChoiceSource, not the engine:
- Interactive sources re-prompt until the designer produces a valid card
- Template replay re-rolls a bounded number of times, then gives up and
  the slot is recorded as skipped
"""

import logging
import random
from collections import Counter
from collections.abc import Callable
from enum import Enum

from barnacleforge.models.card import Card
from barnacleforge.models.deck import (
    DECK_CURVES,
    CardInput,
    DeckInputs,
    DeckRecord,
    DeckSlot,
    DeckType,
    RosterDeckInputs,
    TieredDeckInputs,
)
from barnacleforge.models.failure import InfeasibleCard
from barnacleforge.models.tables import EffectKind, Efficiency, ForgeConfig, Range, Rarity
from barnacleforge.services.engine import BuildResult, resolve_card

logger = logging.getLogger(__name__)

# (slot, attempt number starting at 1, failure of the previous attempt)
# -> choices to try, or None to give up on the slot
ChoiceSource = Callable[[DeckSlot, int, InfeasibleCard | None], CardInput | None]


class AssemblyState(str, Enum):
    EMPTY = "empty"
    COLLECTING = "collecting"
    RESOLVED = "resolved"
    COMPLETE = "complete"
    ABORTED = "aborted"


def default_card_name(deck_name: str, slot: DeckSlot, occurrence: int) -> str:
    """
    Generated display name for a slot.

    The first card of a rarity is unsuffixed; later ones get 2, 3, ...
    """
    base = f"{deck_name} {slot.rarity.label}"
    return base if occurrence == 1 else f"{base} {occurrence}"


def replay_source(max_attempts: int) -> ChoiceSource:
    """Choice source that replays a template's saved choices."""

    def choose(slot: DeckSlot, attempt: int, failure: InfeasibleCard | None) -> CardInput | None:
        if attempt > max_attempts:
            return None
        if failure is not None:
            logger.info("Slot %s failed (%s), re-rolling", slot.role, failure.message())
        return slot.card_input

    return choose


def resolve_input(
    name: str,
    slot: DeckSlot,
    card_input: CardInput,
    config: ForgeConfig,
    rng: random.Random | None = None,
) -> BuildResult:
    """Run the engine for one slot's choices."""
    return resolve_card(
        name,
        slot.rarity,
        card_input.efficiency,
        card_input.range,
        card_input.effect,
        config,
        priority_allocation=card_input.priority_allocation,
        rng=rng,
        power=card_input.power,
    )


class DeckAssembler:
    """
    Fills a five-slot roster by repeatedly driving the engine.

    Single use: call run() once.
    """

    def __init__(
        self,
        deck_name: str,
        inputs: DeckInputs,
        config: ForgeConfig,
        choose: ChoiceSource,
        rng: random.Random | None = None,
    ):
        self.deck_name = deck_name
        self.inputs = inputs
        self.config = config
        self.choose = choose
        self.rng = rng
        self.state = AssemblyState.EMPTY
        self.current_slot: int | None = None
        self._rarity_counts: Counter[str] = Counter()

    def run(self) -> DeckRecord:
        """
        Assemble the deck.

        Returns:
            DeckRecord with cards in slot order and the replayable template

        Raises:
            RuntimeError: If the assembler has already run
        """
        if self.state != AssemblyState.EMPTY:
            raise RuntimeError(f"Assembler already used (state: {self.state.value})")

        cards: list[Card] = []
        used: dict[str, CardInput] = {}
        skipped: list[str] = []

        try:
            for index, slot in enumerate(self.inputs.get_slots()):
                self.current_slot = index
                self.state = AssemblyState.COLLECTING
                card, card_input = self._fill_slot(slot)
                if card is None:
                    logger.warning("Skipping slot %s: no feasible card", slot.role)
                    skipped.append(slot.role)
                    continue
                cards.append(card)
                used[slot.role] = card_input.model_copy(
                    update={"name": card.name, "power": card.power}
                )
                self.state = AssemblyState.RESOLVED
        except BaseException:
            self.state = AssemblyState.ABORTED
            raise

        self.state = AssemblyState.COMPLETE
        logger.info("Assembled deck %s: %d cards, %d skipped", self.deck_name, len(cards), len(skipped))
        return DeckRecord(
            name=self.deck_name,
            cards=cards,
            template=self.inputs.with_inputs(used),
            skipped=skipped,
        )

    def _next_name(self, slot: DeckSlot) -> str:
        self._rarity_counts[slot.rarity.value] += 1
        return default_card_name(self.deck_name, slot, self._rarity_counts[slot.rarity.value])

    def _fill_slot(self, slot: DeckSlot) -> tuple[Card | None, CardInput]:
        generated = self._next_name(slot)
        failure: InfeasibleCard | None = None
        attempt = 0
        card_input = slot.card_input

        while True:
            attempt += 1
            chosen = self.choose(slot, attempt, failure)
            if chosen is None:
                return None, card_input
            card_input = chosen
            name = card_input.name or generated
            result = resolve_input(name, slot, card_input, self.config, self.rng)
            if result.ok:
                return result.unwrap(), card_input
            failure = result.failure


def assemble_deck(
    deck_name: str,
    inputs: DeckInputs,
    config: ForgeConfig,
    choose: ChoiceSource,
    rng: random.Random | None = None,
) -> DeckRecord:
    """Convenience wrapper: build and run a DeckAssembler."""
    return DeckAssembler(deck_name, inputs, config, choose, rng).run()


# =============================================================================
# TEMPLATES
# =============================================================================


def blank_template(deck_type: DeckType | None = None) -> DeckInputs:
    """
    Fill-in template with default choices in every slot.

    Each slot starts with one point on priority so an unedited template
    still builds; a zero allocation leaves priority at its maximum.

    Args:
        deck_type: Roster shape for this deck type; None gives the
            tiered shape
    """
    if deck_type is None:
        return TieredDeckInputs(**{rarity.value: _blank_input() for rarity in Rarity})
    return RosterDeckInputs(
        deck_type=deck_type,
        slots={slot.role: _blank_input() for slot in _curve_slots(deck_type)},
    )


def _blank_input() -> CardInput:
    return CardInput(priority_allocation=1)


# Example choices per slot position, weakest slot first
_EXAMPLE_CHOICES: tuple[CardInput, ...] = (
    CardInput(priority_allocation=1, range=Range.SINGLE, effect=EffectKind.DAMAGE),
    CardInput(priority_allocation=1, range=Range.SINGLE, effect=EffectKind.HEAL),
    CardInput(priority_allocation=1, range=Range.MULTIPLE, effect=EffectKind.DAMAGE),
    CardInput(
        efficiency=Efficiency.GOOD,
        priority_allocation=2,
        range=Range.MULTIPLE,
        effect=EffectKind.ACID_HEAL,
    ),
    CardInput(priority_allocation=2, range=Range.AOE, effect=EffectKind.SHIELD),
)


def example_inputs(deck_type: DeckType) -> RosterDeckInputs:
    """A filled-in example template for a deck type."""
    slots = _curve_slots(deck_type)
    return RosterDeckInputs(
        deck_type=deck_type,
        slots={slot.role: choice for slot, choice in zip(slots, _EXAMPLE_CHOICES, strict=True)},
    )


def _curve_slots(deck_type: DeckType) -> list[DeckSlot]:
    return [
        DeckSlot(role=role, rarity=rarity, card_input=CardInput())
        for role, rarity in DECK_CURVES[deck_type]
    ]
