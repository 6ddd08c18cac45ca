"""
Deck templates and resolved rosters.

A deck template (DeckInputs) is a designer-editable, JSON-serializable
description of a five-slot roster. It comes in two shapes:

- TieredDeckInputs: one slot per rarity tier, keyed by tier name
- RosterDeckInputs: a deck type plus named role slots; the deck type
  assigns each role its rarity

Both shapes serve as fill-in templates AND as replay input.
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from barnacleforge.models.card import Card
from barnacleforge.models.tables import EffectKind, Efficiency, Range, Rarity

DECK_SIZE = 5


class DeckType(str, Enum):
    """Deck tier; selects the rarity curve of a roster."""

    STARTER = "starter"
    JOURNEYMAN = "journeyman"
    LEGENDARY = "legendary"


# Role -> rarity, in slot order. Same roles for every deck type.
DECK_CURVES: dict[DeckType, tuple[tuple[str, Rarity], ...]] = {
    DeckType.STARTER: (
        ("vanguard", Rarity.COMMON),
        ("skirmisher", Rarity.COMMON),
        ("tactician", Rarity.UNCOMMON),
        ("champion", Rarity.RARE),
        ("warden", Rarity.RARE),
    ),
    DeckType.JOURNEYMAN: (
        ("vanguard", Rarity.UNCOMMON),
        ("skirmisher", Rarity.UNCOMMON),
        ("tactician", Rarity.RARE),
        ("champion", Rarity.EPIC),
        ("warden", Rarity.EPIC),
    ),
    DeckType.LEGENDARY: (
        ("vanguard", Rarity.RARE),
        ("skirmisher", Rarity.EPIC),
        ("tactician", Rarity.EPIC),
        ("champion", Rarity.LEGENDARY),
        ("warden", Rarity.LEGENDARY),
    ),
}


class CardInput(BaseModel):
    """
    Designer choices for one slot.

    `name` may be left empty; the assembler then generates one from the
    deck name and the slot's rarity.

    `power` pins the rolled power. The assembler fills it in on the saved
    template so a replay rebuilds exactly the same card; leave it empty to
    roll fresh.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    efficiency: Efficiency = Efficiency.NORMAL
    priority_allocation: int = Field(default=0, ge=0)
    range: Range = Range.SINGLE
    effect: EffectKind = EffectKind.DAMAGE
    power: int | None = Field(default=None, ge=0)


@dataclass(frozen=True, slots=True)
class DeckSlot:
    """One roster position: its role, its rarity and the designer's choices."""

    role: str
    rarity: Rarity
    card_input: CardInput


class TieredDeckInputs(BaseModel):
    """Five slots keyed by rarity tier (the weakest-to-strongest curve)."""

    model_config = ConfigDict(extra="forbid")

    common: CardInput = Field(default_factory=CardInput)
    uncommon: CardInput = Field(default_factory=CardInput)
    rare: CardInput = Field(default_factory=CardInput)
    epic: CardInput = Field(default_factory=CardInput)
    legendary: CardInput = Field(default_factory=CardInput)

    def get_slots(self) -> list[DeckSlot]:
        return [
            DeckSlot(role=rarity.value, rarity=rarity, card_input=getattr(self, rarity.value))
            for rarity in Rarity
        ]

    def with_inputs(self, inputs: dict[str, CardInput]) -> "TieredDeckInputs":
        """Copy of this template with the given slots replaced (keyed by role)."""
        return self.model_copy(update=inputs)


class RosterDeckInputs(BaseModel):
    """Named role slots whose rarities come from the deck type's curve."""

    model_config = ConfigDict(extra="forbid")

    deck_type: DeckType
    slots: dict[str, CardInput]

    @model_validator(mode="after")
    def _check_roles(self) -> "RosterDeckInputs":
        expected = [role for role, _ in DECK_CURVES[self.deck_type]]
        if sorted(self.slots) != sorted(expected):
            raise ValueError(
                f"{self.deck_type.value} deck needs slots {expected}, got {sorted(self.slots)}"
            )
        return self

    def get_slots(self) -> list[DeckSlot]:
        return [
            DeckSlot(role=role, rarity=rarity, card_input=self.slots[role])
            for role, rarity in DECK_CURVES[self.deck_type]
        ]

    def with_inputs(self, inputs: dict[str, CardInput]) -> "RosterDeckInputs":
        """Copy of this template with the given slots replaced (keyed by role)."""
        return RosterDeckInputs(deck_type=self.deck_type, slots={**self.slots, **inputs})


DeckInputs = RosterDeckInputs | TieredDeckInputs

DECK_INPUTS_ADAPTER: TypeAdapter[DeckInputs] = TypeAdapter(DeckInputs)


def parse_deck_inputs(text: str) -> DeckInputs:
    """
    Parse a deck template in either shape.

    Raises:
        pydantic.ValidationError: If the text matches neither shape
    """
    return DECK_INPUTS_ADAPTER.validate_json(text)


def dump_deck_inputs(inputs: DeckInputs) -> str:
    """Pretty-printed JSON for a deck template."""
    return inputs.model_dump_json(indent=2)


@dataclass
class DeckRecord:
    """
    A fully assembled deck.

    Attributes:
        name: Deck name (also its folder name)
        cards: Finished cards in slot order
        template: Replayable template with the choices and names actually used
        skipped: Roles whose slot never produced a feasible card
    """

    name: str
    cards: list[Card] = field(default_factory=list)
    template: DeckInputs | None = None
    skipped: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True if every slot produced a card."""
        return not self.skipped and len(self.cards) == DECK_SIZE
