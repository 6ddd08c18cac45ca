"""
Terminal prompting.

Collects bounded, validated choices from a designer and hands typed values
to the engine. No game math lives here beyond displaying what the engine
reports (costs, previews, running budget).
"""

import random
from collections.abc import Callable, Sequence
from typing import TypeVar

from barnacleforge.config import PADDING
from barnacleforge.models.deck import CardInput, DeckSlot
from barnacleforge.models.failure import InfeasibleCard
from barnacleforge.models.tables import EffectKind, Efficiency, ForgeConfig, Range, Rarity
from barnacleforge.services.deck_assembly import ChoiceSource
from barnacleforge.services.engine import BuildResult, CardDraft, initialize

N = TypeVar("N", int, float)
E = TypeVar("E")

RANGE_LABELS: dict[Range, str] = {
    Range.SINGLE: "Single",
    Range.MULTIPLE: "Multiple (2)",
    Range.AOE: "AoE (room)",
    Range.EXTENDED_AOE: "AoE (Extended)",
}


def pad_right(text: str, width: int = PADDING, fill: str = " ") -> str:
    """Left-align text in a column; longer text is returned unchanged."""
    return text.ljust(width, fill)


class Prompter:
    """
    Reads bounded answers from a line source.

    Args:
        read: Returns one line of input for a prompt (default: input)
        write: Emits one line of output (default: print)
    """

    def __init__(
        self,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ):
        self.read = read
        self.write = write

    def get_num(self, minimum: N, maximum: N, prompt: str, parse: Callable[[str], N]) -> N:
        """Ask until the answer parses and lies within [minimum, maximum]."""
        while True:
            raw = self.read(prompt)
            try:
                value = parse(raw.strip())
            except ValueError:
                self.write(f"Could not parse {raw.strip()}!")
                continue
            if minimum <= value <= maximum:
                return value
            self.write("Not in range!")

    def get_int(self, minimum: int, maximum: int, prompt: str) -> int:
        return self.get_num(minimum, maximum, prompt, int)

    def choose(self, title: str, options: Sequence[tuple[E, str]]) -> E:
        """Show a numbered menu and return the chosen option's value."""
        menu = "".join(
            pad_right(f"{index}: {label}") for index, (_, label) in enumerate(options, start=1)
        )
        index = self.get_int(1, len(options), f"{menu}\nEnter {title}: (1..{len(options)}).. ")
        return options[index - 1][0]

    def get_name(self) -> str:
        """Card name; an empty answer means the designer is done."""
        return self.read("Enter card name (<Enter> to exit): ").strip()

    # -------------------------------------------------------------------------
    # Categorical choices
    # -------------------------------------------------------------------------

    def get_rarity(self) -> Rarity:
        return self.choose("rarity", [(rarity, rarity.label) for rarity in Rarity])

    def get_efficiency(self) -> Efficiency:
        return self.choose(
            "efficiency", [(efficiency, efficiency.value.title()) for efficiency in Efficiency]
        )

    def get_range(self) -> Range:
        return self.choose(
            "range type",
            [(range_, f"{RANGE_LABELS[range_]} (Cost: {range_.flat_cost})") for range_ in Range],
        )

    def get_effect(self, draft: CardDraft | None = None) -> EffectKind:
        """
        Effect menu. With a draft, each option shows what it would debit.
        """
        options = []
        for kind in EffectKind:
            cost = "N/A"
            if draft is not None and draft.range is not None:
                cost = str(draft.preview_effect(kind).debit)
            options.append((kind, f"{kind.label} (Cost: {cost})"))
        return self.choose("effect type", options)

    def get_priority_allocation(self, budget: int) -> int:
        """
        Points to spend on priority: 1 <= allocation < budget.

        Returns 0 without asking when the budget leaves no valid allocation.
        """
        if budget < 2:
            self.write(f"Budget {budget} is too low to buy priority.")
            return 0
        return self.get_int(1, budget - 1, f"Enter priority allocation: (1..{budget - 1}).. ")

    # -------------------------------------------------------------------------
    # Flows
    # -------------------------------------------------------------------------

    def start_draft(
        self,
        name: str,
        rarity: Rarity,
        config: ForgeConfig,
        rng: random.Random | None = None,
    ) -> CardDraft:
        """Ask for efficiency and roll the draft's budget."""
        efficiency = self.get_efficiency()
        draft = initialize(name, rarity, efficiency, config, rng)
        self.write(f"Created card with power budget: {draft.budget}")
        return draft

    def spend_budget(self, draft: CardDraft) -> CardDraft:
        """
        Ask for allocation, range and effect, showing the budget after each debit.

        The effect menu previews what every effect would cost on this draft.
        """
        allocation = self.get_priority_allocation(draft.budget)
        if allocation:
            draft = draft.allocate_priority(allocation)
            self.write(f"New budget: {draft.budget}")

        draft = draft.select_range(self.get_range())
        self.write(f"New budget: {draft.budget}")
        draft = draft.select_effect(self.get_effect(draft))
        self.write(f"New budget: {draft.budget}")
        return draft

    def draft_card(
        self,
        name: str,
        config: ForgeConfig,
        rng: random.Random | None = None,
    ) -> BuildResult:
        """Walk the designer through one card from rarity to build."""
        draft = self.start_draft(name, self.get_rarity(), config, rng)
        return self.spend_budget(draft).build()


def interactive_source(
    prompter: Prompter,
    config: ForgeConfig,
    rng: random.Random | None = None,
) -> ChoiceSource:
    """
    Deck-assembly choice source that asks the designer for every attempt.

    Each attempt rolls the slot's power and walks the designer through the
    debits with live costs. The returned choices pin that power, so the
    assembler rebuilds the card the designer saw.

    Never gives up: a failed slot is simply asked again.
    """

    def choose(slot: DeckSlot, attempt: int, failure: InfeasibleCard | None) -> CardInput:
        if failure is not None:
            prompter.write(f"ERROR: {failure.message()}. Try different choices.")
        low, high = config.rarity_ranges.get_range(slot.rarity)
        prompter.write(f"Slot {slot.role} ({slot.rarity.label}, power {low}-{high}), attempt {attempt}")

        draft = prompter.spend_budget(prompter.start_draft(slot.role, slot.rarity, config, rng))
        assert draft.range is not None and draft.effect is not None
        return CardInput(
            efficiency=draft.efficiency,
            priority_allocation=draft.priority_allocation,
            range=draft.range,
            effect=draft.effect.kind,
            power=draft.power,
        )

    return choose
