from dataclasses import dataclass

from barnacleforge.models.tables import EffectKind, Efficiency, Range, Rarity


@dataclass(frozen=True, slots=True)
class Effect:
    """
    A resolved effect.

    Attributes:
        kind: What the effect does
        magnitude: Points of damage/healing/shielding, set by the engine
    """

    kind: EffectKind
    magnitude: int


@dataclass(frozen=True, slots=True)
class Debit:
    """One entry in a draft's budget ledger."""

    step: str  # allocate_priority, select_range, select_effect
    amount: int
    budget_after: int


@dataclass(frozen=True, slots=True)
class Card:
    """
    A finished, immutable card.

    Attributes:
        name: Display name, also used as the output file stem
        rarity: Rarity tier the budget was rolled from
        efficiency: Efficiency the budget was scaled by
        power: Power rolled for the rarity, before efficiency
        priority: Speed value, below MAX_PRIORITY for every valid card
        barnacles: Cast cost, never zero for a valid card
        budget: Budget left over after all debits (may be negative)
        priority_allocation: Budget points spent on priority
        range: Targeting breadth
        effect: Resolved effect with its magnitude
    """

    name: str
    rarity: Rarity
    efficiency: Efficiency
    power: int
    priority: int
    barnacles: int
    budget: int
    priority_allocation: int
    range: Range
    effect: Effect
