"""
Cost and priority derivation.

Post-pipeline formulas. Every multiply truncates toward zero immediately,
so chained multipliers compound their rounding loss.
"""

import math

from barnacleforge.config import MAX_PRIORITY
from barnacleforge.models.card import Card, Effect
from barnacleforge.models.failure import UnresolvedCardError
from barnacleforge.models.tables import (
    Efficiency,
    ForgeConfig,
    PriorityRounding,
    PrioritySource,
    Range,
    Rarity,
)

RECAST_RATE = 1.5
WITHDRAW_DIVISOR = 3
MIN_WITHDRAW = 1


def apply_multiplier(value: int, multiplier: float) -> int:
    """Multiply and truncate toward zero."""
    return math.trunc(value * multiplier)


def clamp_priority(value: int) -> int:
    return max(0, min(value, MAX_PRIORITY))


def priority_penalty(amount: int, rarity: Rarity, config: ForgeConfig) -> int:
    """
    How far a card's priority drops below MAX_PRIORITY.

    Args:
        amount: Priority allocation, or remaining budget when the config's
            priority source is REMAINING_BUDGET
        rarity: Selects the priority multiplier
        config: Supplies the multiplier and the source/rounding policies

    Returns:
        Penalty in [0, MAX_PRIORITY]
    """
    modifier = config.get_priority_modifier(rarity)

    if config.priority_source == PrioritySource.REMAINING_BUDGET:
        penalty = 0 if amount < 0 else apply_multiplier(amount, modifier) + 1
    else:
        penalty = apply_multiplier(amount, modifier)

    penalty = clamp_priority(penalty)

    if config.priority_rounding == PriorityRounding.ODD_NUDGE and penalty > 0 and penalty % 2 == 0:
        penalty = clamp_priority(penalty + 1)

    return penalty


def barnacles_from_effect(effect: Effect | None) -> int:
    """
    Cast cost contributed by an effect's magnitude.

    Raises:
        UnresolvedCardError: If no effect has been resolved yet
    """
    if effect is None:
        raise UnresolvedCardError("Cannot price a card before its effect is resolved")
    return apply_multiplier(effect.magnitude, effect.kind.barnacle_rate)


def get_barnacles(effect: Effect | None, range_: Range | None, efficiency: Efficiency) -> int:
    """
    Final cast cost: (effect cost + range flat cost) scaled by 1/efficiency.

    Raises:
        UnresolvedCardError: If range or effect is missing
    """
    if range_ is None:
        raise UnresolvedCardError("Cannot price a card before its range is selected")
    base = barnacles_from_effect(effect) + range_.flat_cost
    return apply_multiplier(base, 1.0 / efficiency.multiplier)


def get_recast(card: Card) -> int:
    """Price to cast the card again."""
    return apply_multiplier(card.barnacles, RECAST_RATE)


def get_withdraw(card: Card) -> int:
    """Price to withdraw the card: a third of its cast cost, at least 1."""
    return max(MIN_WITHDRAW, card.barnacles // WITHDRAW_DIVISOR)
