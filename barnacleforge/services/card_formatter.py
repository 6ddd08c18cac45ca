"""
Card report formatter.

THIS MODULE HANDLES OUTPUT RENDERING ONLY.

It accepts finished Card objects (already built, therefore feasible) and
produces the text written to `.card` files and shown in the terminal.
"""

from barnacleforge.models.card import Card
from barnacleforge.services.derivation import get_recast, get_withdraw


def format_card(card: Card) -> str:
    """
    Format a finished card as a text report.

    Args:
        card: A successfully built card

    Returns:
        Multi-line report: name, priority, rarity, costs, effect and range
    """
    lines = [
        f"{card.name}:",
        f"\tPriority: {card.priority}",
        f"\tRarity: {card.rarity.label}",
        f"\tEfficiency: {card.efficiency.value.title()}",
        f"\tCast: {card.barnacles} barnacles",
        f"\tRecast: {get_recast(card)} barnacles",
        f"\tWithdraw: {get_withdraw(card)} barnacles",
        f"\tEffect: {_format_effect(card)}, Range: {card.range.value}",
    ]
    return "\n".join(lines)


def format_deck(cards: list[Card]) -> str:
    """Format several cards as one report, separated by blank lines."""
    return "\n\n".join(format_card(card) for card in cards)


def _format_effect(card: Card) -> str:
    return f"{card.effect.kind.label} {card.effect.magnitude}"
