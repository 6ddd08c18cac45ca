"""
BarnacleForge services.

Card resolution, deck assembly and the file stores around them.
Command workflows live in barnacleforge.services.workflows and are not
re-exported here (they depend on barnacleforge.prompts).
"""

from barnacleforge.services.card_formatter import format_card, format_deck
from barnacleforge.services.card_store import (
    clear_stale_cards,
    load_deck_inputs,
    write_card,
    write_cards,
    write_deck_inputs,
)
from barnacleforge.services.config_store import load_config, save_config
from barnacleforge.services.deck_assembly import (
    AssemblyState,
    DeckAssembler,
    assemble_deck,
    blank_template,
    default_card_name,
    example_inputs,
    replay_source,
)
from barnacleforge.services.derivation import (
    apply_multiplier,
    barnacles_from_effect,
    get_barnacles,
    get_recast,
    get_withdraw,
    priority_penalty,
)
from barnacleforge.services.engine import (
    BuildResult,
    CardDraft,
    EffectPreview,
    ResolutionOrder,
    initialize,
    resolve_card,
)

__all__ = [
    "AssemblyState",
    "BuildResult",
    "CardDraft",
    "DeckAssembler",
    "EffectPreview",
    "ResolutionOrder",
    "apply_multiplier",
    "assemble_deck",
    "barnacles_from_effect",
    "blank_template",
    "clear_stale_cards",
    "default_card_name",
    "example_inputs",
    "format_card",
    "format_deck",
    "get_barnacles",
    "get_recast",
    "get_withdraw",
    "initialize",
    "load_config",
    "load_deck_inputs",
    "priority_penalty",
    "replay_source",
    "resolve_card",
    "save_config",
    "write_card",
    "write_cards",
    "write_deck_inputs",
]
