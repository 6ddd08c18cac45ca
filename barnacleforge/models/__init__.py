from barnacleforge.models.card import Card, Debit, Effect
from barnacleforge.models.deck import (
    DECK_CURVES,
    DECK_SIZE,
    CardInput,
    DeckInputs,
    DeckRecord,
    DeckSlot,
    DeckType,
    RosterDeckInputs,
    TieredDeckInputs,
    dump_deck_inputs,
    parse_deck_inputs,
)
from barnacleforge.models.failure import (
    CardIOError,
    ConfigCorruptError,
    ContractViolationError,
    FailureKind,
    InfeasibleCard,
    KnownError,
    MissingTemplateError,
    Outcome,
    OutcomeType,
    UnparseableTemplateError,
    UnresolvedCardError,
)
from barnacleforge.models.tables import (
    EffectKind,
    Efficiency,
    ForgeConfig,
    PowerPick,
    PriorityModifiers,
    PriorityRounding,
    PrioritySource,
    Range,
    RangeModifiers,
    Rarity,
    RarityRanges,
)

__all__ = [
    "Card",
    "CardIOError",
    "CardInput",
    "ConfigCorruptError",
    "ContractViolationError",
    "DECK_CURVES",
    "DECK_SIZE",
    "Debit",
    "DeckInputs",
    "DeckRecord",
    "DeckSlot",
    "DeckType",
    "Effect",
    "EffectKind",
    "Efficiency",
    "FailureKind",
    "ForgeConfig",
    "InfeasibleCard",
    "KnownError",
    "MissingTemplateError",
    "Outcome",
    "OutcomeType",
    "PowerPick",
    "PriorityModifiers",
    "PriorityRounding",
    "PrioritySource",
    "Range",
    "RangeModifiers",
    "Rarity",
    "RarityRanges",
    "RosterDeckInputs",
    "TieredDeckInputs",
    "UnparseableTemplateError",
    "UnresolvedCardError",
    "dump_deck_inputs",
    "parse_deck_inputs",
]
