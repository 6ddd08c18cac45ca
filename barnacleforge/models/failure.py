"""
Failure Taxonomy: Classified Outcomes for Card and Deck Resolution.

Every failure the system can report is classified here.

Two propagation styles, never mixed:
- Engine failures are VALUES. `CardDraft.build()` returns an `Outcome`
  that callers must inspect before touching the card.
- Collaborator failures (templates, files, config) are `KnownError`
  exceptions carrying a kind, a message and a suggestion.

Programming errors (e.g. resolving an effect before a range exists) raise
`ContractViolationError` immediately. They are never defaulted to zero.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Engine outcomes
    INFEASIBLE_CARD = "infeasible_card"

    # Collaborator failures
    CONFIG_CORRUPT = "config_corrupt"
    MISSING_TEMPLATE = "missing_template"
    UNPARSEABLE_TEMPLATE = "unparseable_template"
    IO_FAILURE = "io_failure"

    # Programming errors
    CONTRACT_VIOLATION = "contract_violation"
    UNRESOLVED = "unresolved"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class InfeasibleCard:
    """
    Why a resolved draft could not become a card.

    Attributes:
        priority: Priority the card would have had
        budget: Remaining budget at build time
        reason: Which feasibility rule was broken
    """

    priority: int
    budget: int
    reason: str

    @property
    def kind(self) -> FailureKind:
        return FailureKind.INFEASIBLE_CARD

    def message(self) -> str:
        return f"Card prio {self.priority} due to budget: {self.budget} ({self.reason})"


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """
    Result envelope for engine operations.

    Exactly one of `data` and `failure` is set, matching `outcome`.
    """

    outcome: OutcomeType
    data: T | None = None
    failure: InfeasibleCard | None = None

    def __post_init__(self) -> None:
        if self.outcome == OutcomeType.SUCCESS:
            if self.data is None or self.failure is not None:
                raise ValueError("Success outcome must carry data and no failure")
        elif self.failure is None or self.data is not None:
            raise ValueError("Failure outcome must carry failure details and no data")

    @classmethod
    def success(cls, data: T) -> "Outcome[T]":
        """Create a success outcome."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(cls, failure: InfeasibleCard) -> "Outcome[T]":
        """Create a failure outcome."""
        return cls(outcome=OutcomeType.KNOWN_FAILURE, failure=failure)

    @property
    def ok(self) -> bool:
        return self.outcome == OutcomeType.SUCCESS

    def unwrap(self) -> T:
        """
        Return the data of a successful outcome.

        Raises:
            ContractViolationError: If the outcome is a failure
        """
        if self.data is None:
            assert self.failure is not None
            raise ContractViolationError(
                f"Cannot use a card that failed to build: {self.failure.message()}"
            )
        return self.data


# =============================================================================
# KNOWN ERRORS (collaborator boundary)
# =============================================================================


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def describe(self) -> str:
        """Single-line description for logs and terminal output."""
        parts = [self.message]
        if self.detail:
            parts.append(f"({self.detail})")
        if self.suggestion:
            parts.append(f"- {self.suggestion}")
        return " ".join(parts)


class ConfigCorruptError(KnownError):
    """
    Raised when the persisted game config cannot be parsed.

    Never surfaced to the user: the config store recovers by regenerating
    and persisting the defaults.
    """

    def __init__(self, path: str, detail: str | None = None):
        self.path = path
        super().__init__(
            kind=FailureKind.CONFIG_CORRUPT,
            message=f"Config file {path} is corrupt",
            detail=detail,
            suggestion="Defaults will be written in its place.",
        )


class MissingTemplateError(KnownError):
    """Raised when a deck template file cannot be found or read."""

    def __init__(self, path: str, detail: str | None = None):
        self.path = path
        super().__init__(
            kind=FailureKind.MISSING_TEMPLATE,
            message=f"No deck file present at {path}",
            detail=detail,
            suggestion="Deck name must match the folder containing the .deck file.",
        )


class UnparseableTemplateError(KnownError):
    """Raised when a deck template exists but does not match any template shape."""

    def __init__(self, path: str, detail: str | None = None):
        self.path = path
        super().__init__(
            kind=FailureKind.UNPARSEABLE_TEMPLATE,
            message=f"Could not parse deck file {path}",
            detail=detail,
            suggestion="Regenerate a template with the `template` command and refill it.",
        )


class CardIOError(KnownError):
    """Raised when a card, deck or template file cannot be written or cleared."""

    def __init__(self, path: str, action: str, detail: str | None = None):
        self.path = path
        self.action = action
        super().__init__(
            kind=FailureKind.IO_FAILURE,
            message=f"Could not {action} {path}",
            detail=detail,
            suggestion="Check that the directory exists and is writable.",
        )


# =============================================================================
# PROGRAMMING ERRORS
# =============================================================================


class ContractViolationError(RuntimeError):
    """
    Raised when the engine is driven out of order.

    This is a programming error, not a user error. It must never be caught
    and turned into a neutral value.
    """

    kind = FailureKind.CONTRACT_VIOLATION


class UnresolvedCardError(ContractViolationError):
    """Raised when a derived value is requested before range and effect are resolved."""

    kind = FailureKind.UNRESOLVED
