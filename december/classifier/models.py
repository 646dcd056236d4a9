"""
Classifier Data Model
=====================

Immutable value types passed into and out of the request classifier.

    Request ──► RequestClassifier ──► ClassificationResult
                                          ├── disposition
                                          ├── items (InformationItem)
                                          ├── questions (ClarifyingQuestion)
                                          └── assumptions (Assumption)

Nothing here persists across requests: every classification produces a
fresh result.
"""

from dataclasses import dataclass, field
from enum import Enum


class Disposition(str, Enum):
    """What the assistant does with a request."""
    IMPLEMENT = "implement"
    CLARIFY = "clarify"
    EXPLAIN = "explain"


class Priority(str, Enum):
    """How much a missing piece of information blocks implementation."""
    CRITICAL = "critical"            # Block and ask
    IMPORTANT = "important"          # Assume and state
    SUPPLEMENTARY = "supplementary"  # Default silently


class RequirementCategory(str, Enum):
    """Requirement kinds; the priority of each is fixed in the taxonomy."""
    FUNCTIONALITY = "functionality"
    UI_REQUIREMENTS = "ui_requirements"
    INTEGRATION_POINTS = "integration_points"
    DATA = "data"
    SECURITY = "security"
    PRIVACY = "privacy"
    STYLING = "styling"
    PERFORMANCE = "performance"
    ACCESSIBILITY = "accessibility"
    VALIDATION = "validation"
    ERROR_HANDLING = "error_handling"
    ADVANCED_FEATURES = "advanced_features"
    EXTENSIBILITY = "extensibility"
    LOGGING_ANALYTICS = "logging_analytics"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class Phrasing(str, Enum):
    """Whether a message asks for a change, an explanation, or both."""
    IMPERATIVE = "imperative"
    CONCEPTUAL = "conceptual"
    MIXED = "mixed"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class ConversationTurn:
    """
    One prior message in the conversation.

    Attributes:
        role: "user" or "assistant"
        content: The message text
        disposition: Set on assistant turns to the disposition they answered with
        asked_terms: Terms an assistant Clarify turn asked about
    """
    role: str
    content: str
    disposition: Disposition | None = None
    asked_terms: tuple[str, ...] = ()

    @property
    def is_clarification(self) -> bool:
        return self.role == "assistant" and self.disposition == Disposition.CLARIFY


@dataclass(frozen=True)
class Request:
    """An incoming utterance plus the turns that came before it."""
    utterance: str
    history: tuple[ConversationTurn, ...] = ()

    def __post_init__(self):
        # Accept any sequence but always store a tuple
        if not isinstance(self.history, tuple):
            object.__setattr__(self, "history", tuple(self.history))


@dataclass(frozen=True)
class InformationItem:
    """
    A requirement found in a request.

    Attributes:
        text: The matched phrase as it appears (lower-cased)
        category: The requirement category
        priority: Derived from the category via the taxonomy
        position: Character offset in the analysed text
    """
    text: str
    category: RequirementCategory
    priority: Priority
    position: int = 0


@dataclass(frozen=True)
class ClarifyingQuestion:
    """
    A targeted question for one missing or ambiguous Critical item.

    Attributes:
        term: The ambiguous or missing term this question is about
        category: The Critical category of the term
        question: The question text (always names the term)
        rationale: Why the answer changes the implementation
        options: Forced-choice answers; empty for open questions
    """
    term: str
    category: RequirementCategory
    question: str
    rationale: str
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class Assumption:
    """A default the assistant states before implementing."""
    category: RequirementCategory
    statement: str

    @property
    def label(self) -> str:
        return f"Assumption ({self.category.label}): {self.statement}"


@dataclass(frozen=True)
class ClassificationResult:
    """
    Output of the request classifier.

    Attributes:
        disposition: Implement, Clarify or Explain
        items: Requirements extracted from the analysed text
        questions: Non-empty exactly when the disposition is Clarify
        assumptions: Labeled defaults to state when implementing
        silent_defaults: Supplementary defaults applied without mention
        alternatives: Optional after-the-fact suggestions
        phrasing: Detected phrasing of the request
        reasons: Machine-readable reason codes
        analysed: The text that was analysed (the clarification chain plus
            the current utterance)
    """
    disposition: Disposition
    items: tuple[InformationItem, ...] = ()
    questions: tuple[ClarifyingQuestion, ...] = ()
    assumptions: tuple[Assumption, ...] = ()
    silent_defaults: tuple[str, ...] = ()
    alternatives: tuple[str, ...] = ()
    phrasing: Phrasing = Phrasing.NEUTRAL
    reasons: tuple[str, ...] = field(default_factory=tuple)
    analysed: str = ""

    def __post_init__(self):
        if self.disposition == Disposition.CLARIFY and not self.questions:
            raise ValueError("A Clarify result needs at least one question")
        if self.disposition != Disposition.CLARIFY and self.questions:
            raise ValueError(f"A {self.disposition.value} result cannot carry questions")
        if self.disposition == Disposition.EXPLAIN and self.assumptions:
            raise ValueError("An Explain result cannot carry assumptions")

    @property
    def asked_terms(self) -> tuple[str, ...]:
        return tuple(q.term for q in self.questions)

    @property
    def requires_code_block(self) -> bool:
        return self.disposition == Disposition.IMPLEMENT
