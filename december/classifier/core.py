"""
Request Classifier
==================

Maps a request to one of three dispositions:

    Request
       │
       ▼
    Phrasing? ── conceptual ──────────────────────────► EXPLAIN
       │  mixed ── mode not asked yet ────────────────► CLARIFY (explain or implement?)
       ▼
    Extract requirements (Critical / Important / Supplementary)
       │
       ▼
    Critical gaps? ── yes, not asked before, rounds left ► CLARIFY (one question per gap)
       │  no (or asked already / out of rounds: assume first option)
       ▼
    IMPLEMENT  + labeled Important assumptions
               + silent Supplementary defaults

An answer to a clarification is merged with the request it answers: the
user turns of the trailing Clarify/answer chain are analysed together with
the current utterance. A gap is asked about at most once, and no more than
`max_clarification_rounds` Clarify turns happen in a row.

The classifier keeps no state between calls; the same Request always gets
the same result.
"""

from dataclasses import dataclass

from december.classifier.extractor import (
    extract_items,
    find_ambiguities,
    find_missing_details,
    mentioned_categories,
)
from december.classifier.models import (
    Assumption,
    ClarifyingQuestion,
    ClassificationResult,
    ConversationTurn,
    Disposition,
    Phrasing,
    Priority,
    Request,
    RequirementCategory,
)
from december.classifier.phrasing import detect_phrasing
from december.classifier.taxonomy import (
    ALTERNATIVES,
    FUNCTIONALITY_QUESTION,
    MODE_QUESTION,
    SILENT_DEFAULTS,
    WEB_DEFAULTS,
    categories_for,
)
from december.utils.logger import Logger

logger = Logger("Classifier")


@dataclass(frozen=True)
class ClarificationChain:
    """
    The trailing run of Clarify/answer pairs before the current utterance.

    Attributes:
        user_texts: Earlier user turns in the chain, oldest first
        rounds: Number of Clarify turns in the chain
        asked: Every term already asked about in the chain
    """
    user_texts: tuple[str, ...] = ()
    rounds: int = 0
    asked: frozenset[str] = frozenset()

    @classmethod
    def from_history(cls, history: tuple[ConversationTurn, ...]) -> "ClarificationChain":
        texts: list[str] = []
        asked: set[str] = set()
        rounds = 0

        index = len(history) - 1
        while index >= 0 and history[index].is_clarification:
            rounds += 1
            asked.update(history[index].asked_terms)
            index -= 1
            if index >= 0 and history[index].role == "user":
                texts.insert(0, history[index].content)
                index -= 1

        return cls(user_texts=tuple(texts), rounds=rounds, asked=frozenset(asked))


@dataclass(frozen=True)
class _Gap:
    """A Critical gap: the question to ask, or the assumption if we may not ask."""
    position: int
    question: ClarifyingQuestion
    fallback: Assumption
    reason: str


class RequestClassifier:
    """
    Stateless request classifier.

    Example:
        classifier = RequestClassifier(max_clarification_rounds=2)

        result = classifier.classify(Request("Add authentication to the app"))
        result.disposition        # Disposition.CLARIFY
        result.questions[0].term  # "authentication"
    """

    def __init__(self, max_clarification_rounds: int = 2, state_assumptions: bool = True):
        """
        Initialize the classifier.

        Args:
            max_clarification_rounds: Clarify turns allowed in a row before
                remaining gaps are resolved by assumption
            state_assumptions: Whether Important-tier defaults are returned
                as labeled assumptions

        Raises:
            ValueError: If max_clarification_rounds is negative
        """
        if max_clarification_rounds < 0:
            raise ValueError("max_clarification_rounds must be >= 0")
        self.max_clarification_rounds = max_clarification_rounds
        self.state_assumptions = state_assumptions

    def classify(self, request: Request) -> ClassificationResult:
        """
        Classify a request.

        Args:
            request: The utterance and its conversation history

        Returns:
            ClassificationResult with exactly one disposition

        Raises:
            ValueError: If the utterance is empty
        """
        utterance = request.utterance.strip()
        if not utterance:
            raise ValueError("Cannot classify an empty utterance")

        chain = ClarificationChain.from_history(request.history)
        analysed = "\n".join(chain.user_texts + (utterance,))
        # Replies to earlier questions; the first chain text is the request itself
        answers = chain.user_texts[1:] + (utterance,) if chain.user_texts else ()
        exhausted = chain.rounds >= self.max_clarification_rounds

        phrasing = detect_phrasing(utterance)
        if phrasing == Phrasing.NEUTRAL and chain.user_texts:
            phrasing = detect_phrasing(analysed)

        logger.debug("Classifying request", {
            "phrasing": phrasing.value,
            "chain_rounds": chain.rounds,
            "asked": sorted(chain.asked),
        })

        if phrasing == Phrasing.CONCEPTUAL:
            return ClassificationResult(
                disposition=Disposition.EXPLAIN,
                items=extract_items(utterance),
                phrasing=phrasing,
                reasons=("conceptual",),
                analysed=analysed,
            )

        reasons: list[str] = []
        assumptions: list[Assumption] = []

        if phrasing == Phrasing.MIXED:
            reasons.append("mixed_phrasing")
            mode_term, question, rationale, options = MODE_QUESTION
            if mode_term not in chain.asked and not exhausted:
                return ClassificationResult(
                    disposition=Disposition.CLARIFY,
                    items=extract_items(analysed),
                    questions=(ClarifyingQuestion(
                        term=mode_term,
                        category=RequirementCategory.FUNCTIONALITY,
                        question=question,
                        rationale=rationale,
                        options=options,
                    ),),
                    phrasing=phrasing,
                    reasons=tuple(reasons),
                    analysed=analysed,
                )
            assumptions.append(Assumption(
                RequirementCategory.FUNCTIONALITY,
                "The message also asks how things work; the change is implemented "
                "and the approach is explained briefly.",
            ))

        items = extract_items(analysed)

        questions: list[ClarifyingQuestion] = []
        for gap in self._find_gaps(analysed, items, answers):
            reasons.append(gap.reason)
            if gap.question.term in chain.asked or exhausted:
                assumptions.append(gap.fallback)
            else:
                questions.append(gap.question)

        if exhausted and assumptions:
            reasons.append("clarification_limit")

        if questions:
            logger.debug(f"Clarify: {len(questions)} question(s)", {
                "terms": [q.term for q in questions],
            })
            return ClassificationResult(
                disposition=Disposition.CLARIFY,
                items=items,
                questions=tuple(questions),
                phrasing=phrasing,
                reasons=tuple(reasons),
                analysed=analysed,
            )

        mentioned = mentioned_categories(items)

        if self.state_assumptions:
            for category in categories_for(Priority.IMPORTANT):
                if category not in mentioned:
                    assumptions.append(Assumption(category, WEB_DEFAULTS[category]))

        unmentioned = [c for c in categories_for(Priority.SUPPLEMENTARY) if c not in mentioned]

        reasons.append("requirements_complete")
        logger.debug("Implement", {"items": len(items), "assumptions": len(assumptions)})

        return ClassificationResult(
            disposition=Disposition.IMPLEMENT,
            items=items,
            assumptions=tuple(assumptions),
            silent_defaults=tuple(SILENT_DEFAULTS[c] for c in unmentioned),
            alternatives=tuple(ALTERNATIVES[c] for c in unmentioned),
            phrasing=phrasing,
            reasons=tuple(reasons),
            analysed=analysed,
        )

    def _find_gaps(self, text: str, items, answers: tuple[str, ...]) -> list[_Gap]:
        """Collect Critical gaps in text order."""
        gaps = []

        for position, term in find_ambiguities(text, items):
            first = term.options[0].label
            gaps.append(_Gap(
                position=position,
                question=ClarifyingQuestion(
                    term=term.term,
                    category=term.category,
                    question=term.question,
                    rationale=term.rationale,
                    options=tuple(option.label for option in term.options),
                ),
                fallback=Assumption(term.category, f"{term.term}: {first}."),
                reason=f"ambiguous:{term.term}",
            ))

        for position, detail in find_missing_details(text, items, answers):
            if detail.options:
                statement = f"{detail.term}: {detail.options[0]}."
            else:
                statement = f"{detail.term}: a clearly marked placeholder that is easy to replace."
            gaps.append(_Gap(
                position=position,
                question=ClarifyingQuestion(
                    term=detail.term,
                    category=detail.category,
                    question=detail.question,
                    rationale=detail.rationale,
                    options=detail.options,
                ),
                fallback=Assumption(detail.category, statement),
                reason=f"missing:{detail.term}",
            ))

        if not items:
            term, question, rationale = FUNCTIONALITY_QUESTION
            gaps.append(_Gap(
                position=0,
                question=ClarifyingQuestion(
                    term=term,
                    category=RequirementCategory.FUNCTIONALITY,
                    question=question,
                    rationale=rationale,
                ),
                fallback=Assumption(
                    RequirementCategory.FUNCTIONALITY,
                    "The request is implemented literally, with no additional features.",
                ),
                reason="no_functionality",
            ))

        gaps.sort(key=lambda gap: gap.position)
        return gaps
