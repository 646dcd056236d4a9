"""
Requirement Extraction
======================

Turns free text into tagged InformationItems and finds the Critical gaps
the classifier has to ask about.

Matching is driven entirely by the taxonomy tables. When two keyword
matches overlap, the longer phrase wins ("contact form" beats "form",
"log in" beats "log").
"""

from dataclasses import dataclass

from december.classifier.models import InformationItem, RequirementCategory
from december.classifier.phrasing import clause_end
from december.classifier.taxonomy import (
    AMBIGUOUS_TERMS,
    CATEGORY_KEYWORDS,
    REQUIRED_DETAILS,
    AmbiguousTerm,
    RequiredDetail,
    TermOption,
    keyword_pattern,
    priority_of,
)


@dataclass(frozen=True)
class _Match:
    start: int
    end: int
    phrase: str
    category: RequirementCategory

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "_Match") -> bool:
        return self.start < other.end and other.start < self.end


# Compiled once at import
_KEYWORD_PATTERNS = [
    (keyword_pattern(keyword), keyword, category)
    for category, keywords in CATEGORY_KEYWORDS.items()
    for keyword in keywords
]


def extract_items(text: str) -> tuple[InformationItem, ...]:
    """
    Tag requirement phrases in text.

    Returns:
        Items ordered by position, de-duplicated by (category, phrase)
    """
    candidates = [
        _Match(m.start(), m.end(), keyword, category)
        for pattern, keyword, category in _KEYWORD_PATTERNS
        for m in pattern.finditer(text)
    ]

    # Longest first, then leftmost
    candidates.sort(key=lambda m: (-m.length, m.start))
    accepted: list[_Match] = []
    for candidate in candidates:
        if not any(candidate.overlaps(kept) for kept in accepted):
            accepted.append(candidate)

    accepted.sort(key=lambda m: m.start)

    items = []
    seen = set()
    for match in accepted:
        key = (match.category, match.phrase)
        if key in seen:
            continue
        seen.add(key)
        items.append(InformationItem(
            text=match.phrase,
            category=match.category,
            priority=priority_of(match.category),
            position=match.start,
        ))

    return tuple(items)


def mentioned_categories(items: tuple[InformationItem, ...]) -> set[RequirementCategory]:
    return {item.category for item in items}


# Items that start a new object; a required detail after one of them belongs to it
_OBJECT_CATEGORIES = (RequirementCategory.UI_REQUIREMENTS, RequirementCategory.FUNCTIONALITY)
_FIELD_LIKE = frozenset({"input", "dropdown"})


def _span(text: str, item: InformationItem) -> tuple[int, int]:
    match = keyword_pattern(item.text).match(text, item.position)
    return (item.position, match.end() if match else item.position + len(item.text))


def _shadowed(start: int, end: int, spans: list[tuple[int, int]]) -> bool:
    """True when [start, end) lies inside a strictly longer span."""
    return any(s <= start and end <= e and e - s > end - start for s, e in spans)


def resolve_option(
    term: AmbiguousTerm,
    text: str,
    items: tuple[InformationItem, ...] = ()
) -> TermOption | None:
    """
    Return the first option whose keywords appear in text, if any.

    Hits inside a longer extracted phrase ("cookie consent") do not count.
    """
    spans = [_span(text, item) for item in items]
    for option in term.options:
        for keyword in option.keywords:
            for match in keyword_pattern(keyword).finditer(text):
                if not _shadowed(match.start(), match.end(), spans):
                    return option
    return None


def _first_position(text: str, keywords: tuple[str, ...]) -> int:
    positions = []
    for keyword in keywords:
        match = keyword_pattern(keyword).search(text)
        if match:
            positions.append(match.start())
    return min(positions) if positions else -1


def find_ambiguities(
    text: str,
    items: tuple[InformationItem, ...] = ()
) -> list[tuple[int, AmbiguousTerm]]:
    """
    Find ambiguous terms that are triggered but not resolved.

    Args:
        text: The analysed text
        items: Items extracted from the same text

    Returns:
        (position, term) pairs in text order
    """
    found = []
    for term in AMBIGUOUS_TERMS:
        position = _first_position(text, term.triggers)
        if position < 0:
            continue
        if resolve_option(term, text, items) is None:
            found.append((position, term))
    found.sort(key=lambda pair: pair[0])
    return found


def _segment_end(text: str, start: int, items: tuple[InformationItem, ...]) -> int:
    """End of the stretch of text that describes the subject at start."""
    end = clause_end(text, start)
    for item in items:
        if start < item.position < end and item.category in _OBJECT_CATEGORIES \
                and item.text not in _FIELD_LIKE:
            end = item.position
    return end


def find_missing_details(
    text: str,
    items: tuple[InformationItem, ...] = (),
    answers: tuple[str, ...] = ()
) -> list[tuple[int, RequiredDetail]]:
    """
    Find subjects that are present without the detail they need.

    Args:
        text: The analysed text
        items: Items extracted from the same text
        answers: User replies to earlier clarifying questions

    Returns:
        (position, detail) pairs in text order
    """
    missing = []
    for required in REQUIRED_DETAILS:
        answer = required.answer or required.detail
        if any(answer.search(reply) for reply in answers):
            continue

        exempt = [m.span() for m in required.exempt.finditer(text)] if required.exempt else []
        for subject in required.subject.finditer(text):
            if any(s <= subject.start() and subject.end() <= e for s, e in exempt):
                continue
            segment = text[subject.start():_segment_end(text, subject.end(), items)]
            if not required.detail.search(segment):
                missing.append((subject.start(), required))
                break

    missing.sort(key=lambda pair: pair[0])
    return missing
