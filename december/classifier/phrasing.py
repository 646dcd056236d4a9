"""
Phrasing Detection
==================

Decides whether a message asks for a change, asks for an explanation,
or does both. Works clause by clause:

    "How does routing work? Then add a settings page."
     └─ conceptual ─────────┘ └─ imperative ────────┘   -> MIXED

A clause is imperative when it opens with a change verb, optionally after
a request prefix ("please", "can you", "I'd like you to", "let's").
"How do I add a route?" stays conceptual because the change verb is not
at the start of the clause.
"""

import re

from december.classifier.models import Phrasing

CHANGE_VERBS = frozenset({
    "create", "add", "build", "implement", "make", "write", "generate",
    "fix", "update", "change", "refactor", "remove", "delete", "rename",
    "convert", "integrate", "setup", "set", "install", "replace", "move",
    "develop", "improve", "optimize", "optimise", "migrate", "modify",
    "redesign", "restyle", "style", "extract", "split", "wire", "hook",
    "connect", "enable", "disable", "insert", "append", "code", "use",
})

INTERROGATIVES = frozenset({
    "how", "what", "what's", "whats", "why", "when", "where", "which", "who",
    "is", "are", "does", "do", "should", "difference",
})

EXPLAIN_OPENERS = re.compile(
    r"^(?:explain|describe|tell\s+me|walk\s+me\s+through|help\s+me\s+understand|understand|know|learn|"
    r"i\s+(?:don't|do\s+not)\s+understand|clarify\s+how|what\s+is\s+the\s+difference)\b"
)

# "I want", "I need", "I would like", "I'd like"
WANT = r"i(?:\s+(?:want|need|would\s+like)|['’]d\s+like)"

REQUEST_PREFIX = re.compile(
    r"^(?:please\s+|kindly\s+|"
    r"(?:can|could|would|will)\s+you\s+(?:please\s+)?|"
    rf"{WANT}\s+(?:you\s+)?to\s+|"
    r"let's\s+|let’s\s+|lets\s+|help\s+me\s+|go\s+ahead\s+and\s+|now\s+|also\s+|and\s+|then\s+)+"
)

# "I want a dark mode toggle" asks for a change without a verb
DESIRE_STATEMENT = re.compile(rf"^{WANT}\b")

CLAUSE_SPLIT = re.compile(r"(?<=[.!?;])\s+|\n+|,?\s+\bthen\b\s+")


def split_clauses(text: str) -> list[str]:
    """Split text into trimmed, non-empty clauses."""
    return [c.strip() for c in CLAUSE_SPLIT.split(text) if c and c.strip()]


def clause_end(text: str, position: int) -> int:
    """Offset where the clause containing position ends."""
    boundary = CLAUSE_SPLIT.search(text, position)
    return boundary.start() if boundary else len(text)


def is_imperative_clause(clause: str) -> bool:
    lowered = clause.lower().strip(" \t\"'`*-")
    if DESIRE_STATEMENT.match(lowered) and not REQUEST_PREFIX.match(lowered):
        return True

    stripped = REQUEST_PREFIX.sub("", lowered, count=1)
    first = re.match(r"[a-z']+", stripped)
    return bool(first and first.group(0) in CHANGE_VERBS)


def is_conceptual_clause(clause: str) -> bool:
    lowered = clause.lower().strip(" \t\"'`*-")
    # "Can you explain ...", "I want to understand ..."
    lowered = REQUEST_PREFIX.sub("", lowered, count=1)
    if EXPLAIN_OPENERS.match(lowered):
        return True

    first = re.match(r"[a-z'’]+", lowered)
    if first and first.group(0) in INTERROGATIVES:
        return True
    return lowered.endswith("?")


def detect_phrasing(text: str) -> Phrasing:
    """
    Classify the phrasing of a message.

    Returns:
        IMPERATIVE if only change clauses were found, CONCEPTUAL if only
        question/explanation clauses, MIXED if both, NEUTRAL if neither
    """
    imperative = conceptual = False

    for clause in split_clauses(text):
        if is_imperative_clause(clause):
            imperative = True
        elif is_conceptual_clause(clause):
            conceptual = True

    if imperative and conceptual:
        return Phrasing.MIXED
    if imperative:
        return Phrasing.IMPERATIVE
    if conceptual:
        return Phrasing.CONCEPTUAL
    return Phrasing.NEUTRAL
