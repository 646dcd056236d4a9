"""
Request Classifier
==================

Decides what to do with each incoming request:

- IMPLEMENT: everything Critical is known; build it
- CLARIFY: a Critical item is missing or ambiguous; ask
- EXPLAIN: the user asked how something works; answer without code

This module provides:
- RequestClassifier: The stateless classifier
- Request / ConversationTurn: Classifier input
- ClassificationResult and friends: Classifier output
"""

from december.classifier.core import RequestClassifier
from december.classifier.models import (
    Assumption,
    ClarifyingQuestion,
    ClassificationResult,
    ConversationTurn,
    Disposition,
    InformationItem,
    Phrasing,
    Priority,
    Request,
    RequirementCategory,
)

__all__ = [
    "RequestClassifier",
    "Assumption",
    "ClarifyingQuestion",
    "ClassificationResult",
    "ConversationTurn",
    "Disposition",
    "InformationItem",
    "Phrasing",
    "Priority",
    "Request",
    "RequirementCategory",
]
