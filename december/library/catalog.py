"""
Example Catalog
===============

Fixed topic -> document table. Order matters: when more entries match than
the library may return, the earlier ones win.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExampleEntry:
    """
    One catalog entry.

    Attributes:
        topic: Display name, also accepted in <dec-read-examples>
        keywords: Lower-case substrings that select this entry
        filename: Document name inside the examples directory
    """
    topic: str
    keywords: tuple[str, ...]
    filename: str

    def matches(self, lowered_text: str) -> bool:
        if self.topic.lower() in lowered_text:
            return True
        return any(keyword in lowered_text for keyword in self.keywords)


CATALOG: tuple[ExampleEntry, ...] = (
    ExampleEntry(
        topic="refactoring",
        keywords=("refactor", "clean up", "extract", "split into", "reorganize"),
        filename="refactoring.md",
    ),
    ExampleEntry(
        topic="state management",
        keywords=("state", "context provider", "zustand", "redux", "store"),
        filename="state-management.md",
    ),
    ExampleEntry(
        topic="UI implementation",
        keywords=("component", "layout", "page", "navbar", "modal", "button"),
        filename="ui-implementation.md",
    ),
    ExampleEntry(
        topic="forms",
        keywords=("form", "input", "field", "validation"),
        filename="forms.md",
    ),
    ExampleEntry(
        topic="authentication",
        keywords=("auth", "login", "sign in", "sign up", "session", "jwt"),
        filename="authentication.md",
    ),
    ExampleEntry(
        topic="API integration",
        keywords=("api", "fetch", "endpoint", "integrate", "webhook"),
        filename="api-integration.md",
    ),
    ExampleEntry(
        topic="routing",
        keywords=("route", "router", "navigation", "link to"),
        filename="routing.md",
    ),
    ExampleEntry(
        topic="error handling",
        keywords=("error", "exception", "fallback", "retry"),
        filename="error-handling.md",
    ),
)
