"""
Example Library
===============

A small catalog of example documents that can be pulled into the model's
context. Lookup is a keyword match against a fixed catalog: no embeddings,
no ranking beyond catalog order.

Documents reach the context in two ways:
1. Proactively: the user's message mentions a catalog topic or keyword
2. On request: the model replies with <dec-read-examples topics="...">

Usage:
    from december.library import ExampleLibrary

    library = ExampleLibrary(Path("docs"), max_examples=3)

    entries = library.match("Refactor the settings page state")
    documents = library.load(entries)
    context = library.format_for_context(documents)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from december.library.catalog import CATALOG, ExampleEntry
from december.utils.logger import Logger

logger = Logger("Library")


@dataclass(frozen=True)
class ExampleDocument:
    """A loaded example document."""
    topic: str
    filename: str
    content: str


class ExampleLibrary:
    """
    Keyword lookup over the example catalog.

    Attributes:
        directory: Where the example files live
        max_examples: Upper bound on documents returned per lookup
        catalog: Entries in priority order
    """

    def __init__(
        self,
        directory: Path,
        max_examples: int = 3,
        catalog: tuple[ExampleEntry, ...] = CATALOG
    ):
        self.directory = Path(directory)
        self.max_examples = max_examples
        self.catalog = catalog

    def topics(self) -> list[str]:
        return [entry.topic for entry in self.catalog]

    def match(self, text: str) -> list[ExampleEntry]:
        """
        Find entries whose topic or keywords occur in text.

        Matching is a case-insensitive substring test. Entries come back in
        catalog order, capped at max_examples.
        """
        lowered = text.lower()
        matched = [entry for entry in self.catalog if entry.matches(lowered)]

        if matched:
            logger.debug("Matched examples", {"topics": [e.topic for e in matched]})
        return matched[:self.max_examples]

    def find(self, topics: Iterable[str]) -> list[ExampleEntry]:
        """
        Resolve explicit topic names, as sent in a <dec-read-examples> tag.

        Unknown topics are logged and skipped.
        """
        by_topic = {entry.topic.lower(): entry for entry in self.catalog}
        found: list[ExampleEntry] = []

        for topic in topics:
            entry = by_topic.get(topic.strip().lower())
            if entry is None:
                logger.warning(f"Unknown example topic: {topic}")
                continue
            if entry not in found:
                found.append(entry)

        return found[:self.max_examples]

    def load(self, entries: Iterable[ExampleEntry]) -> list[ExampleDocument]:
        """
        Read the documents for entries.

        Missing or unreadable files are logged and skipped.
        """
        documents = []
        for entry in entries:
            path = self.directory / entry.filename
            try:
                content = path.read_text(encoding="utf-8")
            except OSError as e:
                logger.warning(f"Could not read example {entry.filename}", {"error": str(e)})
                continue
            documents.append(ExampleDocument(entry.topic, entry.filename, content.strip()))

        logger.debug(f"Loaded {len(documents)} example document(s)")
        return documents

    def format_for_context(self, documents: list[ExampleDocument]) -> str:
        """Format documents as a section of the system message."""
        if not documents:
            return ""

        lines = ["## Examples"]
        for doc in documents:
            lines.append(f"### {doc.topic} ({doc.filename})")
            lines.append(doc.content)
        return "\n\n".join(lines)


__all__ = ["ExampleLibrary", "ExampleDocument", "ExampleEntry", "CATALOG"]
