"""
Output Tag Grammar
==================

December does not call functions to change files. It writes tags into its
reply, and the host reads them back:

    <dec-code>
      <dec-write file_path="src/App.tsx">
      ...complete file contents...
      </dec-write>
      <dec-rename original_file_path="a.tsx" new_file_path="b.tsx"></dec-rename>
      <dec-delete file_path="old.css"></dec-delete>
      <dec-add-dependency>zod react-hook-form</dec-add-dependency>
    </dec-code>

Rules:
1. At most one <dec-code> block per reply
2. Every file operation is nested inside it
3. A write carries a path and the complete file contents
4. Every imported path is written in the same block or already exists

One more tag, <dec-read-examples topics="...">, sits outside the block and
asks the host to load example documents before the final answer.

This module provides:
- OutputTag: Definition of one tag
- TagRegistry: Registry of all tags, rendered into the system prompt
- tag_registry: The global registry with the built-in tags
"""

from dataclasses import dataclass

from december.utils.logger import Logger

logger = Logger("Tools")

CONTAINER = "container"
OPERATION = "operation"
REQUEST = "request"


@dataclass(frozen=True)
class OutputTag:
    """
    Definition of one output tag.

    Attributes:
        name: The tag name (e.g., "dec-write")
        description: What the tag does, shown to the model
        scope: "container", "operation" (must sit inside the container) or "request"
        attributes: Required attribute names
        body: What goes between the tags, or "" for an empty body
    """
    name: str
    description: str
    scope: str
    attributes: tuple[str, ...] = ()
    body: str = ""

    def example(self) -> str:
        attrs = "".join(f' {attr}="..."' for attr in self.attributes)
        return f"<{self.name}{attrs}>{self.body}</{self.name}>"

    def to_prompt(self) -> str:
        """Format as one line of the grammar shown to the model."""
        return f"- {self.example()}: {self.description}"


class TagRegistry:
    """
    Registry of output tags.

    Example:
        registry = TagRegistry()
        registry.register(OutputTag("dec-code", "Aggregated block", CONTAINER))

        registry.get("dec-code")
        registry.operation_names()   # tags that must be nested
        registry.describe()          # grammar text for the system prompt
    """

    def __init__(self):
        self._tags: dict[str, OutputTag] = {}

    def register(self, tag: OutputTag) -> None:
        """
        Register a tag.

        Raises:
            ValueError: If a tag with this name already exists
        """
        if tag.name in self._tags:
            raise ValueError(f"Tag '{tag.name}' is already registered")

        self._tags[tag.name] = tag
        logger.debug(f"Registered tag: {tag.name}")

    def get(self, name: str) -> OutputTag | None:
        return self._tags.get(name)

    def get_all(self) -> list[OutputTag]:
        return list(self._tags.values())

    def list_names(self) -> list[str]:
        return list(self._tags.keys())

    def names_in_scope(self, scope: str) -> list[str]:
        return [tag.name for tag in self._tags.values() if tag.scope == scope]

    def operation_names(self) -> list[str]:
        """Names of tags that must be nested in the container."""
        return self.names_in_scope(OPERATION)

    def describe(self) -> str:
        """
        Render the grammar for the system prompt.

        Returns:
            Multi-line text listing every tag and the nesting rules
        """
        lines = ["## Output Tags"]
        for scope, title in (
            (CONTAINER, "Container (at most one per reply)"),
            (OPERATION, "File operations (only inside the container)"),
            (REQUEST, "Requests to the host (outside the container)"),
        ):
            tags = [tag for tag in self.get_all() if tag.scope == scope]
            if not tags:
                continue
            lines.append(f"### {title}")
            lines.extend(tag.to_prompt() for tag in tags)
        return "\n".join(lines)


def _builtin_tags() -> list[OutputTag]:
    return [
        OutputTag(
            name="dec-code",
            description="The single aggregated block holding every file operation of this reply.",
            scope=CONTAINER,
            body="...operations...",
        ),
        OutputTag(
            name="dec-write",
            description="Create or overwrite a file. The body is the complete file, never an excerpt.",
            scope=OPERATION,
            attributes=("file_path",),
            body="...complete file contents...",
        ),
        OutputTag(
            name="dec-rename",
            description="Rename or move a file.",
            scope=OPERATION,
            attributes=("original_file_path", "new_file_path"),
        ),
        OutputTag(
            name="dec-delete",
            description="Delete a file.",
            scope=OPERATION,
            attributes=("file_path",),
        ),
        OutputTag(
            name="dec-add-dependency",
            description="Install packages; the body is a space-separated package list.",
            scope=OPERATION,
            body="package-a package-b",
        ),
        OutputTag(
            name="dec-read-examples",
            description="Ask for example documents by topic before answering; "
                        "send nothing else in that reply.",
            scope=REQUEST,
            attributes=("topics",),
        ),
    ]


# Global tag registry instance
tag_registry = TagRegistry()
for _tag in _builtin_tags():
    tag_registry.register(_tag)


__all__ = [
    "OutputTag",
    "TagRegistry",
    "tag_registry",
    "CONTAINER",
    "OPERATION",
    "REQUEST",
]
