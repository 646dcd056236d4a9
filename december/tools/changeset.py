"""
Change-Sets
===========

Typed view of the aggregated <dec-code> block.

Rendering goes from operations to text:

    changeset = ChangeSet([WriteFile("src/App.tsx", "export default ...")])
    text = changeset.render()

Parsing goes from a model reply back to operations:

    parsed = parse_response(reply)
    parsed.blocks              # one ChangeSet per <dec-code> block
    parsed.stray_operations    # operation tags found outside any block
    parsed.example_requests    # topics asked for with <dec-read-examples>
    parsed.prose               # the reply with blocks removed
"""

import re
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class WriteFile:
    """Create or overwrite a file with complete contents."""
    path: str
    content: str

    def render(self) -> str:
        return f'<dec-write file_path="{self.path}">\n{self.content}\n</dec-write>'


@dataclass(frozen=True)
class RenameFile:
    source: str
    target: str

    def render(self) -> str:
        return (
            f'<dec-rename original_file_path="{self.source}" '
            f'new_file_path="{self.target}"></dec-rename>'
        )


@dataclass(frozen=True)
class DeleteFile:
    path: str

    def render(self) -> str:
        return f'<dec-delete file_path="{self.path}"></dec-delete>'


@dataclass(frozen=True)
class AddDependency:
    packages: tuple[str, ...]

    def render(self) -> str:
        return f"<dec-add-dependency>{' '.join(self.packages)}</dec-add-dependency>"


Operation = Union[WriteFile, RenameFile, DeleteFile, AddDependency]


@dataclass
class ChangeSet:
    """
    The ordered file operations of one reply.

    Attributes:
        operations: Operations in the order they appear
    """
    operations: list[Operation] = field(default_factory=list)

    def add(self, operation: Operation) -> "ChangeSet":
        self.operations.append(operation)
        return self

    def writes(self) -> list[WriteFile]:
        return [op for op in self.operations if isinstance(op, WriteFile)]

    def written_paths(self) -> list[str]:
        return [op.path for op in self.writes()]

    def dependencies(self) -> list[str]:
        packages: list[str] = []
        for op in self.operations:
            if isinstance(op, AddDependency):
                packages.extend(op.packages)
        return packages

    def is_empty(self) -> bool:
        return not self.operations

    def render(self) -> str:
        """Render every operation nested in a single <dec-code> block."""
        if self.is_empty():
            return "<dec-code>\n</dec-code>"
        body = "\n".join(op.render() for op in self.operations)
        return f"<dec-code>\n{body}\n</dec-code>"


@dataclass
class ParsedResponse:
    """
    A model reply split into its parts.

    Attributes:
        blocks: One ChangeSet per closed <dec-code> block
        stray_operations: Operation tags that are not inside any block
        example_requests: Topics requested with <dec-read-examples>
        prose: The reply text with blocks and request tags removed
        unclosed_blocks: Number of <dec-code> tags that were never closed
    """
    blocks: list[ChangeSet] = field(default_factory=list)
    stray_operations: list[Operation] = field(default_factory=list)
    example_requests: list[str] = field(default_factory=list)
    prose: str = ""
    unclosed_blocks: int = 0

    @property
    def changeset(self) -> ChangeSet | None:
        """The single block, or None when there is not exactly one."""
        return self.blocks[0] if len(self.blocks) == 1 else None

    def has_code(self) -> bool:
        return bool(self.blocks or self.stray_operations or self.unclosed_blocks)


# ==============================================================================
# Parsing
# ==============================================================================

BLOCK_RE = re.compile(r"<dec-code\s*>(.*?)</dec-code\s*>", re.DOTALL)
BLOCK_OPEN_RE = re.compile(r"<dec-code\s*>")
WRITE_RE = re.compile(r"<dec-write\b(?P<attrs>[^>]*)>(?P<body>.*?)</dec-write\s*>", re.DOTALL)
RENAME_RE = re.compile(r"<dec-rename\b(?P<attrs>[^>]*?)\s*(?:/>|>\s*</dec-rename\s*>)")
DELETE_RE = re.compile(r"<dec-delete\b(?P<attrs>[^>]*?)\s*(?:/>|>\s*</dec-delete\s*>)")
DEPENDENCY_RE = re.compile(r"<dec-add-dependency\b[^>]*>(?P<body>.*?)</dec-add-dependency\s*>", re.DOTALL)
EXAMPLES_RE = re.compile(r"<dec-read-examples\b(?P<attrs>[^>]*?)\s*(?:/>|>\s*</dec-read-examples\s*>)")
ATTR_RE = re.compile(r'([\w-]+)\s*=\s*"([^"]*)"')
FENCE_RE = re.compile(r"^```[\w+-]*\n(.*?)\n?```$", re.DOTALL)

_OPERATION_PATTERNS = (WRITE_RE, RENAME_RE, DELETE_RE, DEPENDENCY_RE)


def _attrs(raw: str) -> dict[str, str]:
    return {name: value.strip() for name, value in ATTR_RE.findall(raw)}


def _clean_content(body: str) -> str:
    content = body.strip("\n")
    fenced = FENCE_RE.match(content.strip())
    if fenced:
        content = fenced.group(1)
    return content


def _operation_from_match(pattern: re.Pattern, match: re.Match) -> Operation:
    if pattern is WRITE_RE:
        attrs = _attrs(match.group("attrs"))
        return WriteFile(path=attrs.get("file_path", ""), content=_clean_content(match.group("body")))
    if pattern is RENAME_RE:
        attrs = _attrs(match.group("attrs"))
        return RenameFile(
            source=attrs.get("original_file_path", ""),
            target=attrs.get("new_file_path", ""),
        )
    if pattern is DELETE_RE:
        return DeleteFile(path=_attrs(match.group("attrs")).get("file_path", ""))
    return AddDependency(packages=tuple(match.group("body").split()))


def parse_operations(text: str) -> list[Operation]:
    """Parse every operation tag in text, in order of appearance."""
    found = []
    for pattern in _OPERATION_PATTERNS:
        for match in pattern.finditer(text):
            found.append((match.start(), _operation_from_match(pattern, match)))
    found.sort(key=lambda pair: pair[0])
    return [op for _, op in found]


def parse_example_requests(text: str) -> list[str]:
    """Topics named in <dec-read-examples topics="a, b"> tags."""
    topics: list[str] = []
    for match in EXAMPLES_RE.finditer(text):
        raw = _attrs(match.group("attrs")).get("topics", "")
        topics.extend(t.strip() for t in raw.split(",") if t.strip())
    return topics


def parse_response(text: str) -> ParsedResponse:
    """
    Split a model reply into blocks, stray operations and prose.

    Args:
        text: The raw reply

    Returns:
        ParsedResponse
    """
    blocks = [ChangeSet(parse_operations(m.group(1))) for m in BLOCK_RE.finditer(text)]
    opened = len(BLOCK_OPEN_RE.findall(text))

    outside = BLOCK_RE.sub("", text)
    stray = parse_operations(outside)

    prose = EXAMPLES_RE.sub("", outside)
    for pattern in _OPERATION_PATTERNS:
        prose = pattern.sub("", prose)

    return ParsedResponse(
        blocks=blocks,
        stray_operations=stray,
        example_requests=parse_example_requests(outside),
        prose=prose.strip(),
        unclosed_blocks=max(opened - len(blocks), 0),
    )
