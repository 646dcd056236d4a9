"""
Response Validator
==================

Checks a model reply against the output conventions before it reaches the
user.

Implementation replies (errors block the reply, warnings are logged):

    missing_code_block        no <dec-code> block at all
    multiple_code_blocks      more than one block
    unterminated_code_block   <dec-code> opened but never closed
    operation_outside_block   a file operation outside the block
    missing_path              a write/rename/delete without its path
    invalid_path              absolute paths or paths escaping the project
    incomplete_content        "// ... rest of code" style elisions
    unresolved_import         a relative import that nothing provides
    file_too_long             (warning) more lines than max_file_lines
    component_too_long        (warning) .jsx/.tsx over max_component_lines
    duplicate_write           (warning) the same path written twice

Explanation replies:

    code_block_in_explanation any block or operation tag
"""

import posixpath
import re
from dataclasses import dataclass, field
from typing import Iterable

from december.tools.changeset import (
    ChangeSet,
    DeleteFile,
    RenameFile,
    WriteFile,
    parse_response,
)
from december.utils.logger import Logger

logger = Logger("Validator")

ERROR = "error"
WARNING = "warning"

SCRIPT_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".vue", ".svelte")
COMPONENT_EXTENSIONS = (".jsx", ".tsx")
RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".json", ".css", ".vue", ".svelte")

IMPORT_RE = re.compile(
    r"""(?:\bimport\s+(?:[^'";]*?\s+from\s+)?|\bexport\s+[^'";]*?\s+from\s+|"""
    r"""\brequire\s*\(\s*|\bimport\s*\(\s*)['"](?P<spec>[^'"]+)['"]"""
)

PLACEHOLDER_RE = re.compile(
    r"^\s*(?://|#|/\*|\*|<!--|\{/\*)\s*(?:\.{3}|…)?\s*"
    r"(?:rest of (?:the )?(?:code|file|component|content|implementation)|"
    r"(?:existing|remaining|unchanged|previous) (?:code|content|implementation)|"
    r"keep (?:the )?existing|same as before|\.{3}\s*$)",
    re.IGNORECASE | re.MULTILINE,
)


@dataclass(frozen=True)
class FormatViolation:
    """
    One problem found in a reply.

    Attributes:
        code: Machine-readable violation code
        message: Human-readable description
        path: The file concerned, if any
        severity: "error" or "warning"
    """
    code: str
    message: str
    path: str | None = None
    severity: str = ERROR

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "path": self.path,
            "severity": self.severity,
        }


@dataclass
class ValidationReport:
    """Result of validating one reply."""
    violations: list[FormatViolation] = field(default_factory=list)
    changeset: ChangeSet | None = None

    @property
    def errors(self) -> list[FormatViolation]:
        return [v for v in self.violations if v.severity == ERROR]

    @property
    def warnings(self) -> list[FormatViolation]:
        return [v for v in self.violations if v.severity == WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def codes(self) -> list[str]:
        return [v.code for v in self.violations]

    def add(self, code: str, message: str, path: str | None = None, severity: str = ERROR) -> None:
        self.violations.append(FormatViolation(code, message, path, severity))

    def to_feedback(self) -> str:
        """Format the errors as a correction request for the model."""
        lines = ["Your previous reply broke the output rules:"]
        for violation in self.errors:
            where = f" ({violation.path})" if violation.path else ""
            lines.append(f"- {violation.message}{where}")
        lines.append("Reply again with the full answer and the rules fixed.")
        return "\n".join(lines)


def normalize_path(path: str) -> str:
    """Normalize a project-relative path ("./src//a.ts" -> "src/a.ts")."""
    normalized = posixpath.normpath(path.strip().replace("\\", "/"))
    return normalized[2:] if normalized.startswith("./") else normalized


def _is_safe_path(path: str) -> bool:
    normalized = normalize_path(path)
    return not (normalized.startswith("/") or normalized == ".." or normalized.startswith("../"))


class ResponseValidator:
    """
    Validates replies against the output conventions.

    Example:
        validator = ResponseValidator(max_file_lines=500, max_component_lines=50)

        report = validator.validate_implementation(reply, existing_files=["src/main.tsx"])
        if not report.ok:
            print(report.to_feedback())
    """

    def __init__(self, max_file_lines: int = 500, max_component_lines: int = 50):
        self.max_file_lines = max_file_lines
        self.max_component_lines = max_component_lines

    def validate_implementation(
        self,
        text: str,
        existing_files: Iterable[str] = ()
    ) -> ValidationReport:
        """
        Validate a reply that must carry exactly one change-set.

        Args:
            text: The model reply
            existing_files: Project-relative paths that already exist

        Returns:
            ValidationReport; the parsed change-set is attached when there
            is exactly one block
        """
        report = ValidationReport()
        parsed = parse_response(text)

        if parsed.unclosed_blocks:
            report.add("unterminated_code_block", "A <dec-code> block was opened but never closed.")
        if not parsed.blocks and not parsed.unclosed_blocks:
            report.add("missing_code_block", "The reply has no <dec-code> block.")
        if len(parsed.blocks) > 1:
            report.add(
                "multiple_code_blocks",
                f"The reply has {len(parsed.blocks)} <dec-code> blocks; use exactly one.",
            )
        for op in parsed.stray_operations:
            report.add(
                "operation_outside_block",
                f"A {type(op).__name__} operation sits outside the <dec-code> block.",
                getattr(op, "path", None) or getattr(op, "target", None),
            )

        merged = ChangeSet([op for block in parsed.blocks for op in block.operations])
        self._check_operations(merged, report)
        self._check_imports(merged, set(normalize_path(p) for p in existing_files), report)

        report.changeset = parsed.changeset

        if report.violations:
            logger.debug("Validation finished", {"violations": report.codes()})
        return report

    def validate_explanation(self, text: str) -> ValidationReport:
        """Validate a reply that must not contain any code block or file operation."""
        report = ValidationReport()
        if parse_response(text).has_code():
            report.add(
                "code_block_in_explanation",
                "An explanation must not contain a <dec-code> block or file operations.",
            )
        return report

    def _check_operations(self, changeset: ChangeSet, report: ValidationReport) -> None:
        seen_writes: set[str] = set()

        for op in changeset.operations:
            if isinstance(op, WriteFile):
                self._check_write(op, seen_writes, report)
            elif isinstance(op, RenameFile):
                if not op.source or not op.target:
                    report.add("missing_path", "A rename needs both original_file_path and new_file_path.")
                for path in (op.source, op.target):
                    if path and not _is_safe_path(path):
                        report.add("invalid_path", "Paths must stay inside the project.", path)
            elif isinstance(op, DeleteFile):
                if not op.path:
                    report.add("missing_path", "A delete needs a file_path.")
                elif not _is_safe_path(op.path):
                    report.add("invalid_path", "Paths must stay inside the project.", op.path)

    def _check_write(self, op: WriteFile, seen: set[str], report: ValidationReport) -> None:
        if not op.path:
            report.add("missing_path", "A <dec-write> needs a file_path.")
            return
        if not _is_safe_path(op.path):
            report.add("invalid_path", "Paths must stay inside the project.", op.path)
            return

        path = normalize_path(op.path)
        if path in seen:
            report.add("duplicate_write", "The same file is written twice.", path, WARNING)
        seen.add(path)

        if PLACEHOLDER_RE.search(op.content):
            report.add(
                "incomplete_content",
                "File contents must be complete; elisions like '// ... rest of code' are not allowed.",
                path,
            )

        lines = op.content.count("\n") + 1 if op.content else 0
        if lines > self.max_file_lines:
            report.add(
                "file_too_long",
                f"{lines} lines exceeds the {self.max_file_lines}-line guideline; consider splitting.",
                path,
                WARNING,
            )
        if path.endswith(COMPONENT_EXTENSIONS) and lines > self.max_component_lines:
            report.add(
                "component_too_long",
                f"{lines} lines exceeds the {self.max_component_lines}-line component guideline.",
                path,
                WARNING,
            )

    def _check_imports(self, changeset: ChangeSet, existing: set[str], report: ValidationReport) -> None:
        available = set(existing)
        for op in changeset.operations:
            if isinstance(op, WriteFile) and op.path:
                available.add(normalize_path(op.path))
            elif isinstance(op, DeleteFile) and op.path:
                available.discard(normalize_path(op.path))
            elif isinstance(op, RenameFile) and op.source and op.target:
                available.discard(normalize_path(op.source))
                available.add(normalize_path(op.target))

        for op in changeset.writes():
            if not op.path or not op.path.endswith(SCRIPT_EXTENSIONS):
                continue
            importer = normalize_path(op.path)
            for match in IMPORT_RE.finditer(op.content):
                spec = match.group("spec")
                target = resolve_specifier(importer, spec)
                if target is None:
                    continue
                if not _resolves(target, available):
                    report.add(
                        "unresolved_import",
                        f"'{spec}' does not resolve to a file in this reply or the project.",
                        importer,
                    )


def resolve_specifier(importer: str, spec: str) -> str | None:
    """
    Turn a relative or "@/" import into a project path.

    Returns:
        The normalized target path, or None for package imports
    """
    if spec.startswith("@/"):
        return normalize_path("src/" + spec[2:])
    if spec.startswith("./") or spec.startswith("../"):
        return normalize_path(posixpath.join(posixpath.dirname(importer), spec))
    return None


def _resolves(target: str, available: set[str]) -> bool:
    if target.startswith("../"):
        return False
    candidates = [target]
    candidates.extend(target + ext for ext in RESOLVE_EXTENSIONS)
    candidates.extend(f"{target}/index{ext}" for ext in RESOLVE_EXTENSIONS)
    return any(candidate in available for candidate in candidates)
