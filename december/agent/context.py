"""
Context Assembly
================

Builds what the LLM sees for a classified request:

    persona prompt
      + disposition instructions (implement / explain)
      + tag grammar                 (implement only)
      + stated assumptions          (implement only)
      + matched example documents
      + conversation history
      + current user message

Also renders the two replies that never need the model: the list of
clarifying questions and the assumptions preamble.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable

from december.agent.prompts import (
    ALTERNATIVES_HEADER,
    ASSUMPTIONS_HEADER,
    EXPLAIN_INSTRUCTIONS,
    IMPLEMENT_INSTRUCTIONS,
    PERSONA_PROMPT,
)
from december.classifier.models import ClassificationResult, Disposition
from december.library import ExampleDocument, ExampleLibrary
from december.tools import TagRegistry, tag_registry
from december.utils.logger import Logger

logger = Logger("Context")

# At most this many existing paths are listed in the prompt
MAX_LISTED_FILES = 200


@dataclass
class AssembledContext:
    """
    The fully assembled context for the LLM.

    Attributes:
        system_message: Persona plus task instructions
        messages: Conversation history and the current message
        examples: Example documents included in the system message
    """
    system_message: str
    messages: list[dict]
    examples: list[ExampleDocument] = field(default_factory=list)

    def to_openai_messages(self) -> list[dict]:
        result = [{"role": "system", "content": self.system_message}]
        result.extend(self.messages)
        return result


class ContextAssembler:
    """
    Assembles context for LLM requests.

    Example:
        assembler = ContextAssembler(library)

        context = assembler.assemble(
            result=classification,
            user_message="Create a contact form with name, email, and message fields",
            conversation=memory.get_conversation("U123"),
        )

        response = await openai.chat.completions.create(
            model=model,
            messages=context.to_openai_messages(),
        )
    """

    def __init__(
        self,
        library: ExampleLibrary | None = None,
        registry: TagRegistry = tag_registry,
        max_file_lines: int = 500,
        max_component_lines: int = 50
    ):
        self.library = library
        self.registry = registry
        self.max_file_lines = max_file_lines
        self.max_component_lines = max_component_lines

    def assemble(
        self,
        result: ClassificationResult,
        user_message: str,
        conversation: list[dict] | None = None,
        existing_files: Iterable[str] = ()
    ) -> AssembledContext:
        """
        Assemble context for an Implement or Explain request.

        Args:
            result: The classification of the current message
            user_message: The current message
            conversation: Earlier turns in OpenAI format
            existing_files: Paths that already exist in the user's project

        Raises:
            ValueError: For Clarify results, which are answered without the model
        """
        if result.disposition == Disposition.CLARIFY:
            raise ValueError("Clarify results are rendered directly, not sent to the model")

        examples = self._find_examples(result.analysed or user_message)

        persona = PERSONA_PROMPT.format(
            max_file_lines=self.max_file_lines,
            max_component_lines=self.max_component_lines,
        )

        if result.disposition == Disposition.IMPLEMENT:
            instructions = IMPLEMENT_INSTRUCTIONS.format(
                tags=self.registry.describe(),
                existing_files=self._format_existing_files(existing_files),
                assumptions=self._format_assumptions(result),
                alternatives=self._format_alternatives(result),
            )
        else:
            instructions = EXPLAIN_INSTRUCTIONS

        sections = [persona, instructions]
        if examples and self.library:
            sections.append(self.library.format_for_context(examples))

        messages = list(conversation or [])
        messages.append({"role": "user", "content": user_message})

        logger.debug("Assembled context", {
            "disposition": result.disposition.value,
            "examples": [doc.topic for doc in examples],
            "history": len(messages) - 1,
        })

        return AssembledContext(
            system_message=_collapse_blank_lines("\n\n".join(sections)),
            messages=messages,
            examples=examples,
        )

    def _find_examples(self, text: str) -> list[ExampleDocument]:
        if not self.library:
            return []
        return self.library.load(self.library.match(text))

    def _format_assumptions(self, result: ClassificationResult) -> str:
        if not result.assumptions:
            return ""
        lines = [ASSUMPTIONS_HEADER]
        lines.extend(f"- {assumption.label}" for assumption in result.assumptions)
        return "\n".join(lines)

    def _format_alternatives(self, result: ClassificationResult) -> str:
        if not result.alternatives:
            return ""
        lines = [ALTERNATIVES_HEADER]
        lines.extend(f"- {alternative}" for alternative in result.alternatives)
        return "\n".join(lines)

    def _format_existing_files(self, existing_files: Iterable[str]) -> str:
        paths = sorted(existing_files)
        if not paths:
            return ""
        lines = ["## Existing Files"]
        lines.extend(f"- {path}" for path in paths[:MAX_LISTED_FILES])
        if len(paths) > MAX_LISTED_FILES:
            lines.append(f"- ... and {len(paths) - MAX_LISTED_FILES} more")
        return "\n".join(lines)


def _collapse_blank_lines(text: str) -> str:
    return re.sub(r"\n{3,}", "\n\n", text).strip()


# ==============================================================================
# Replies rendered without the model
# ==============================================================================

def render_clarification(result: ClassificationResult) -> str:
    """
    Render the questions of a Clarify result as a chat reply.

    Raises:
        ValueError: If the result is not a Clarify result
    """
    if result.disposition != Disposition.CLARIFY:
        raise ValueError("Only Clarify results have questions to render")

    count = len(result.questions)
    intro = "Before I start, I need one detail:" if count == 1 else \
        f"Before I start, I need {count} details:"

    lines = [intro, ""]
    for number, question in enumerate(result.questions, start=1):
        lines.append(f"{number}. *{question.question}*")
        lines.append(f"   _Why:_ {question.rationale}")
        for letter, option in zip("abcdefghij", question.options):
            lines.append(f"   {letter}) {option}")
    return "\n".join(lines)


def render_assumptions(result: ClassificationResult) -> str:
    """Render the labeled assumptions that preface an implementation."""
    if not result.assumptions:
        return ""
    lines = ["*Assumptions*"]
    lines.extend(f"- {assumption.label}" for assumption in result.assumptions)
    return "\n".join(lines)
