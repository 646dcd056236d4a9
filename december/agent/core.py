"""
Agent Core
==========

Routes every user message through the classifier and produces the reply.

Agent Loop:
    User Message
         │
         ▼
    Classify (with conversation history)
         │
    ┌────┼──────────────┐
    │    │              │
 CLARIFY EXPLAIN     IMPLEMENT
    │    │              │
    │    ▼              ▼
    │  LLM answer     LLM answer ◄──── example documents
    │    │              │                 ▲
    │    │              ├── <dec-read-examples>? ─┘
    │    ▼              ▼
    │  no code?       exactly one valid <dec-code>?
    │    │  no ─► re-ask (bounded)  no ─► re-ask (bounded)
    ▼    ▼              ▼
  questions  prose    assumptions + change-set
         │
         ▼
    Store reply with its disposition

Clarifying questions are rendered directly from the classification, so a
Clarify turn never calls the model.
"""

from typing import Iterable

from openai import AsyncOpenAI

from december.agent.context import (
    AssembledContext,
    ContextAssembler,
    render_assumptions,
    render_clarification,
)
from december.agent.prompts import EXAMPLES_FOLLOWUP, NO_EXAMPLES_FOLLOWUP
from december.classifier import ClassificationResult, Disposition, Request, RequestClassifier
from december.library import ExampleLibrary
from december.memory import MemoryManager
from december.tools.changeset import parse_response
from december.tools.validator import ResponseValidator
from december.utils.config import get_config
from december.utils.logger import Logger

logger = Logger("Agent")


class Agent:
    """
    The agent that answers user requests.

    Example:
        agent = Agent(memory=MemoryManager(), library=library)

        reply = await agent.process(
            user_id="U123",
            message="Add authentication to the app",
            channel_id="D456",
            channel_type="dm"
        )
        # -> "Before I start, I need one detail: ..."
    """

    # Example-document round trips allowed before the final answer
    MAX_EXAMPLE_ROUNDS = 2

    def __init__(
        self,
        memory: MemoryManager,
        library: ExampleLibrary | None = None,
        classifier: RequestClassifier | None = None,
        client: AsyncOpenAI | None = None
    ):
        """
        Initialize the agent.

        Args:
            memory: Conversation memory
            library: Optional example library
            classifier: Request classifier; built from config when omitted
            client: OpenAI client; built from config when omitted
        """
        config = get_config()

        self.memory = memory
        self.library = library
        self.classifier = classifier or RequestClassifier(
            max_clarification_rounds=config.classifier.max_clarification_rounds,
            state_assumptions=config.classifier.state_assumptions,
        )

        self.openai = client or AsyncOpenAI(api_key=config.openai.api_key)
        self.model = config.openai.model
        self.temperature = config.openai.temperature

        self.validator = ResponseValidator(
            max_file_lines=config.output.max_file_lines,
            max_component_lines=config.output.max_component_lines,
        )
        self.max_repair_attempts = config.output.max_repair_attempts
        self.context_assembler = ContextAssembler(
            library=library,
            max_file_lines=config.output.max_file_lines,
            max_component_lines=config.output.max_component_lines,
        )

        logger.info(f"Agent initialized with model: {self.model}")

    def classify(self, user_id: str, message: str) -> ClassificationResult:
        """Classify a message against the user's stored history."""
        history = tuple(self.memory.get_history(user_id))
        return self.classifier.classify(Request(utterance=message, history=history))

    async def process(
        self,
        user_id: str,
        message: str,
        channel_id: str,
        channel_type: str = "dm",
        existing_files: Iterable[str] = ()
    ) -> str:
        """
        Process a user message and return the reply.

        Args:
            user_id: The Slack user ID
            message: The user's message
            channel_id: The Slack channel/DM ID
            channel_type: "dm" for direct messages, "channel" for public
            existing_files: Paths already present in the user's project

        Returns:
            The reply text
        """
        logger.info(f"Processing message from {user_id} in {channel_id}: {message[:50]}...")

        try:
            result = self.classify(user_id, message)
            logger.info(f"Disposition: {result.disposition.value}", {"reasons": list(result.reasons)})

            conversation = self.memory.get_conversation(user_id)

            if result.disposition == Disposition.CLARIFY:
                reply = render_clarification(result)
            else:
                existing = sorted(existing_files)
                context = self.context_assembler.assemble(
                    result=result,
                    user_message=message,
                    conversation=conversation,
                    existing_files=existing,
                )
                if result.disposition == Disposition.EXPLAIN:
                    reply = await self._explain(context)
                else:
                    reply = await self._implement(result, context, existing)

            # The user and assistant turns are stored together, after the reply exists
            self.memory.add_user_message(user_id, message)
            self.memory.add_assistant_message(
                user_id,
                reply,
                disposition=result.disposition,
                asked_terms=result.asked_terms,
            )

            logger.info(f"Generated {result.disposition.value} reply ({len(reply)} chars)")
            return reply

        except Exception as e:
            logger.error("Error processing message", e)
            return f"I encountered an error: {str(e)}"

    async def _complete(self, messages: list[dict]) -> str:
        response = await self.openai.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
        )
        return response.choices[0].message.content or ""

    async def _explain(self, context: AssembledContext) -> str:
        """Answer in prose; code blocks are re-asked away, then stripped."""
        messages = context.to_openai_messages()
        reply = await self._complete(messages)
        report = self.validator.validate_explanation(reply)

        attempts = 0
        while not report.ok and attempts < self.max_repair_attempts:
            attempts += 1
            logger.debug(f"Explanation repair attempt {attempts}", {"violations": report.codes()})
            messages.append({"role": "assistant", "content": reply})
            messages.append({"role": "user", "content": report.to_feedback()})
            reply = await self._complete(messages)
            report = self.validator.validate_explanation(reply)

        if not report.ok:
            logger.warning("Explanation still contains code; stripping it")
            reply = parse_response(reply).prose

        return reply

    async def _implement(
        self,
        result: ClassificationResult,
        context: AssembledContext,
        existing_files: list[str]
    ) -> str:
        """Produce one change-set, fetching examples and repairing format as needed."""
        messages = context.to_openai_messages()
        reply = await self._complete(messages)

        example_rounds = 0
        while example_rounds < self.MAX_EXAMPLE_ROUNDS:
            parsed = parse_response(reply)
            if not parsed.example_requests or parsed.blocks:
                break
            example_rounds += 1
            messages.append({"role": "assistant", "content": reply})
            messages.append({"role": "user", "content": self._examples_followup(parsed.example_requests)})
            reply = await self._complete(messages)

        report = self.validator.validate_implementation(reply, existing_files)

        attempts = 0
        while not report.ok and attempts < self.max_repair_attempts:
            attempts += 1
            logger.debug(f"Implementation repair attempt {attempts}", {"violations": report.codes()})
            messages.append({"role": "assistant", "content": reply})
            messages.append({"role": "user", "content": report.to_feedback()})
            reply = await self._complete(messages)
            report = self.validator.validate_implementation(reply, existing_files)

        if not report.ok:
            logger.warning("Reply still breaks output rules", {
                "violations": [v.to_dict() for v in report.errors],
            })
        for warning in report.warnings:
            logger.info(f"Output guideline: {warning.message}", {"path": warning.path})

        preamble = render_assumptions(result)
        return f"{preamble}\n\n{reply}" if preamble else reply

    def _examples_followup(self, topics: list[str]) -> str:
        if self.library is None:
            return NO_EXAMPLES_FOLLOWUP.format(topics=", ".join(topics), available="none")

        documents = self.library.load(self.library.find(topics))
        if not documents:
            return NO_EXAMPLES_FOLLOWUP.format(
                topics=", ".join(topics),
                available=", ".join(self.library.topics()),
            )
        return EXAMPLES_FOLLOWUP.format(examples=self.library.format_for_context(documents))

    def clear_conversation(self, user_id: str) -> None:
        self.memory.clear_conversation(user_id)
        logger.info(f"Cleared conversation for {user_id}")
