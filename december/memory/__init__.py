"""
Memory System
=============

Conversation memory for the agent. The classifier itself is stateless;
everything it needs to know about earlier turns comes from here.

This module provides a Facade, MemoryManager, over the short-term store.

Usage:
    from december.memory import MemoryManager

    memory = MemoryManager()
    memory.add_user_message("U123", "Add authentication to the app")
    history = memory.get_history("U123")
"""

from december.classifier.models import ConversationTurn, Disposition
from december.memory.short_term import ShortTermMemory, StoredTurn
from december.utils.logger import Logger

logger = Logger("Memory")


class MemoryManager:
    """
    Facade over conversation memory.

    Example:
        memory = MemoryManager(max_turns=50)

        memory.add_user_message("U123", "Add a settings page")
        memory.add_assistant_message("U123", "<dec-code>...</dec-code>", Disposition.IMPLEMENT)

        memory.get_history("U123")       # for the classifier
        memory.get_conversation("U123")  # for the LLM
    """

    def __init__(self, max_turns: int = 50):
        self.short_term = ShortTermMemory(max_turns=max_turns)
        logger.info("Memory system initialized")

    def add_user_message(self, user_id: str, content: str) -> None:
        self.short_term.add_turn(user_id, "user", content)
        logger.debug(f"Stored user turn for {user_id}")

    def add_assistant_message(
        self,
        user_id: str,
        content: str,
        disposition: Disposition,
        asked_terms: tuple[str, ...] = ()
    ) -> None:
        """
        Store an assistant reply with the disposition it answered with.

        Args:
            user_id: The Slack user ID
            content: The reply text
            disposition: Implement, Clarify or Explain
            asked_terms: Terms asked about, for Clarify replies
        """
        self.short_term.add_turn(user_id, "assistant", content, disposition, asked_terms)
        logger.debug(f"Stored {disposition.value} turn for {user_id}")

    def get_history(self, user_id: str, limit: int | None = None) -> list[ConversationTurn]:
        return self.short_term.get_turns(user_id, limit)

    def get_conversation(self, user_id: str, limit: int = 20) -> list[dict]:
        return self.short_term.get_recent(user_id, limit)

    def clear_conversation(self, user_id: str) -> None:
        self.short_term.clear(user_id)
        logger.info(f"Cleared conversation for {user_id}")

    def get_stats(self) -> dict:
        return {"users": self.short_term.get_user_count()}


__all__ = ["MemoryManager", "ShortTermMemory", "StoredTurn"]
