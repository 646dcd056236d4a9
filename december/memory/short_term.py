"""
Short-Term Memory
=================

In-memory conversation storage, one list of turns per user.

- Lives only in RAM (cleared on restart)
- Keeps the disposition and asked terms of assistant turns, which the
  classifier needs to follow a clarification chain
- Trims the oldest turns past a per-user limit
"""

from dataclasses import dataclass, field
from datetime import datetime

from december.classifier.models import ConversationTurn, Disposition


@dataclass
class StoredTurn:
    """
    A turn as stored, with its timestamp.

    Attributes:
        role: "user" or "assistant"
        content: The message text
        disposition: Set on assistant turns
        asked_terms: Terms asked about by a Clarify turn
        timestamp: When the turn was stored
    """
    role: str
    content: str
    disposition: Disposition | None = None
    asked_terms: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)

    def to_turn(self) -> ConversationTurn:
        return ConversationTurn(
            role=self.role,
            content=self.content,
            disposition=self.disposition,
            asked_terms=self.asked_terms,
        )

    def to_dict(self) -> dict:
        """Convert to a message dict for LLM API calls."""
        return {"role": self.role, "content": self.content}


class ShortTermMemory:
    """
    Per-user conversation history.

    Example:
        stm = ShortTermMemory(max_turns=30)

        stm.add_turn("U123", "user", "Add authentication to the app")
        stm.add_turn("U123", "assistant", "Which authentication method...?",
                     disposition=Disposition.CLARIFY, asked_terms=("authentication",))

        turns = stm.get_turns("U123")        # ConversationTurns for the classifier
        messages = stm.get_recent("U123")    # dicts for the LLM
    """

    def __init__(self, max_turns: int = 50):
        self.max_turns = max_turns
        self._conversations: dict[str, list[StoredTurn]] = {}

    def add_turn(
        self,
        user_id: str,
        role: str,
        content: str,
        disposition: Disposition | None = None,
        asked_terms: tuple[str, ...] = ()
    ) -> None:
        """
        Add a turn to a user's history, trimming the oldest past max_turns.

        Raises:
            ValueError: If role is not "user" or "assistant"
        """
        if role not in ("user", "assistant"):
            raise ValueError(f"Unknown role: {role}")

        turns = self._conversations.setdefault(user_id, [])
        turns.append(StoredTurn(
            role=role,
            content=content,
            disposition=disposition,
            asked_terms=tuple(asked_terms),
        ))

        if len(turns) > self.max_turns:
            self._conversations[user_id] = turns[-self.max_turns:]

    def get_turns(self, user_id: str, limit: int | None = None) -> list[ConversationTurn]:
        """Recent turns, oldest first, as classifier input."""
        turns = self._conversations.get(user_id, [])
        if limit is not None:
            turns = turns[-limit:] if limit > 0 else []
        return [turn.to_turn() for turn in turns]

    def get_recent(self, user_id: str, limit: int = 20) -> list[dict]:
        """Recent turns, oldest first, formatted for LLM APIs."""
        turns = self._conversations.get(user_id, [])
        selected = turns[-limit:] if limit > 0 else []
        return [turn.to_dict() for turn in selected]

    def clear(self, user_id: str) -> None:
        self._conversations.pop(user_id, None)

    def clear_all(self) -> None:
        self._conversations.clear()

    def get_user_count(self) -> int:
        return len(self._conversations)

    def get_turn_count(self, user_id: str) -> int:
        return len(self._conversations.get(user_id, []))
