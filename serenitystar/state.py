"""
Serenity Star SDK - Per-handle conversation state.

Each activity, chat completion, proxy or conversation handle owns exactly one
``ConversationState``. It is never shared between handles and assumes turns
on its handle are issued one after another.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .models import is_empty_id
from .validation import InputValidationError, validate_required

logger = logging.getLogger("serenitystar.state")


@dataclass
class ConversationState:
    """
    Cross-turn state of one handle.

    ``conversation_id`` is the continuity id: unset until the first turn
    completes (or the caller resumes an existing conversation) and sent with
    every later turn. ``knowledge_ids`` queues uploaded volatile knowledge
    for the next execution only.
    """

    conversation_id: Optional[str] = None
    knowledge_ids: list[str] = field(default_factory=list)

    def get_id(self) -> Optional[str]:
        return self.conversation_id

    def set_id(self, conversation_id: str) -> None:
        """Pre-seed the continuity id to resume an existing conversation."""
        validate_required(conversation_id, "conversation_id")
        if self.conversation_id is not None and self.conversation_id != conversation_id:
            raise InputValidationError(
                "conversation_id is already set",
                field="conversation_id",
                value=conversation_id,
            )
        self.conversation_id = conversation_id

    def capture_id(self, candidate: Optional[str]) -> bool:
        """Adopt ``candidate`` as continuity id if none is known yet."""
        if self.conversation_id is not None or is_empty_id(candidate):
            return False
        self.conversation_id = candidate
        logger.info("Conversation continues as %s", candidate)
        return True

    @property
    def pending_knowledge_ids(self) -> tuple[str, ...]:
        return tuple(self.knowledge_ids)

    def add_knowledge_id(self, knowledge_id: str) -> None:
        if knowledge_id not in self.knowledge_ids:
            self.knowledge_ids.append(knowledge_id)

    def clear_knowledge_ids(self) -> None:
        if self.knowledge_ids:
            logger.debug("Releasing %d volatile knowledge id(s)", len(self.knowledge_ids))
        self.knowledge_ids.clear()
