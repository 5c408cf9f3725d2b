"""Conversation and progress value types.

These are the in-memory shapes the services pass around. ``Message`` and
``TopicProgress`` serialize to the JSON stored in
``TopicProgressRecord.messages`` and to API responses.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from innercompass.content.catalog import TopicKey


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationState(str, Enum):
    """Lifecycle of a topic conversation."""

    UNINITIALIZED = "uninitialized"
    CHATTING = "chatting"
    SUMMARIZING = "summarizing"
    COMPLETED = "completed"


class Message(BaseModel):
    """A single chat message. Never modified after it is appended."""

    model_config = {"frozen": True}

    id: str
    role: Literal["user", "assistant", "system"]
    content: str
    created_at: datetime = Field(default_factory=utcnow)


class TopicProgress(BaseModel):
    """Everything persisted for one topic."""

    is_completed: bool = False
    messages: list[Message] = Field(default_factory=list)
    user_summary: str = ""
    ai_summary: str = ""


@dataclass
class UserRecord:
    """A user's identity plus all of their topic progress."""

    user_id: str
    display_name: str
    email: str | None = None
    progress: dict[TopicKey, TopicProgress] = field(default_factory=dict)

    def completed_keys(self) -> list[TopicKey]:
        return [key for key, p in self.progress.items() if p.is_completed]

    def with_progress(self, key: TopicKey, progress: TopicProgress) -> "UserRecord":
        """Return a copy with one progress entry replaced."""
        updated = dict(self.progress)
        updated[key] = progress
        return replace(self, progress=updated)

