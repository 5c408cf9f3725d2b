"""Database models and value types for InnerCompass."""

from innercompass.models.base import Base, init_db, AsyncSessionLocal
from innercompass.models.conversation import (
    ConversationState,
    Message,
    TopicProgress,
    UserRecord,
)
from innercompass.models.topic_progress import TopicProgressRecord
from innercompass.models.user import User

__all__ = [
    "Base",
    "init_db",
    "AsyncSessionLocal",
    "User",
    "TopicProgressRecord",
    "ConversationState",
    "Message",
    "TopicProgress",
    "UserRecord",
]
