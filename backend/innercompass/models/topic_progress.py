"""Per-topic progress rows.

Logically a user's progress is one mapping keyed by ``"<module>-<topic>"``.
Physically each entry is its own row, so writes to two different topics
never touch the same data.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from innercompass.models.base import Base

if TYPE_CHECKING:
    from innercompass.models.user import User


class TopicProgressRecord(Base):
    """Stored conversation and summaries for one (user, module, topic)."""

    __tablename__ = "topic_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "module_id", "topic_id", name="uq_topic_progress_key"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    module_id: Mapped[str] = mapped_column(String(64), nullable=False)
    topic_id: Mapped[str] = mapped_column(String(128), nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Ordered list of serialized messages, append order == chronological order
    messages: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    user_summary: Mapped[str] = mapped_column(Text, default="", nullable=False)
    ai_summary: Mapped[str] = mapped_column(Text, default="", nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="progress")

    def __repr__(self) -> str:
        return f"<TopicProgressRecord({self.module_id}-{self.topic_id}, completed={self.is_completed})>"
