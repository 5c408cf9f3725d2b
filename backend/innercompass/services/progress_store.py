"""Progress store adapter: TopicProgress in and out of the document store.

Every save carries the complete TopicProgress for one key. When the adapter
is bound to a session, the session's cached UserRecord is updated only after
the store write succeeded, so the two never diverge.
"""

import logging
from typing import TYPE_CHECKING

from innercompass.content.catalog import TopicKey
from innercompass.models.conversation import TopicProgress, UserRecord
from innercompass.services.document_store import DocumentStore

if TYPE_CHECKING:
    from innercompass.services.session import SessionContext

logger = logging.getLogger(__name__)


class ProgressStore:
    """load / save of per-topic progress, optionally write-through to a session cache."""

    def __init__(
        self,
        document_store: DocumentStore,
        session: "SessionContext | None" = None,
    ) -> None:
        self.document_store = document_store
        self.session = session

    def _cached_record(self, user_id: str) -> UserRecord | None:
        if self.session is None or self.session.user_record is None:
            return None
        if self.session.user_record.user_id != user_id:
            return None
        return self.session.user_record

    async def load(self, user_id: str, key: TopicKey) -> TopicProgress | None:
        cached = self._cached_record(user_id)
        if cached is not None:
            return cached.progress.get(key)
        return await self.document_store.get_progress(user_id, key)

    async def load_record(self, user_id: str) -> UserRecord:
        cached = self._cached_record(user_id)
        if cached is not None:
            return cached
        return await self.document_store.get(user_id)

    async def save(self, user_id: str, key: TopicKey, progress: TopicProgress) -> None:
        """Persist one complete TopicProgress. Raises StoreError on failure."""
        # Last write wins per key; no version check across sessions
        await self.document_store.update(user_id, progress={key: progress})

        cached = self._cached_record(user_id)
        if cached is not None:
            self.session.user_record = cached.with_progress(key, progress)
        logger.debug(
            f"[ProgressStore] Saved {key} for {user_id} "
            f"({len(progress.messages)} messages, completed={progress.is_completed})"
        )
