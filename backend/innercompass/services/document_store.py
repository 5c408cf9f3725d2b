"""Document store for user records.

Presents the user record as a single document (identity + progress map)
while storing each progress entry as its own ``topic_progress`` row.
All SQLAlchemy failures surface as ``StoreError``.
"""

import logging
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from innercompass.content.catalog import TopicKey
from innercompass.errors import NotFoundError, StoreError
from innercompass.models.conversation import Message, TopicProgress, UserRecord
from innercompass.models.topic_progress import TopicProgressRecord
from innercompass.models.user import User

logger = logging.getLogger(__name__)


def progress_from_row(row: TopicProgressRecord) -> TopicProgress:
    return TopicProgress(
        is_completed=row.is_completed,
        messages=[Message.model_validate(m) for m in row.messages or []],
        user_summary=row.user_summary or "",
        ai_summary=row.ai_summary or "",
    )


def _apply_progress(row: TopicProgressRecord, progress: TopicProgress) -> None:
    row.is_completed = progress.is_completed
    row.messages = [m.model_dump(mode="json") for m in progress.messages]
    row.user_summary = progress.user_summary
    row.ai_summary = progress.ai_summary


class DocumentStore:
    """get / put / update over the users and topic_progress tables."""

    def __init__(self, db_session_factory: Callable[[], AsyncSession]) -> None:
        self._db_session_factory = db_session_factory

    async def get(self, user_id: str) -> UserRecord:
        """Load a full user record. Raises NotFoundError if absent."""
        try:
            async with self._db_session_factory() as db:
                user = await db.get(User, user_id)
                if user is None:
                    raise NotFoundError(f"User {user_id} not found")

                result = await db.execute(
                    select(TopicProgressRecord).where(TopicProgressRecord.user_id == user_id)
                )
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"[DocumentStore] Failed to read user {user_id}: {e}")
            raise StoreError(f"Failed to read user {user_id}") from e

        return UserRecord(
            user_id=user.id,
            display_name=user.display_name,
            email=user.email,
            progress={
                TopicKey(row.module_id, row.topic_id): progress_from_row(row)
                for row in rows
            },
        )

    async def get_progress(self, user_id: str, key: TopicKey) -> TopicProgress | None:
        """Load a single progress entry without reading the whole record."""
        try:
            async with self._db_session_factory() as db:
                row = await self._find_row(db, user_id, key)
        except SQLAlchemyError as e:
            logger.error(f"[DocumentStore] Failed to read {key} for user {user_id}: {e}")
            raise StoreError(f"Failed to read progress {key}") from e
        return progress_from_row(row) if row else None

    async def put(self, user_id: str, record: UserRecord) -> None:
        """Replace the whole document: profile fields and every progress entry."""
        try:
            async with self._db_session_factory() as db:
                user = await db.get(User, user_id)
                if user is None:
                    raise NotFoundError(f"User {user_id} not found")
                user.display_name = record.display_name
                if record.email:
                    user.email = record.email

                result = await db.execute(
                    select(TopicProgressRecord).where(TopicProgressRecord.user_id == user_id)
                )
                existing = {
                    TopicKey(row.module_id, row.topic_id): row
                    for row in result.scalars().all()
                }
                for key, row in existing.items():
                    if key not in record.progress:
                        await db.delete(row)
                for key, progress in record.progress.items():
                    row = existing.get(key)
                    if row is None:
                        row = TopicProgressRecord(
                            user_id=user_id, module_id=key.module_id, topic_id=key.topic_id
                        )
                        db.add(row)
                    _apply_progress(row, progress)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"[DocumentStore] Failed to write user {user_id}: {e}")
            raise StoreError(f"Failed to write user {user_id}") from e

    async def update(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        progress: dict[TopicKey, TopicProgress] | None = None,
    ) -> None:
        """Update only the given fields. Progress entries not named are untouched."""
        try:
            async with self._db_session_factory() as db:
                user = await db.get(User, user_id)
                if user is None:
                    raise NotFoundError(f"User {user_id} not found")
                if display_name is not None:
                    user.display_name = display_name

                for key, entry in (progress or {}).items():
                    row = await self._find_row(db, user_id, key)
                    if row is None:
                        row = TopicProgressRecord(
                            user_id=user_id, module_id=key.module_id, topic_id=key.topic_id
                        )
                        db.add(row)
                    _apply_progress(row, entry)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"[DocumentStore] Failed to update user {user_id}: {e}")
            raise StoreError(f"Failed to update user {user_id}") from e

    @staticmethod
    async def _find_row(
        db: AsyncSession, user_id: str, key: TopicKey
    ) -> TopicProgressRecord | None:
        result = await db.execute(
            select(TopicProgressRecord)
            .where(TopicProgressRecord.user_id == user_id)
            .where(TopicProgressRecord.module_id == key.module_id)
            .where(TopicProgressRecord.topic_id == key.topic_id)
        )
        return result.scalar_one_or_none()
