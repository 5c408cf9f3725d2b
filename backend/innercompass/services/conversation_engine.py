"""Conversation engine: the per-topic state machine.

States: UNINITIALIZED -> CHATTING -> SUMMARIZING -> COMPLETED.

- Opening a topic with no progress seeds deterministic assistant messages.
- Questionnaire topics ask their scripted questions one per user turn without
  calling the coach; once every question is answered each further turn goes to
  the coach.
- Open-ended topics send every user turn to the coach.
- A completed topic reopens read-only and never calls the coach.

Every persisted write is the complete TopicProgress for the topic.
"""

import asyncio
import logging
import uuid
import weakref
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from innercompass.config import settings
from innercompass.content.catalog import Module, Topic, TopicKey
from innercompass.errors import InputRejectedError, InvalidTransitionError
from innercompass.models.conversation import (
    ConversationState,
    Message,
    TopicProgress,
    utcnow,
)
from innercompass.services.coach_client import CoachClient
from innercompass.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)

# Shown to the user when a coach call fails; the engine state is left as-is
TURN_FAILURE_NOTICE = "AI 教练正在思考中，请稍后再发送一次。"
SUMMARY_FAILURE_NOTICE = "生成总结失败，请稍后重试。"

INTRO_MESSAGE_ID = "init-intro"
FIRST_QUESTION_ID = "init-q1"
WELCOME_MESSAGE_ID = "init-1"


@dataclass
class TopicConversation:
    """An open topic: its messages plus where it is in the state machine."""

    user_id: str
    key: TopicKey
    module: Module
    topic: Topic
    state: ConversationState = ConversationState.UNINITIALIZED
    messages: list[Message] = field(default_factory=list)
    user_summary: str = ""
    ai_summary: str = ""

    @property
    def answered_count(self) -> int:
        return sum(1 for m in self.messages if m.role == "user")

    @property
    def is_read_only(self) -> bool:
        return self.state is ConversationState.COMPLETED

    def to_progress(self, completed: bool = False) -> TopicProgress:
        return TopicProgress(
            is_completed=completed,
            messages=list(self.messages),
            user_summary=self.user_summary,
            ai_summary=self.ai_summary,
        )


@dataclass
class TurnResult:
    """What a user turn did to the conversation."""

    conversation: TopicConversation
    appended: list[Message] = field(default_factory=list)
    used_coach: bool = False
    failed: bool = False
    notice: str | None = None

    @property
    def accepted(self) -> bool:
        return bool(self.appended)

    @property
    def state(self) -> ConversationState:
        return self.conversation.state


@dataclass
class SummaryResult:
    """Outcome of submitting the user's summary."""

    conversation: TopicConversation
    ok: bool
    ai_summary: str = ""
    progress: TopicProgress | None = None
    notice: str | None = None


def build_questionnaire_intro(topic: Topic) -> str:
    content = f"**{topic.title}**\n\n{topic.main_prompt}"
    if topic.intro:
        content += f"\n\n> {topic.intro}"
    return content


def build_open_ended_welcome(module: Module, topic: Topic) -> str:
    parts = [
        f"欢迎来到 **{module.title}** - **{topic.title}**。",
        f"**核心议题：**\n{topic.main_prompt}",
    ]
    if topic.intro:
        parts.append(f"> {topic.intro}")
    if topic.questions:
        bullets = "\n".join(f"- {q}" for q in topic.questions)
        parts.append(f"**你可以参考以下角度进行思考：**\n{bullets}")
    parts.append("请把你此刻的想法告诉我，我会陪伴你一起深入探索。")
    return "\n\n".join(parts)


class ConversationEngine:
    """
    Drives topic conversations for every user.

    One engine is shared by all sessions. Turn and summary submission for the
    same (user, topic) are serialized with a per-key lock, and every caller
    opening a topic that is already open gets the same live conversation.
    Both maps hold weak references, so entries go away with their last user.
    """

    def __init__(
        self,
        coach: CoachClient,
        clock: Callable[[], datetime] = utcnow,
        max_message_chars: int | None = None,
    ) -> None:
        self.coach = coach
        self._clock = clock
        self.max_message_chars = max_message_chars or settings.max_user_message_chars
        self._locks: weakref.WeakValueDictionary[tuple[str, TopicKey], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._live: weakref.WeakValueDictionary[tuple[str, TopicKey], TopicConversation] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, user_id: str, key: TopicKey) -> asyncio.Lock:
        lock = self._locks.get((user_id, key))
        if lock is None:
            lock = asyncio.Lock()
            self._locks[(user_id, key)] = lock
        return lock

    def _new_message(self, role: str, content: str, message_id: str | None = None) -> Message:
        return Message(
            id=message_id or uuid.uuid4().hex,
            role=role,
            content=content,
            created_at=self._clock(),
        )

    # ------------------------------------------------------------------
    # Opening
    # ------------------------------------------------------------------

    def open_topic(
        self,
        user_id: str,
        module: Module,
        topic: Topic,
        existing: TopicProgress | None,
    ) -> TopicConversation:
        """
        Load or seed a topic conversation. Never calls the coach and never persists.

        Seeded message ids are fixed, so opening an untouched topic twice gives
        the same messages until the first user turn is saved.

        If the topic is still open somewhere (for example a turn is waiting on
        the coach), that live conversation is returned instead of a copy built
        from ``existing``, which may not include the pending turn yet.
        """
        key = module.key_for(topic)
        live = self._live.get((user_id, key))
        if live is not None:
            if live.state is ConversationState.SUMMARIZING:
                live.state = ConversationState.CHATTING
            return live

        conversation = TopicConversation(user_id=user_id, key=key, module=module, topic=topic)
        self._live[(user_id, key)] = conversation

        if existing is not None and existing.is_completed:
            conversation.messages = list(existing.messages)
            conversation.user_summary = existing.user_summary
            conversation.ai_summary = existing.ai_summary
            conversation.state = ConversationState.COMPLETED
            return conversation

        if existing is not None and existing.messages:
            conversation.messages = list(existing.messages)
            conversation.state = ConversationState.CHATTING
            return conversation

        conversation.messages = self._seed_messages(module, topic)
        conversation.state = ConversationState.CHATTING
        logger.info(f"[ConversationEngine] Seeded {conversation.key} for {user_id}")
        return conversation

    def _seed_messages(self, module: Module, topic: Topic) -> list[Message]:
        if topic.is_questionnaire:
            seeded = [
                self._new_message("assistant", build_questionnaire_intro(topic), INTRO_MESSAGE_ID)
            ]
            # An empty question list means there is no scripted phase
            if topic.questions:
                seeded.append(
                    self._new_message("assistant", topic.questions[0], FIRST_QUESTION_ID)
                )
            return seeded
        return [
            self._new_message(
                "assistant", build_open_ended_welcome(module, topic), WELCOME_MESSAGE_ID
            )
        ]

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def submit_user_turn(
        self,
        conversation: TopicConversation,
        user_text: str,
        store: ProgressStore,
        user_display_name: str = "",
    ) -> TurnResult:
        """
        Append a user turn and the assistant's reply, then persist.

        Whitespace-only input is ignored. A failed coach call keeps the user's
        message (persisted) and adds no assistant message; the result carries a
        notice and the user may simply send again.
        """
        if not user_text or not user_text.strip():
            logger.debug(f"[ConversationEngine] Ignoring empty turn on {conversation.key}")
            return TurnResult(conversation=conversation)

        if len(user_text) > self.max_message_chars:
            raise InputRejectedError(
                f"Message is longer than {self.max_message_chars} characters"
            )

        lock = self._lock_for(conversation.user_id, conversation.key)
        async with lock:
            if conversation.state not in (
                ConversationState.CHATTING,
                ConversationState.SUMMARIZING,
            ):
                raise InvalidTransitionError("send a message", conversation.state.value)

            before = len(conversation.messages)
            user_message = self._new_message("user", user_text)
            conversation.messages.append(user_message)
            result = TurnResult(conversation=conversation, appended=[user_message])

            try:
                await self._reply(conversation, result, user_display_name)
                await store.save(conversation.user_id, conversation.key, conversation.to_progress())
            except Exception:
                # Keep memory identical to what is stored
                del conversation.messages[before:]
                raise

            return result

    async def _reply(
        self, conversation: TopicConversation, result: TurnResult, user_display_name: str
    ) -> None:
        """Append the next scripted question, or the coach's reply to the latest turn."""
        topic = conversation.topic
        answered = conversation.answered_count
        if topic.is_questionnaire and answered < len(topic.questions):
            question = self._new_message("assistant", topic.questions[answered], f"q-{answered}")
            conversation.messages.append(question)
            result.appended.append(question)
            return

        result.used_coach = True
        coach_result = await self.coach.turn_response(
            topic, list(conversation.messages), user_display_name
        )
        if coach_result.ok:
            reply = self._new_message("assistant", coach_result.text)
            conversation.messages.append(reply)
            result.appended.append(reply)
            return

        logger.warning(
            f"[ConversationEngine] Coach failed on {conversation.key} "
            f"for {conversation.user_id}: {coach_result.error}"
        )
        result.failed = True
        result.notice = TURN_FAILURE_NOTICE

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def request_completion(self, conversation: TopicConversation) -> ConversationState:
        """CHATTING -> SUMMARIZING."""
        if conversation.state is not ConversationState.CHATTING:
            raise InvalidTransitionError("finish the topic", conversation.state.value)
        conversation.state = ConversationState.SUMMARIZING
        return conversation.state

    def return_to_chat(self, conversation: TopicConversation) -> ConversationState:
        """SUMMARIZING -> CHATTING, for users who want to keep talking."""
        if conversation.state is not ConversationState.SUMMARIZING:
            raise InvalidTransitionError("return to the conversation", conversation.state.value)
        conversation.state = ConversationState.CHATTING
        return conversation.state

    async def submit_summary(
        self,
        conversation: TopicConversation,
        user_summary: str,
        store: ProgressStore,
    ) -> SummaryResult:
        """
        Generate the AI insight for the user's summary and complete the topic.

        On coach failure nothing is persisted and the conversation stays in
        SUMMARIZING so the user can try again.
        """
        if not user_summary or not user_summary.strip():
            raise InputRejectedError("Summary must not be empty")

        lock = self._lock_for(conversation.user_id, conversation.key)
        async with lock:
            if conversation.state is not ConversationState.SUMMARIZING:
                raise InvalidTransitionError("submit a summary", conversation.state.value)

            transcript = list(conversation.messages)
            coach_result = await self.coach.topic_summary(
                conversation.topic, transcript, user_summary
            )
            if not coach_result.ok:
                logger.warning(
                    f"[ConversationEngine] Summary failed on {conversation.key} "
                    f"for {conversation.user_id}: {coach_result.error}"
                )
                return SummaryResult(
                    conversation=conversation, ok=False, notice=SUMMARY_FAILURE_NOTICE
                )

            progress = TopicProgress(
                is_completed=True,
                messages=transcript,
                user_summary=user_summary,
                ai_summary=coach_result.text,
            )
            await store.save(conversation.user_id, conversation.key, progress)

            conversation.user_summary = user_summary
            conversation.ai_summary = coach_result.text
            conversation.state = ConversationState.COMPLETED
            logger.info(
                f"[ConversationEngine] Completed {conversation.key} for {conversation.user_id}"
            )
            return SummaryResult(
                conversation=conversation,
                ok=True,
                ai_summary=coach_result.text,
                progress=progress,
            )
