"""Topic API endpoints: catalog listing and the topic conversation flow."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from innercompass.content import CATALOG
from innercompass.content.catalog import TopicKey
from innercompass.errors import InnerCompassError
from innercompass.models.conversation import Message
from innercompass.routers.deps import (
    get_controller,
    get_current_session,
    to_http_exception,
    topic_key,
)
from innercompass.services.conversation_engine import TopicConversation
from innercompass.services.session import SessionContext, SessionController

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/topics", tags=["topics"])


class TopicInfo(BaseModel):
    id: str
    title: str
    main_prompt: str
    intro: str | None
    questions: list[str]
    kind: str


class ModuleInfo(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    color: str
    topics: list[TopicInfo]


class ConversationResponse(BaseModel):
    """Current state of one topic conversation."""

    key: str
    module_id: str
    topic_id: str
    title: str
    kind: str
    state: str
    read_only: bool
    total_questions: int
    answered_count: int
    messages: list[Message]
    user_summary: str
    ai_summary: str


class SendMessageRequest(BaseModel):
    content: str


class TurnResponse(BaseModel):
    """Result of one user turn."""

    accepted: bool
    used_coach: bool
    failed: bool
    notice: str | None
    appended: list[Message]
    conversation: ConversationResponse


class SummaryRequest(BaseModel):
    content: str


def _conversation_response(conversation: TopicConversation) -> ConversationResponse:
    return ConversationResponse(
        key=str(conversation.key),
        module_id=conversation.key.module_id,
        topic_id=conversation.key.topic_id,
        title=conversation.topic.title,
        kind=conversation.topic.kind.value,
        state=conversation.state.value,
        read_only=conversation.is_read_only,
        total_questions=len(conversation.topic.questions),
        answered_count=conversation.answered_count,
        messages=list(conversation.messages),
        user_summary=conversation.user_summary,
        ai_summary=conversation.ai_summary,
    )


@router.get("", response_model=list[ModuleInfo])
async def list_modules() -> list[ModuleInfo]:
    """List every module and topic in catalog order."""
    return [
        ModuleInfo(
            id=module.id,
            title=module.title,
            description=module.description,
            icon=module.icon,
            color=module.color,
            topics=[
                TopicInfo(
                    id=topic.id,
                    title=topic.title,
                    main_prompt=topic.main_prompt,
                    intro=topic.intro,
                    questions=list(topic.questions),
                    kind=topic.kind.value,
                )
                for topic in module.topics
            ],
        )
        for module in CATALOG.modules
    ]


@router.post("/{module_id}/{topic_id}/open", response_model=ConversationResponse)
async def open_topic(
    key: TopicKey = Depends(topic_key),
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> ConversationResponse:
    """
    Open a topic. Completed topics come back read-only; untouched topics are seeded.
    """
    try:
        conversation = controller.select_topic(session, key)
    except InnerCompassError as e:
        raise to_http_exception(e) from e
    return _conversation_response(conversation)


@router.post("/{module_id}/{topic_id}/messages", response_model=TurnResponse)
async def send_message(
    request: SendMessageRequest,
    key: TopicKey = Depends(topic_key),
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> TurnResponse:
    """
    Send a user turn. A coach failure still returns 200 with ``failed`` set;
    the user's message is kept and they can send again.
    """
    try:
        result = await controller.send_message(session, key, request.content)
    except InnerCompassError as e:
        raise to_http_exception(e) from e

    return TurnResponse(
        accepted=result.accepted,
        used_coach=result.used_coach,
        failed=result.failed,
        notice=result.notice,
        appended=result.appended,
        conversation=_conversation_response(result.conversation),
    )


@router.post("/{module_id}/{topic_id}/complete", response_model=ConversationResponse)
async def finish_topic(
    key: TopicKey = Depends(topic_key),
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> ConversationResponse:
    """Stop chatting and move to summary collection."""
    try:
        conversation = controller.finish_topic(session, key)
    except InnerCompassError as e:
        raise to_http_exception(e) from e
    return _conversation_response(conversation)


@router.post("/{module_id}/{topic_id}/resume", response_model=ConversationResponse)
async def resume_chat(
    key: TopicKey = Depends(topic_key),
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> ConversationResponse:
    """Leave summary collection and go back to the conversation."""
    try:
        conversation = controller.resume_chat(session, key)
    except InnerCompassError as e:
        raise to_http_exception(e) from e
    return _conversation_response(conversation)


@router.post("/{module_id}/{topic_id}/summary", response_model=ConversationResponse)
async def submit_summary(
    request: SummaryRequest,
    key: TopicKey = Depends(topic_key),
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> ConversationResponse:
    """Submit the user's summary and complete the topic."""
    try:
        result = await controller.submit_summary(session, key, request.content)
    except InnerCompassError as e:
        raise to_http_exception(e) from e

    if not result.ok:
        raise HTTPException(status_code=502, detail=result.notice)
    return _conversation_response(result.conversation)
