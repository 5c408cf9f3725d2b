"""Progress API endpoints: dashboard, holistic report and export."""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from innercompass.errors import InnerCompassError
from innercompass.routers.deps import get_controller, get_current_session, to_http_exception
from innercompass.services.session import SessionContext, SessionController

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/progress", tags=["progress"])


class TopicCardResponse(BaseModel):
    module_id: str
    topic_id: str
    key: str
    title: str
    is_completed: bool
    is_started: bool


class ModuleCardResponse(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    color: str
    topics: list[TopicCardResponse]


class DashboardResponse(BaseModel):
    """Overall progress plus per-topic completion."""

    display_name: str
    completed_topics: int
    total_topics: int
    progress_percent: int
    can_view_report: bool
    modules: list[ModuleCardResponse]


class ReportResponse(BaseModel):
    """The holistic self-discovery report."""

    content: str
    topic_count: int
    generated: bool
    failed: bool


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> DashboardResponse:
    """Return the dashboard for the current user and switch to that view."""
    try:
        controller.back_to_dashboard(session)
        dashboard = controller.dashboard(session)
    except InnerCompassError as e:
        raise to_http_exception(e) from e

    return DashboardResponse(
        display_name=dashboard.display_name,
        completed_topics=dashboard.completed_topics,
        total_topics=dashboard.total_topics,
        progress_percent=dashboard.progress_percent,
        can_view_report=dashboard.can_view_report,
        modules=[
            ModuleCardResponse(
                id=m.id,
                title=m.title,
                description=m.description,
                icon=m.icon,
                color=m.color,
                topics=[
                    TopicCardResponse(
                        module_id=t.module_id,
                        topic_id=t.topic_id,
                        key=f"{t.module_id}-{t.topic_id}",
                        title=t.title,
                        is_completed=t.is_completed,
                        is_started=t.is_started,
                    )
                    for t in m.topics
                ],
            )
            for m in dashboard.modules
        ],
    )


@router.get("/report", response_model=ReportResponse)
async def get_report(
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> ReportResponse:
    """
    Generate the holistic report across every completed topic.
    """
    try:
        result = await controller.view_report(session)
    except InnerCompassError as e:
        raise to_http_exception(e) from e

    return ReportResponse(
        content=result.text,
        topic_count=result.topic_count,
        generated=result.generated,
        failed=result.failed,
    )


@router.get("/export", response_class=PlainTextResponse)
async def export_progress(
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> PlainTextResponse:
    """Download all progress as a plain-text document."""
    try:
        filename, content = controller.export(session)
    except InnerCompassError as e:
        raise to_http_exception(e) from e

    return PlainTextResponse(
        content,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
        },
    )
