"""Services for InnerCompass."""

from innercompass.services.base import BaseLLMService
from innercompass.services.coach_client import CoachClient, CoachResult
from innercompass.services.conversation_engine import (
    ConversationEngine,
    SummaryResult,
    TopicConversation,
    TurnResult,
)
from innercompass.services.document_store import DocumentStore
from innercompass.services.exporter import export_progress
from innercompass.services.identity import Identity, IdentityProvider
from innercompass.services.progress_store import ProgressStore
from innercompass.services.report_aggregator import ReportAggregator, ReportResult
from innercompass.services.session import (
    AppView,
    SessionContext,
    SessionController,
    get_session_controller,
)

__all__ = [
    # Language model
    "BaseLLMService",
    "CoachClient",
    "CoachResult",
    # Conversation
    "ConversationEngine",
    "TopicConversation",
    "TurnResult",
    "SummaryResult",
    # Persistence
    "DocumentStore",
    "ProgressStore",
    # Reporting
    "ReportAggregator",
    "ReportResult",
    "export_progress",
    # Identity and sessions
    "Identity",
    "IdentityProvider",
    "AppView",
    "SessionContext",
    "SessionController",
    "get_session_controller",
]
