"""Session / view controller.

Each authenticated session owns an explicit ``SessionContext``: the identity,
the cached UserRecord, the current view and the open topic. The controller
wires the catalog, conversation engine, progress store and report aggregator
together around that context.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from innercompass.content import CATALOG
from innercompass.content.catalog import Catalog, TopicKey
from innercompass.errors import AuthError, AuthErrorReason, StoreError
from innercompass.models.conversation import UserRecord
from innercompass.services.coach_client import CoachClient
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
from innercompass.utils.text import truncate_text

logger = logging.getLogger(__name__)


class AppView(str, Enum):
    LOGIN = "login"
    DASHBOARD = "dashboard"
    CHAT = "chat"
    REPORT = "report"


@dataclass
class SessionContext:
    """Everything one logged-in session knows."""

    identity: Identity | None = None
    user_record: UserRecord | None = None
    view: AppView = AppView.LOGIN
    active_conversation: TopicConversation | None = None

    @property
    def user_id(self) -> str:
        if self.identity is None:
            raise AuthError(AuthErrorReason.UNAUTHENTICATED)
        return self.identity.user_id


@dataclass
class TopicCard:
    module_id: str
    topic_id: str
    title: str
    is_completed: bool
    is_started: bool


@dataclass
class ModuleCard:
    id: str
    title: str
    description: str
    icon: str
    color: str
    topics: list[TopicCard] = field(default_factory=list)


@dataclass
class Dashboard:
    display_name: str
    modules: list[ModuleCard]
    completed_topics: int
    total_topics: int

    @property
    def progress_percent(self) -> int:
        if not self.total_topics:
            return 0
        return round(self.completed_topics / self.total_topics * 100)

    @property
    def can_view_report(self) -> bool:
        return self.completed_topics > 0


class SessionController:
    """Top-level orchestration for logged-in sessions."""

    def __init__(
        self,
        catalog: Catalog,
        engine: ConversationEngine,
        document_store: DocumentStore,
        identity_provider: IdentityProvider,
        aggregator: ReportAggregator,
    ) -> None:
        self.catalog = catalog
        self.engine = engine
        self.document_store = document_store
        self.identity_provider = identity_provider
        self.aggregator = aggregator
        # token -> session
        self._sessions: dict[str, SessionContext] = {}

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def register(self, email: str, password: str, display_name: str) -> SessionContext:
        identity = await self.identity_provider.register(email, password, display_name)
        return await self._bootstrap(identity)

    async def login(self, email: str, password: str) -> SessionContext:
        identity = await self.identity_provider.login(email, password)
        return await self._bootstrap(identity)

    async def resume(self, token: str | None) -> SessionContext:
        """Find the session for a token, rebuilding it from the store if needed."""
        identity = self.identity_provider.current_identity(token)
        if identity is None:
            if token:
                self._sessions.pop(token, None)
            raise AuthError(AuthErrorReason.UNAUTHENTICATED)
        session = self._sessions.get(identity.token)
        if session is not None:
            return session
        return await self._bootstrap(identity)

    async def _bootstrap(self, identity: Identity) -> SessionContext:
        """Read the user record once into a fresh session cache."""
        session = SessionContext(identity=identity)
        try:
            session.user_record = await self.document_store.get(identity.user_id)
        except StoreError:
            logger.error(f"[SessionController] Could not load record for {identity.user_id}")
            session.identity = None
            session.view = AppView.LOGIN
            raise
        session.view = AppView.DASHBOARD
        self._prune_sessions()
        self._sessions[identity.token] = session
        return session

    def _prune_sessions(self) -> None:
        """Forget sessions whose tokens have expired or been revoked."""
        stale = [
            token for token in self._sessions
            if self.identity_provider.current_identity(token) is None
        ]
        for token in stale:
            del self._sessions[token]
        if stale:
            logger.info(f"[SessionController] Dropped {len(stale)} stale sessions")

    def logout(self, session: SessionContext) -> None:
        if session.identity is not None:
            self.identity_provider.logout(session.identity.token)
            self._sessions.pop(session.identity.token, None)
        session.identity = None
        session.user_record = None
        session.active_conversation = None
        session.view = AppView.LOGIN

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def progress_store(self, session: SessionContext) -> ProgressStore:
        return ProgressStore(self.document_store, session)

    def dashboard(self, session: SessionContext) -> Dashboard:
        record = self._record(session)
        modules = []
        for module in self.catalog.modules:
            card = ModuleCard(
                id=module.id,
                title=module.title,
                description=module.description,
                icon=module.icon,
                color=module.color,
            )
            for topic in module.topics:
                progress = record.progress.get(module.key_for(topic))
                card.topics.append(
                    TopicCard(
                        module_id=module.id,
                        topic_id=topic.id,
                        title=topic.title,
                        is_completed=bool(progress and progress.is_completed),
                        is_started=bool(progress and progress.messages),
                    )
                )
            modules.append(card)

        completed = sum(
            1 for key in record.completed_keys() if key in self.catalog
        )
        return Dashboard(
            display_name=record.display_name,
            modules=modules,
            completed_topics=completed,
            total_topics=self.catalog.total_topics,
        )

    def back_to_dashboard(self, session: SessionContext) -> AppView:
        self._record(session)
        session.active_conversation = None
        session.view = AppView.DASHBOARD
        return session.view

    async def view_report(self, session: SessionContext) -> ReportResult:
        record = self._record(session)
        session.view = AppView.REPORT
        return await self.aggregator.build_report(record)

    def export(self, session: SessionContext, export_date: date | None = None) -> tuple[str, str]:
        record = self._record(session)
        return export_progress(record, self.catalog, export_date or date.today())

    # ------------------------------------------------------------------
    # Topic conversation
    # ------------------------------------------------------------------

    def select_topic(self, session: SessionContext, key: TopicKey) -> TopicConversation:
        """Open a topic from the cached record and switch to the chat view."""
        record = self._record(session)
        module, topic = self.catalog.lookup(key)
        conversation = self.engine.open_topic(
            record.user_id, module, topic, record.progress.get(key)
        )
        session.active_conversation = conversation
        session.view = AppView.CHAT
        return conversation

    def conversation_for(self, session: SessionContext, key: TopicKey) -> TopicConversation:
        active = session.active_conversation
        if active is not None and active.key == key:
            return active
        return self.select_topic(session, key)

    async def send_message(self, session: SessionContext, key: TopicKey, text: str) -> TurnResult:
        conversation = self.conversation_for(session, key)
        logger.debug(
            f"[SessionController] {session.user_id} -> {key}: {truncate_text(text, 40)}"
        )
        return await self.engine.submit_user_turn(
            conversation,
            text,
            self.progress_store(session),
            user_display_name=self._record(session).display_name,
        )

    def finish_topic(self, session: SessionContext, key: TopicKey) -> TopicConversation:
        conversation = self.conversation_for(session, key)
        self.engine.request_completion(conversation)
        return conversation

    def resume_chat(self, session: SessionContext, key: TopicKey) -> TopicConversation:
        conversation = self.conversation_for(session, key)
        self.engine.return_to_chat(conversation)
        return conversation

    async def submit_summary(
        self, session: SessionContext, key: TopicKey, text: str
    ) -> SummaryResult:
        conversation = self.conversation_for(session, key)
        return await self.engine.submit_summary(
            conversation, text, self.progress_store(session)
        )

    def _record(self, session: SessionContext) -> UserRecord:
        if session.identity is None or session.user_record is None:
            raise AuthError(AuthErrorReason.UNAUTHENTICATED)
        return session.user_record


_session_controller: SessionController | None = None


def get_session_controller(db_session_factory=None) -> SessionController:
    """Build the process-wide controller on first use."""
    global _session_controller
    if _session_controller is None:
        from innercompass.models.base import AsyncSessionLocal

        factory = db_session_factory or AsyncSessionLocal
        coach = CoachClient()
        _session_controller = SessionController(
            catalog=CATALOG,
            engine=ConversationEngine(coach),
            document_store=DocumentStore(factory),
            identity_provider=IdentityProvider(factory),
            aggregator=ReportAggregator(CATALOG, coach),
        )
    return _session_controller
