"""Report aggregator: gathers completed topics for the holistic report."""

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any

from innercompass.config import settings
from innercompass.content.catalog import Catalog
from innercompass.models.conversation import UserRecord
from innercompass.services.coach_client import CoachClient

logger = logging.getLogger(__name__)

NO_COMPLETED_TOPICS_MESSAGE = "请先完成至少一个议题的探索。"
REPORT_FAILURE_MESSAGE = "无法生成整体报告。"


@dataclass
class ReportResult:
    """The report text plus how it was produced."""

    text: str
    topic_count: int = 0
    generated: bool = False
    failed: bool = False
    cached: bool = False


class ReportAggregator:
    """
    Builds the holistic report request and asks the coach to write it.

    Topics are walked in catalog order, not completion order. Without caching
    every call regenerates the report.
    """

    def __init__(
        self,
        catalog: Catalog,
        coach: CoachClient,
        cache_enabled: bool | None = None,
    ) -> None:
        self.catalog = catalog
        self.coach = coach
        self.cache_enabled = (
            settings.report_cache_enabled if cache_enabled is None else cache_enabled
        )
        # user_id -> (fingerprint, report text)
        self._cache: dict[str, tuple[str, str]] = {}

    def collect_completed(self, record: UserRecord) -> dict[str, dict[str, Any]]:
        """Completed topics keyed by ``"<module>-<topic>"``, in catalog order."""
        completed: dict[str, dict[str, Any]] = {}
        for module, topic in self.catalog.iter_topics():
            key = module.key_for(topic)
            progress = record.progress.get(key)
            if progress is None or not progress.is_completed:
                continue
            completed[str(key)] = {
                "moduleTitle": module.title,
                "topicTitle": topic.title,
                "userSummary": progress.user_summary,
                "aiSummary": progress.ai_summary,
            }
        return completed

    @staticmethod
    def fingerprint(completed: dict[str, dict[str, Any]]) -> str:
        payload = json.dumps(completed, ensure_ascii=False, sort_keys=True)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    async def build_report(self, record: UserRecord) -> ReportResult:
        completed = self.collect_completed(record)
        if not completed:
            return ReportResult(text=NO_COMPLETED_TOPICS_MESSAGE)

        fingerprint = self.fingerprint(completed) if self.cache_enabled else ""
        if self.cache_enabled:
            cached = self._cache.get(record.user_id)
            if cached and cached[0] == fingerprint:
                logger.info(f"[ReportAggregator] Serving cached report for {record.user_id}")
                return ReportResult(
                    text=cached[1], topic_count=len(completed), generated=True, cached=True
                )

        result = await self.coach.holistic_report(completed)
        if not result.ok:
            return ReportResult(
                text=REPORT_FAILURE_MESSAGE, topic_count=len(completed), failed=True
            )

        if self.cache_enabled:
            self._cache[record.user_id] = (fingerprint, result.text)
        return ReportResult(text=result.text, topic_count=len(completed), generated=True)
