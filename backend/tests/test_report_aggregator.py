"""
Tests for the ReportAggregator.

Tests cover:
- No completed topics short-circuits without a coach call
- Only completed topics are sent, in catalog order
- Coach failures and the optional report cache
"""

import pytest

from innercompass.content import CATALOG
from innercompass.content.catalog import TopicKey
from innercompass.models.conversation import TopicProgress, UserRecord
from innercompass.services.report_aggregator import (
    NO_COMPLETED_TOPICS_MESSAGE,
    REPORT_FAILURE_MESSAGE,
    ReportAggregator,
)


def _done(user_summary: str, ai_summary: str = "insight") -> TopicProgress:
    return TopicProgress(is_completed=True, user_summary=user_summary, ai_summary=ai_summary)


@pytest.fixture
def record():
    return UserRecord(
        user_id="u1",
        display_name="小明",
        progress={
            # Inserted out of catalog order on purpose
            TopicKey("passions", "ideal-day"): _done("理想的一天"),
            TopicKey("values", "core-values"): _done("自由"),
            TopicKey("talents", "flow-moments"): TopicProgress(is_completed=False),
        },
    )


class TestCollectCompleted:
    """Tests for gathering report input."""

    @pytest.mark.unit
    def test_only_completed_in_catalog_order(self, fake_coach, record):
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=False)

        completed = aggregator.collect_completed(record)

        assert list(completed) == ["values-core-values", "passions-ideal-day"]
        entry = completed["values-core-values"]
        assert entry == {
            "moduleTitle": CATALOG.get_module("values").title,
            "topicTitle": CATALOG.get_module("values").get_topic("core-values").title,
            "userSummary": "自由",
            "aiSummary": "insight",
        }

    @pytest.mark.unit
    def test_unknown_keys_are_ignored(self, fake_coach):
        record = UserRecord(
            user_id="u1",
            display_name="x",
            progress={TopicKey("retired", "old-topic"): _done("old")},
        )
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=False)

        assert aggregator.collect_completed(record) == {}


class TestBuildReport:
    """Tests for report generation."""

    @pytest.mark.unit
    async def test_no_completed_topics_skips_coach(self, fake_coach):
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=False)

        result = await aggregator.build_report(UserRecord(user_id="u1", display_name="x"))

        assert result.text == NO_COMPLETED_TOPICS_MESSAGE
        assert not result.generated
        assert fake_coach.calls == []

    @pytest.mark.unit
    async def test_generates_from_completed_topics(self, fake_coach, record):
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=False)

        result = await aggregator.build_report(record)

        assert result.generated
        assert result.topic_count == 2
        assert fake_coach.count("report") == 1
        sent = fake_coach.calls[0][1]
        assert list(sent) == ["values-core-values", "passions-ideal-day"]

    @pytest.mark.unit
    async def test_regenerates_every_call_without_cache(self, fake_coach, record):
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=False)

        await aggregator.build_report(record)
        await aggregator.build_report(record)

        assert fake_coach.count("report") == 2

    @pytest.mark.unit
    async def test_failure_returns_message(self, fake_coach, record):
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=False)
        fake_coach.fail = True

        result = await aggregator.build_report(record)

        assert result.failed
        assert result.text == REPORT_FAILURE_MESSAGE


class TestReportCache:
    """Tests for the opt-in report cache."""

    @pytest.mark.unit
    async def test_cache_hit_for_unchanged_input(self, fake_coach, record):
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=True)

        first = await aggregator.build_report(record)
        second = await aggregator.build_report(record)

        assert fake_coach.count("report") == 1
        assert second.cached
        assert second.text == first.text

    @pytest.mark.unit
    async def test_changed_summary_invalidates_cache(self, fake_coach, record):
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=True)
        await aggregator.build_report(record)

        changed = record.with_progress(TopicKey("talents", "flow-moments"), _done("写代码"))
        result = await aggregator.build_report(changed)

        assert fake_coach.count("report") == 2
        assert not result.cached
        assert result.topic_count == 3

    @pytest.mark.unit
    async def test_failures_are_not_cached(self, fake_coach, record):
        aggregator = ReportAggregator(CATALOG, fake_coach, cache_enabled=True)
        fake_coach.fail = True
        await aggregator.build_report(record)

        fake_coach.fail = False
        result = await aggregator.build_report(record)

        assert result.generated
        assert fake_coach.count("report") == 2
