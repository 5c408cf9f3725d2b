"""
Tests for the content catalog.

Tests cover:
- TopicKey formatting and parsing
- Catalog validation (id shapes, duplicates)
- Lookups and iteration order
- The shipped catalog content
"""

import pytest

from innercompass.content import CATALOG
from innercompass.content.catalog import Catalog, Module, Topic, TopicKey, TopicKind
from innercompass.errors import CatalogError


def _module(module_id: str, *topic_ids: str) -> Module:
    return Module(
        id=module_id,
        title=module_id.title(),
        description="",
        icon="*",
        color="blue",
        topics=tuple(Topic(id=t, title=t, main_prompt=f"prompt {t}") for t in topic_ids),
    )


# =============================================================================
# TopicKey Tests
# =============================================================================

class TestTopicKey:
    """Tests for the structured topic key."""

    @pytest.mark.unit
    def test_str_joins_with_hyphen(self):
        assert str(TopicKey("values", "core-values")) == "values-core-values"

    @pytest.mark.unit
    def test_parse_splits_on_first_hyphen(self):
        """Topic ids may contain hyphens; module ids may not."""
        key = TopicKey.parse("values-core-values")
        assert key == TopicKey("values", "core-values")

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["values", "-core", "values-", ""])
    def test_parse_rejects_malformed(self, value):
        with pytest.raises(ValueError, match="Invalid topic key"):
            TopicKey.parse(value)

    @pytest.mark.unit
    def test_keys_are_hashable_and_comparable(self):
        progress = {TopicKey("talents", "flow-moments"): 1}
        assert progress[TopicKey("talents", "flow-moments")] == 1


# =============================================================================
# Validation Tests
# =============================================================================

class TestCatalogValidation:
    """Tests for catalog consistency checks."""

    @pytest.mark.unit
    def test_rejects_module_id_with_hyphen(self):
        with pytest.raises(CatalogError, match="Invalid module id"):
            Catalog([_module("core-values", "a")])

    @pytest.mark.unit
    def test_rejects_duplicate_module(self):
        with pytest.raises(CatalogError, match="Duplicate module"):
            Catalog([_module("values", "a"), _module("values", "b")])

    @pytest.mark.unit
    def test_rejects_duplicate_topic_key(self):
        with pytest.raises(CatalogError, match="Duplicate topic key"):
            Catalog([_module("values", "a", "a")])

    @pytest.mark.unit
    def test_rejects_uppercase_topic_id(self):
        with pytest.raises(CatalogError, match="Invalid topic id"):
            Catalog([_module("values", "Core")])

    @pytest.mark.unit
    def test_lookup_unknown_key_raises(self):
        catalog = Catalog([_module("values", "a")])
        with pytest.raises(CatalogError, match="Unknown topic"):
            catalog.lookup(TopicKey("values", "missing"))

    @pytest.mark.unit
    def test_iteration_follows_declaration_order(self):
        catalog = Catalog([_module("b", "y", "x"), _module("a", "z")])
        order = [str(m.key_for(t)) for m, t in catalog.iter_topics()]
        assert order == ["b-y", "b-x", "a-z"]
        assert catalog.total_topics == 3


# =============================================================================
# Shipped Catalog Tests
# =============================================================================

class TestShippedCatalog:
    """Tests for the content that ships with the app."""

    @pytest.mark.unit
    def test_three_modules_in_order(self):
        assert [m.id for m in CATALOG.modules] == ["values", "talents", "passions"]

    @pytest.mark.unit
    def test_talents_topics_are_questionnaires(self):
        talents = CATALOG.get_module("talents")
        assert talents.topics
        assert all(t.kind is TopicKind.QUESTIONNAIRE for t in talents.topics)

    @pytest.mark.unit
    def test_values_and_passions_are_open_ended(self):
        for module_id in ("values", "passions"):
            module = CATALOG.get_module(module_id)
            assert all(t.kind is TopicKind.OPEN_ENDED for t in module.topics)

    @pytest.mark.unit
    def test_every_topic_has_a_prompt(self):
        for _, topic in CATALOG.iter_topics():
            assert topic.main_prompt.strip()
            assert topic.title.strip()

    @pytest.mark.unit
    def test_contains_uses_structured_key(self):
        assert TopicKey("talents", "flow-moments") in CATALOG
        assert TopicKey("talents", "nope") not in CATALOG
