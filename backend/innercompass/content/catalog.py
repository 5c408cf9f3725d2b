"""Content catalog: the read-only registry of modules, topics and questions.

The catalog is plain data loaded once at import time and shared by every
session. Lookups go through ``TopicKey`` so that callers never have to build
or split ``"<module>-<topic>"`` strings by hand.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from innercompass.errors import CatalogError

# Module ids are joined to topic ids with a hyphen, so they must not contain one
_MODULE_ID_RE = re.compile(r"^[a-z][a-z0-9_]*$")
_TOPIC_ID_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class TopicKind(str, Enum):
    """How a topic's conversation is driven."""

    QUESTIONNAIRE = "questionnaire"  # scripted questions asked one at a time
    OPEN_ENDED = "open_ended"  # every turn goes to the coach


@dataclass(frozen=True)
class TopicKey:
    """Structured (module, topic) identifier."""

    module_id: str
    topic_id: str

    def __str__(self) -> str:
        return f"{self.module_id}-{self.topic_id}"

    @classmethod
    def parse(cls, value: str) -> "TopicKey":
        """Parse the serialized ``"<moduleId>-<topicId>"`` form."""
        module_id, sep, topic_id = value.partition("-")
        if not sep or not module_id or not topic_id:
            raise ValueError(f"Invalid topic key: {value!r}")
        return cls(module_id, topic_id)


@dataclass(frozen=True)
class Topic:
    """A single reflection topic inside a module."""

    id: str
    title: str
    main_prompt: str
    questions: tuple[str, ...] = ()
    intro: str | None = None
    kind: TopicKind = TopicKind.OPEN_ENDED

    @property
    def is_questionnaire(self) -> bool:
        return self.kind is TopicKind.QUESTIONNAIRE


@dataclass(frozen=True)
class Module:
    """A group of topics (Values, Talents, Passions)."""

    id: str
    title: str
    description: str
    icon: str
    color: str
    topics: tuple[Topic, ...] = field(default_factory=tuple)

    def key_for(self, topic: Topic) -> TopicKey:
        return TopicKey(self.id, topic.id)

    def get_topic(self, topic_id: str) -> Topic | None:
        return next((t for t in self.topics if t.id == topic_id), None)


class Catalog:
    """Ordered, validated collection of modules."""

    def __init__(self, modules: tuple[Module, ...] | list[Module]) -> None:
        self.modules: tuple[Module, ...] = tuple(modules)
        self._validate()
        self._index: dict[TopicKey, tuple[Module, Topic]] = {
            module.key_for(topic): (module, topic)
            for module, topic in self.iter_topics()
        }

    def _validate(self) -> None:
        seen_modules: set[str] = set()
        seen_keys: set[str] = set()
        for module in self.modules:
            if not _MODULE_ID_RE.match(module.id):
                raise CatalogError(f"Invalid module id {module.id!r}")
            if module.id in seen_modules:
                raise CatalogError(f"Duplicate module id {module.id!r}")
            seen_modules.add(module.id)

            for topic in module.topics:
                if not _TOPIC_ID_RE.match(topic.id):
                    raise CatalogError(f"Invalid topic id {topic.id!r} in {module.id}")
                key = str(module.key_for(topic))
                if key in seen_keys:
                    raise CatalogError(f"Duplicate topic key {key!r}")
                seen_keys.add(key)

    def iter_topics(self) -> Iterator[tuple[Module, Topic]]:
        """Yield (module, topic) pairs in catalog order."""
        for module in self.modules:
            for topic in module.topics:
                yield module, topic

    def get_module(self, module_id: str) -> Module | None:
        return next((m for m in self.modules if m.id == module_id), None)

    def lookup(self, key: TopicKey) -> tuple[Module, Topic]:
        """Return the module and topic for a key, or raise CatalogError."""
        try:
            return self._index[key]
        except KeyError:
            raise CatalogError(f"Unknown topic {key}") from None

    def __contains__(self, key: object) -> bool:
        return key in self._index

    @property
    def total_topics(self) -> int:
        return len(self._index)
