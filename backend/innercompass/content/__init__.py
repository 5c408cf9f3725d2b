"""Static self-discovery content."""

from innercompass.content.catalog import Catalog, Module, Topic, TopicKey, TopicKind
from innercompass.content.data import CATALOG

__all__ = [
    "CATALOG",
    "Catalog",
    "Module",
    "Topic",
    "TopicKey",
    "TopicKind",
]
