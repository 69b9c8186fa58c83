"""Conversation management - classification, name extraction, and session state."""

from .classifier import TopicClassifier, classify_greeting, classify_related
from .name_extractor import NameExtractor
from .store import ConversationStore

__all__ = [
    "TopicClassifier",
    "classify_greeting",
    "classify_related",
    "NameExtractor",
    "ConversationStore",
]
