"""Core domain logic for Product Advisor."""

from .config import Config, load_config
from .errors import (
    AdvisorError,
    ConfigError,
    MalformedResponseError,
    StorageError,
    TransportError,
)
from .gateway import DispatchGateway
from .models import (
    CompletionResult,
    ConversationMessage,
    Lexicon,
    Persona,
    Role,
    TransportSettings,
    TurnOutcome,
    TurnState,
    UserProfile,
)
from .conversation import ConversationStore, NameExtractor, TopicClassifier
from .session_controller import SessionController
from .storage import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore

__all__ = [
    "Config",
    "load_config",
    "AdvisorError",
    "ConfigError",
    "MalformedResponseError",
    "StorageError",
    "TransportError",
    "DispatchGateway",
    "CompletionResult",
    "ConversationMessage",
    "Lexicon",
    "Persona",
    "Role",
    "TransportSettings",
    "TurnOutcome",
    "TurnState",
    "UserProfile",
    "ConversationStore",
    "NameExtractor",
    "TopicClassifier",
    "SessionController",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
]
