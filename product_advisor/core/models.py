"""Domain models for Product Advisor."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class TurnState(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    SHORT_CIRCUIT_GREETING = "short_circuit_greeting"
    SHORT_CIRCUIT_OUT_OF_SCOPE = "short_circuit_out_of_scope"
    AWAITING_REMOTE_RESPONSE = "awaiting_remote_response"


class TurnOutcome(str, Enum):
    """How a single user input was resolved."""

    REJECTED = "rejected"
    GREETING = "greeting"
    OUT_OF_SCOPE = "out_of_scope"
    COMPLETED = "completed"
    NOT_CONFIGURED = "not_configured"
    FAILED = "failed"


@dataclass
class ConversationMessage:
    role: Role
    content: str
    timestamp: Optional[datetime] = None

    def to_wire(self) -> Dict[str, str]:
        """Shape sent to the completion service (no timestamps)."""
        return {"role": self.role.value, "content": self.content}

    def to_record(self) -> Dict[str, Any]:
        """Shape written to the key-value store."""
        return {
            "role": self.role.value,
            "content": self.content,
            "time": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass
class UserProfile:
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or "Guest"


@dataclass
class CompletionResult:
    """Normalized payload returned by the dispatch gateway."""

    content: str
    transport: str
    degraded: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Lexicon:
    greetings: tuple[str, ...]
    topic_keywords: tuple[str, ...]


@dataclass(frozen=True)
class Persona:
    """Prompt, canned replies and lexicons that define the advisor's behaviour."""

    system_prompt: str
    welcome: str
    greeting_reply: str
    refusal_reply: str
    not_configured_reply: str
    apology_reply: str
    name_ack_template: str
    lexicon: Lexicon
    assistant_label: str = "Advisor"

    def name_ack(self, name: str) -> str:
        return self.name_ack_template.format(name=name)


@dataclass
class TransportSettings:
    relay_url: Optional[str] = None
    api_key: Optional[str] = None
    provider_url: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-4o"
    max_tokens: int = 300
    timeout: float = 30.0

    def describe(self) -> str:
        if self.relay_url:
            return f"relay {self.relay_url}"
        if self.api_key:
            return f"direct provider {self.provider_url} ({self.model})"
        return "no transport configured"


@dataclass
class PastQuestionLog:
    entries: List[str] = field(default_factory=list)

    def append(self, text: str) -> None:
        self.entries.append(text)

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)
