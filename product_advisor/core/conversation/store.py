"""Own the conversation log and its persistence round-trip."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from ..models import ConversationMessage, PastQuestionLog, Role, UserProfile
from ..storage import KeyValueStore

LOGGER = logging.getLogger(__name__)

MESSAGES_KEY = "messages"
PAST_QUESTIONS_KEY = "pastQuestions"
USER_NAME_KEY = "userName"

_RESTORABLE_ROLES = {Role.USER.value, Role.ASSISTANT.value}


class ConversationStore:
    """Session state: message log, past questions and user profile.

    Index 0 of the log is always the system message. It is never persisted
    and cannot be replaced except by constructing a new store.
    """

    def __init__(self, kv_store: KeyValueStore, system_prompt: str) -> None:
        self._kv = kv_store
        self._system = ConversationMessage(role=Role.SYSTEM, content=system_prompt)
        self._messages: List[ConversationMessage] = [self._system]
        self._past_questions = PastQuestionLog()
        self._profile = UserProfile()

    @property
    def messages(self) -> list[ConversationMessage]:
        return list(self._messages)

    @property
    def system_message(self) -> ConversationMessage:
        return self._system

    @property
    def past_questions(self) -> list[str]:
        return list(self._past_questions.entries)

    @property
    def profile(self) -> UserProfile:
        return self._profile

    def initialize(self) -> bool:
        """Start fresh and restore whatever the key-value store holds.

        Returns True if any prior conversation was restored.
        """
        self._messages = [self._system]
        self._past_questions.clear()
        self._profile = UserProfile()
        return self.load()

    def append(self, message: ConversationMessage) -> None:
        if message.role == Role.SYSTEM:
            raise ValueError("The system message is fixed at initialization")
        self._messages.append(message)

    def record_question(self, text: str) -> None:
        self._past_questions.append(text)

    def snapshot(self) -> list[dict[str, Any]]:
        """Persistable records for every message after the system message."""
        return [message.to_record() for message in self._messages[1:]]

    def restore(self, snapshot: Iterable[Any]) -> int:
        """Replace the log after the system message with ``snapshot``.

        Entries without a usable role and content are skipped rather than
        aborting the restore. Returns the number of entries restored.
        """
        restored: List[ConversationMessage] = []
        skipped = 0
        for entry in snapshot:
            message = _message_from_record(entry)
            if message is None:
                skipped += 1
                continue
            restored.append(message)

        if skipped:
            LOGGER.warning("Skipped %d malformed message(s) during restore", skipped)
        self._messages = [self._system, *restored]
        return len(restored)

    def reset(self) -> None:
        self._messages = [self._system]
        self._past_questions.clear()
        self._profile = UserProfile()
        for key in (MESSAGES_KEY, PAST_QUESTIONS_KEY, USER_NAME_KEY):
            try:
                self._kv.remove(key)
            except Exception:
                LOGGER.warning("Failed to remove %s from storage", key, exc_info=True)
        LOGGER.info("Conversation reset")

    def set_user_name(self, name: Optional[str]) -> bool:
        """Update the profile name and persist it. A blank name clears it."""
        cleaned = name.strip() if name else ""
        self._profile.name = cleaned or None
        try:
            if self._profile.name:
                self._kv.set(USER_NAME_KEY, self._profile.name)
            else:
                self._kv.remove(USER_NAME_KEY)
        except Exception:
            LOGGER.warning("Failed to persist user name", exc_info=True)
            return False
        return True

    def persist(self) -> bool:
        """Write the snapshot and past questions. Failures are logged, not raised."""
        try:
            self._kv.set(MESSAGES_KEY, json.dumps(self.snapshot(), ensure_ascii=False))
            self._kv.set(PAST_QUESTIONS_KEY, json.dumps(self._past_questions.entries, ensure_ascii=False))
        except Exception:
            LOGGER.warning("Failed to persist conversation; continuing in memory", exc_info=True)
            return False
        return True

    def load(self) -> bool:
        try:
            raw_messages = self._kv.get(MESSAGES_KEY)
            raw_questions = self._kv.get(PAST_QUESTIONS_KEY)
            stored_name = self._kv.get(USER_NAME_KEY)
        except Exception:
            LOGGER.warning("Failed to read persisted conversation", exc_info=True)
            return False

        if stored_name and stored_name.strip():
            self._profile.name = stored_name.strip()

        questions = _decode_list(raw_questions, PAST_QUESTIONS_KEY)
        self._past_questions.entries = [q for q in questions if isinstance(q, str)]

        records = _decode_list(raw_messages, MESSAGES_KEY)
        if not records:
            return False
        count = self.restore(records)
        LOGGER.info("Restored %d message(s) from storage", count)
        return count > 0


def _decode_list(raw: Optional[str], key: str) -> list[Any]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Ignoring unreadable %s in storage", key)
        return []
    if not isinstance(data, list):
        LOGGER.warning("Ignoring %s in storage: expected a list", key)
        return []
    return data


def _message_from_record(entry: Any) -> Optional[ConversationMessage]:
    if not isinstance(entry, dict):
        return None
    role = entry.get("role")
    content = entry.get("content")
    if role not in _RESTORABLE_ROLES or not isinstance(content, str):
        return None
    return ConversationMessage(
        role=Role(role),
        content=content,
        timestamp=_parse_time(entry.get("time")),
    )


def _parse_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
