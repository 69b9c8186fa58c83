"""Turn state machine mediating between the user and the completion service."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..chat_adapters.i_presenter import IPresenter
from .conversation import ConversationStore, NameExtractor, TopicClassifier
from .errors import ConfigError, TransportError
from .gateway import DispatchGateway
from .models import ConversationMessage, Persona, Role, TurnOutcome, TurnState, utc_now

LOGGER = logging.getLogger(__name__)


class SessionController:
    """Central orchestrator for one conversation session.

    Turns are serialized: a submission that arrives while another turn is
    awaiting the completion service waits for it to finish, then runs as its
    own complete turn.
    """

    def __init__(
        self,
        *,
        store: ConversationStore,
        gateway: DispatchGateway,
        presenter: IPresenter,
        persona: Persona,
        classifier: Optional[TopicClassifier] = None,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._presenter = presenter
        self._persona = persona
        self._classifier = classifier or TopicClassifier(persona.lexicon)
        self._state = TurnState.IDLE
        self._turn_lock = asyncio.Lock()

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def store(self) -> ConversationStore:
        return self._store

    def start(self) -> bool:
        """Restore persisted state and greet the user.

        Restored history is kept as context for the completion service but
        is not re-rendered; the UI always opens on the welcome message.
        """
        restored = self._store.initialize()
        if restored:
            LOGGER.debug("Resumed conversation with %d stored message(s)", len(self._store.snapshot()))
        if self._store.profile.name:
            self._presenter.user_name_changed(self._store.profile.name)
        self._presenter.assistant_message_rendered(self._persona.welcome, utc_now())
        return restored

    async def handle_input(self, text: Optional[str]) -> TurnOutcome:
        cleaned = (text or "").strip()
        if not cleaned:
            LOGGER.debug("Ignoring empty input")
            return TurnOutcome.REJECTED

        async with self._turn_lock:
            try:
                return await self._run_turn(cleaned)
            finally:
                self._state = TurnState.IDLE

    async def rename(self, name: Optional[str]) -> None:
        """Set or clear the display name, acknowledging a new name in the conversation."""
        async with self._turn_lock:
            self._store.set_user_name(name)
            current = self._store.profile.name
            self._presenter.user_name_changed(current)
            LOGGER.debug("User name set to %s", current or "Guest")
            if current:
                self._reply(self._persona.name_ack(current))

    async def reset(self) -> None:
        async with self._turn_lock:
            self._store.reset()
            self._presenter.session_reset()
            self._presenter.user_name_changed(None)
            self._presenter.assistant_message_rendered(self._persona.welcome, utc_now())

    async def _run_turn(self, text: str) -> TurnOutcome:
        self._state = TurnState.CLASSIFYING

        user_message = ConversationMessage(role=Role.USER, content=text, timestamp=utc_now())
        self._store.append(user_message)
        self._presenter.user_message_rendered(text, user_message.timestamp)

        name = NameExtractor.extract_name(text)
        if name:
            self._store.set_user_name(name)
            self._presenter.user_name_changed(name)
            LOGGER.debug("Detected user name %s", name)

        self._store.record_question(text)
        self._store.persist()

        if self._classifier.is_greeting(text):
            self._state = TurnState.SHORT_CIRCUIT_GREETING
            self._reply(self._persona.greeting_reply)
            return TurnOutcome.GREETING

        if not self._classifier.is_related(text):
            self._state = TurnState.SHORT_CIRCUIT_OUT_OF_SCOPE
            LOGGER.debug("Refusing out-of-scope input")
            self._reply(self._persona.refusal_reply)
            return TurnOutcome.OUT_OF_SCOPE

        self._state = TurnState.AWAITING_REMOTE_RESPONSE
        return await self._dispatch()

    async def _dispatch(self) -> TurnOutcome:
        self._presenter.pending_indicator_shown()
        try:
            result = await self._gateway.send(self._store.messages)
        except ConfigError as exc:
            LOGGER.warning("Completion service not configured: %s", exc)
            content, outcome = self._persona.not_configured_reply, TurnOutcome.NOT_CONFIGURED
        except TransportError as exc:
            LOGGER.error("Completion request failed (status %s): %s", exc.status_code, exc.body)
            content, outcome = self._persona.apology_reply, TurnOutcome.FAILED
        except Exception:
            LOGGER.exception("Unexpected failure while dispatching conversation")
            content, outcome = self._persona.apology_reply, TurnOutcome.FAILED
        else:
            if result.degraded:
                LOGGER.warning("Completion via %s returned no usable content", result.transport)
            content, outcome = result.content, TurnOutcome.COMPLETED
        finally:
            self._presenter.pending_indicator_cleared()

        self._reply(content)
        return outcome

    def _reply(self, text: str) -> None:
        message = ConversationMessage(role=Role.ASSISTANT, content=text, timestamp=utc_now())
        self._store.append(message)
        self._presenter.assistant_message_rendered(text, message.timestamp)
        self._store.persist()
