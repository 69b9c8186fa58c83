"""Shared fixtures for Product Advisor tests."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import pytest

from product_advisor.chat_adapters.i_presenter import IPresenter
from product_advisor.core.conversation import ConversationStore
from product_advisor.core.gateway import DispatchGateway
from product_advisor.core.models import TransportSettings
from product_advisor.core.persona import load_persona
from product_advisor.core.session_controller import SessionController
from product_advisor.core.storage import InMemoryKeyValueStore


class RecordingPresenter(IPresenter):
    """Captures presentation events emitted by the controller."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def user_message_rendered(self, text: str, time: Optional[datetime]) -> None:
        self.events.append(("user", text))

    def assistant_message_rendered(self, text: str, time: Optional[datetime]) -> None:
        self.events.append(("assistant", text))

    def pending_indicator_shown(self) -> None:
        self.events.append(("pending_shown", None))

    def pending_indicator_cleared(self) -> None:
        self.events.append(("pending_cleared", None))

    def session_reset(self) -> None:
        self.events.append(("reset", None))

    def user_name_changed(self, name: Optional[str]) -> None:
        self.events.append(("name", name))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def assistant_texts(self) -> list[str]:
        return [payload for name, payload in self.events if name == "assistant"]


@pytest.fixture
def persona():
    return load_persona()


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv_store, persona):
    return ConversationStore(kv_store, system_prompt=persona.system_prompt)


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def unconfigured_gateway():
    return DispatchGateway(TransportSettings())


@pytest.fixture
def relay_gateway():
    return DispatchGateway(TransportSettings(relay_url="https://relay.example.test/"))


@pytest.fixture
def make_controller(store, presenter, persona):
    def _make(gateway: DispatchGateway) -> SessionController:
        return SessionController(
            store=store,
            gateway=gateway,
            presenter=presenter,
            persona=persona,
        )

    return _make
