"""Presenter abstraction for rendering conversation events."""

from __future__ import annotations

import abc
from datetime import datetime
from typing import Optional


class IPresenter(abc.ABC):
    """Consumes presentation events emitted by the session controller."""

    @abc.abstractmethod
    def user_message_rendered(self, text: str, time: Optional[datetime]) -> None:
        """Show a message the user sent."""

    @abc.abstractmethod
    def assistant_message_rendered(self, text: str, time: Optional[datetime]) -> None:
        """Show an assistant reply."""

    @abc.abstractmethod
    def pending_indicator_shown(self) -> None:
        """Show a transient "thinking" indicator while a remote call is outstanding."""

    @abc.abstractmethod
    def pending_indicator_cleared(self) -> None:
        """Remove the pending indicator."""

    @abc.abstractmethod
    def session_reset(self) -> None:
        """Clear everything rendered so far."""

    def user_name_changed(self, name: Optional[str]) -> None:
        """Update the displayed user name; None means Guest."""
