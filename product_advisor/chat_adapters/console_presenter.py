"""Terminal presenter used by the CLI."""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Optional, TextIO

from .i_presenter import IPresenter


def format_time(value: Optional[datetime] = None) -> str:
    moment = (value or datetime.now()).astimezone()
    return moment.strftime("%H:%M")


class ConsolePresenter(IPresenter):
    def __init__(self, assistant_label: str = "Advisor", stream: TextIO | None = None) -> None:
        self._assistant_label = assistant_label
        self._stream = stream or sys.stdout
        self._user_label = "You"
        self._pending = False

    def user_message_rendered(self, text: str, time: Optional[datetime]) -> None:
        self._write(f"[{format_time(time)}] {self._user_label}: {text}")

    def assistant_message_rendered(self, text: str, time: Optional[datetime]) -> None:
        self._write(f"[{format_time(time)}] {self._assistant_label}: {text}")

    def pending_indicator_shown(self) -> None:
        self._pending = True
        self._stream.write(f"{self._assistant_label}: Thinking...\r")
        self._stream.flush()

    def pending_indicator_cleared(self) -> None:
        if self._pending:
            # Blank out the "Thinking..." line before the reply is printed.
            width = len(self._assistant_label) + len(": Thinking...")
            self._stream.write(" " * width + "\r")
            self._stream.flush()
        self._pending = False

    def session_reset(self) -> None:
        self._write("-" * 60)
        self._write("Conversation cleared.")

    def user_name_changed(self, name: Optional[str]) -> None:
        self._user_label = name or "You"
        self._write(f"(Signed in as {name or 'Guest'})")

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()
