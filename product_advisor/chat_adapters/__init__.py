"""Presentation adapters."""

from .console_presenter import ConsolePresenter
from .i_presenter import IPresenter

__all__ = ["ConsolePresenter", "IPresenter"]
