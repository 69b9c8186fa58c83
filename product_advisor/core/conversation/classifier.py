"""Classify user input as greeting, in-scope, or out-of-scope."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..models import Lexicon

LOGGER = logging.getLogger(__name__)


def classify_greeting(text: Optional[str], greetings: Iterable[str]) -> bool:
    """
    Returns True if a greeting from the lexicon appears as a whole token.

    A greeting matches when the lowercased text:
    1. Equals it exactly, OR
    2. Starts with it followed by a space, OR
    3. Contains it with a space on both sides, OR
    4. Ends with it preceded by a space

    "hi" therefore matches "hi there" but never "this" or "chip".

    Args:
        text: Raw user input
        greetings: Lowercased greeting words or phrases

    Returns:
        True if the input looks like a greeting
    """
    if not text:
        return False
    lowered = text.lower()
    return any(
        lowered == greeting
        or lowered.startswith(greeting + " ")
        or f" {greeting} " in lowered
        or lowered.endswith(" " + greeting)
        for greeting in greetings
    )


def classify_related(text: Optional[str], keywords: Iterable[str]) -> bool:
    """Returns True if any domain keyword is a case-insensitive substring of the text."""
    if not text:
        return False
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


class TopicClassifier:
    """Applies the greeting and topic lexicons of a persona to user input."""

    def __init__(self, lexicon: Lexicon) -> None:
        self._lexicon = lexicon

    @property
    def lexicon(self) -> Lexicon:
        return self._lexicon

    def is_greeting(self, text: Optional[str]) -> bool:
        return classify_greeting(text, self._lexicon.greetings)

    def is_related(self, text: Optional[str]) -> bool:
        return classify_related(text, self._lexicon.topic_keywords)
