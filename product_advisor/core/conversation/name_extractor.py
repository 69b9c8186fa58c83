"""Best-effort extraction of a self-introduced name."""

from __future__ import annotations

import re
from typing import Optional

NAME_PATTERN = re.compile(
    r"\b(?:my name is|i'm|i am|this is)\s+([A-Za-z][A-Za-z'\- ]{0,40})",
    re.IGNORECASE,
)


class NameExtractor:
    """Pulls a name out of phrases such as "my name is Alex"."""

    @staticmethod
    def extract_name(text: Optional[str]) -> Optional[str]:
        """
        Return the name the user introduced themselves with, if any.

        The captured name stops at the first character that is not a letter,
        apostrophe, hyphen, or space, so "My name is Alex, suggest a shampoo"
        yields "Alex". No dictionary validation is performed.
        """
        if not text:
            return None
        match = NAME_PATTERN.search(text)
        if not match:
            return None
        name = match.group(1).strip()
        return name or None
