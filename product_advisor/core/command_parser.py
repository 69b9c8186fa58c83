"""REPL command table and parser.

Console input starting with ``!`` is a command; anything else is a chat
message for the advisor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

COMMAND_PREFIX = "!"


@dataclass(frozen=True)
class ReplCommand:
    name: str
    usage: str
    description: str
    aliases: Tuple[str, ...] = ()


COMMANDS: Tuple[ReplCommand, ...] = (
    ReplCommand("name", "!name [NAME]", "Set your display name, or clear it when NAME is omitted."),
    ReplCommand("reset", "!reset", "Clear the conversation, past questions, and stored name."),
    ReplCommand("help", "!help", "Show this help."),
    ReplCommand(
        "quit",
        "!quit",
        "Leave the chat (the conversation is kept for next time).",
        aliases=("exit", "q"),
    ),
)

_LOOKUP: Dict[str, str] = {
    key: command.name for command in COMMANDS for key in (command.name, *command.aliases)
}


@dataclass(frozen=True)
class ParsedCommand:
    """A command typed at the prompt.

    ``name`` is the canonical command name when the word is known (aliases
    resolved), otherwise the lowercased word as typed. ``argument`` is the
    rest of the line with surrounding whitespace removed and inner spacing
    left alone, so a name like "Anna  Maria" survives intact.
    """

    name: str
    argument: str = ""
    known: bool = True


def parse_command(text: str) -> Optional[ParsedCommand]:
    normalized = text.strip()
    if not normalized.startswith(COMMAND_PREFIX):
        return None

    body = normalized[len(COMMAND_PREFIX):].strip()
    if not body:
        return None

    word, _, argument = body.partition(" ")
    word = word.lower()
    canonical = _LOOKUP.get(word)
    return ParsedCommand(
        name=canonical or word,
        argument=argument.strip(),
        known=canonical is not None,
    )


def help_lines() -> List[str]:
    width = max(len(command.usage) for command in COMMANDS)
    lines = []
    for command in COMMANDS:
        line = f"  {command.usage.ljust(width)}  {command.description}"
        if command.aliases:
            line += " Aliases: " + ", ".join(COMMAND_PREFIX + alias for alias in command.aliases)
        lines.append(line)
    return lines
