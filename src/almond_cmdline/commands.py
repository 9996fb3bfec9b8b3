"""Escape command grammar for the shell."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from almond_cmdline.errors import MalformedEscapeArgument

ESCAPE_PREFIX = "\\"
CHOICE_RE = re.compile(r"[+-]?[0-9]+")

HELP_LINES: tuple[str, ...] = (
    "Available commands:",
    "\\q : quit",
    "\\r <json> : send json to Almond",
    "\\c <number> : make a choice",
    "\\t <code> : send ThingTalk to Almond",
    "\\a list : list apps",
    "\\a stop <uuid> : stop app",
    "\\d list : list devices",
    "\\? or \\h : show this help",
    "Any other command is interpreted as an English sentence and sent to Almond",
)


@dataclass(frozen=True)
class EscapeCommand:
    """One backslash command line."""

    letter: str  # empty when the line is a lone backslash
    rest: str
    raw: str


@dataclass(frozen=True)
class SubCommand:
    """Sub-command of \\a and \\d, e.g. ``stop <id>``."""

    name: str
    param: str | None = None


def parse_escape_command(line: str) -> EscapeCommand | None:
    """Return the escape command in ``line``, or None for free text."""

    if not line.startswith(ESCAPE_PREFIX):
        return None
    # the argument starts after the letter and one separating space
    return EscapeCommand(letter=line[1:2], rest=line[3:], raw=line)


def split_subcommand(rest: str) -> SubCommand:
    words = rest.split()
    if not words:
        return SubCommand(name="")
    return SubCommand(name=words[0], param=words[1] if len(words) > 1 else None)


def parse_choice(rest: str) -> int:
    """Parse the index of a \\c command."""

    text = rest.strip()
    if CHOICE_RE.fullmatch(text) is None:
        raise MalformedEscapeArgument("c", text, "an integer choice index")
    return int(text)


def choice_payload(index: int) -> str:
    """Build the parsed command that answers a choice question."""

    return json.dumps({"answer": {"type": "Choice", "value": index}})
