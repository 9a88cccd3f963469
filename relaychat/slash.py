"""Slash-command parsing and the built-in command registry for the chat TUI.

Parsing a line of input yields a :class:`ParsedCommand`. Resolving it against
:class:`CommandRegistry` yields a :class:`SlashOutcome`, which describes what
the TUI should do. Nothing here performs IO or mutates state.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from .conversation import Agent

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "-_")

_AGENTS = {"claude": Agent.CLAUDE, "gpt": Agent.GPT, "codex": Agent.CODEX}


@dataclass(frozen=True)
class ParsedCommand:
    """A parsed ``/name args...`` line."""

    name: str
    args: str = ""


def _is_valid_name(name: str) -> bool:
    return bool(name) and all(ch in _NAME_CHARS for ch in name)


def parse(text: str) -> ParsedCommand | None:
    """Parse a chat-input line into a command, or return None if it is not one.

    The line must start with ``/`` (no leading whitespace) followed by a name
    of ASCII letters, digits, hyphens or underscores. ``/?`` is an alias for
    ``/help``. Arguments are everything after the first whitespace, trimmed.
    """
    if not text.startswith("/"):
        return None
    rest = text[1:]

    split_at = next((i for i, ch in enumerate(rest) if ch.isspace()), None)
    if split_at is None:
        name_raw, args = rest, ""
    else:
        name_raw, args = rest[:split_at], rest[split_at:].strip()

    if not name_raw:
        return None
    if name_raw == "?":
        return ParsedCommand(name="help", args=args)
    if not _is_valid_name(name_raw):
        return None
    return ParsedCommand(name=name_raw.lower(), args=args)


class Severity(Enum):
    """Severity of an inline system message produced by a command."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class SlashCommand(Enum):
    """The built-in command kinds the TUI knows how to execute."""

    HELP = "help"
    HOTKEYS = "hotkeys"
    NEW = "new"
    RESUME = "resume"
    COMPACT = "compact"
    COPY = "copy"
    EXPORT = "export"
    HANDOFF = "handoff"
    FOCUS = "focus"
    SKILLS = "skills"
    QUIT = "quit"


@dataclass(frozen=True)
class SlashOutcome:
    """What the TUI should do after a command has been resolved.

    ``kind`` selects the action; the other fields carry its data and are
    ``None`` when the action does not use them.
    """

    class Kind(Enum):
        CONSUMED = "consumed"
        SHOW_MESSAGE = "show_message"
        SHOW_HELP = "show_help"
        SHOW_HOTKEYS = "show_hotkeys"
        CLEAR_CONVERSATION = "clear_conversation"
        REQUIRE_SESSION_PICK = "require_session_pick"
        COMPACT = "compact"
        COPY = "copy"
        EXPORT = "export"
        HANDOFF = "handoff"
        FOCUS = "focus"
        SHOW_SKILLS = "show_skills"
        SKILL = "skill"
        QUIT = "quit"

    kind: SlashOutcome.Kind
    message: str | None = None
    severity: Severity | None = None
    path: Path | None = None
    agent: Agent | None = None
    name: str | None = None
    args: str | None = None

    @classmethod
    def simple(cls, kind: SlashOutcome.Kind) -> SlashOutcome:
        return cls(kind=kind)

    @classmethod
    def show_message(cls, message: str, severity: Severity) -> SlashOutcome:
        return cls(kind=cls.Kind.SHOW_MESSAGE, message=message, severity=severity)

    @classmethod
    def export(cls, path: Path | None) -> SlashOutcome:
        return cls(kind=cls.Kind.EXPORT, path=path)

    @classmethod
    def handoff(cls, agent: Agent) -> SlashOutcome:
        return cls(kind=cls.Kind.HANDOFF, agent=agent)

    @classmethod
    def focus(cls, agent: Agent) -> SlashOutcome:
        return cls(kind=cls.Kind.FOCUS, agent=agent)

    @classmethod
    def skill(cls, name: str, args: str) -> SlashOutcome:
        return cls(kind=cls.Kind.SKILL, name=name, args=args)


@dataclass(frozen=True)
class BuiltinEntry:
    """One built-in command as listed by ``/help``."""

    name: str
    description: str
    kind: SlashCommand
    args_hint: str = ""


BUILTIN_COMMANDS: tuple[BuiltinEntry, ...] = (
    BuiltinEntry("help", "Show this command list.", SlashCommand.HELP),
    BuiltinEntry("hotkeys", "Show keyboard shortcuts.", SlashCommand.HOTKEYS),
    BuiltinEntry(
        "new",
        "Start a new conversation (clears history + session ids).",
        SlashCommand.NEW,
    ),
    BuiltinEntry(
        "resume",
        "Open the session picker and switch to a saved conversation.",
        SlashCommand.RESUME,
    ),
    BuiltinEntry(
        "compact",
        "Compact the GPT replay buffer by summarizing older turns.",
        SlashCommand.COMPACT,
    ),
    BuiltinEntry(
        "copy", "Copy the last assistant message to the clipboard.", SlashCommand.COPY
    ),
    BuiltinEntry(
        "export",
        "Export the current conversation as a self-contained HTML file.",
        SlashCommand.EXPORT,
        "[path]",
    ),
    BuiltinEntry(
        "handoff",
        "Rotate focus AND hand off the last assistant turn to <agent>.",
        SlashCommand.HANDOFF,
        "claude | gpt | codex",
    ),
    BuiltinEntry(
        "focus",
        "Rotate focus to <agent> without firing a handoff.",
        SlashCommand.FOCUS,
        "claude | gpt | codex",
    ),
    BuiltinEntry(
        "skills",
        "List loaded skills (handoff recipes) and any load errors.",
        SlashCommand.SKILLS,
    ),
    BuiltinEntry("quit", "Exit the chat TUI.", SlashCommand.QUIT),
)


class CommandRegistry:
    """Lookup over the built-in commands, in display order."""

    def __init__(self, entries: tuple[BuiltinEntry, ...] = BUILTIN_COMMANDS) -> None:
        self._entries = tuple(entries)

    @classmethod
    def builtins(cls) -> CommandRegistry:
        return cls(BUILTIN_COMMANDS)

    def entries(self) -> tuple[BuiltinEntry, ...]:
        return self._entries

    def find(self, name: str) -> BuiltinEntry | None:
        """Case-insensitive (ASCII) lookup by name."""
        if not name.isascii():
            return None
        wanted = name.lower()
        return next((e for e in self._entries if e.name.lower() == wanted), None)


class _SkillLookup(Protocol):
    def find(self, name: str) -> Any: ...


def parse_agent(raw: str) -> Agent:
    """Parse ``claude``, ``gpt`` or ``codex`` (case-insensitive).

    Raises ValueError with a user-facing message on a missing or unknown name.
    """
    trimmed = raw.strip()
    if not trimmed:
        raise ValueError("missing agent. available: claude, gpt, codex.")
    lowered = trimmed.lower()
    agent = _AGENTS.get(lowered)
    if agent is None:
        raise ValueError(f'unknown agent "{lowered}". available: claude, gpt, codex.')
    return agent


def _agent_outcome(cmd: ParsedCommand, build) -> SlashOutcome:
    try:
        agent = parse_agent(cmd.args)
    except ValueError as exc:
        return SlashOutcome.show_message(str(exc), Severity.ERROR)
    return build(agent)


_SIMPLE_OUTCOMES = {
    SlashCommand.HELP: SlashOutcome.Kind.SHOW_HELP,
    SlashCommand.HOTKEYS: SlashOutcome.Kind.SHOW_HOTKEYS,
    SlashCommand.NEW: SlashOutcome.Kind.CLEAR_CONVERSATION,
    SlashCommand.RESUME: SlashOutcome.Kind.REQUIRE_SESSION_PICK,
    SlashCommand.COMPACT: SlashOutcome.Kind.COMPACT,
    SlashCommand.COPY: SlashOutcome.Kind.COPY,
    SlashCommand.SKILLS: SlashOutcome.Kind.SHOW_SKILLS,
    SlashCommand.QUIT: SlashOutcome.Kind.QUIT,
}


def _resolve(
    cmd: ParsedCommand, registry: CommandRegistry, skills: _SkillLookup | None
) -> SlashOutcome:
    entry = registry.find(cmd.name)
    if entry is not None:
        kind = entry.kind
        if kind in _SIMPLE_OUTCOMES:
            return SlashOutcome.simple(_SIMPLE_OUTCOMES[kind])
        if kind is SlashCommand.EXPORT:
            trimmed = cmd.args.strip()
            return SlashOutcome.export(Path(trimmed) if trimmed else None)
        if kind is SlashCommand.HANDOFF:
            return _agent_outcome(cmd, SlashOutcome.handoff)
        return _agent_outcome(cmd, SlashOutcome.focus)

    if skills is not None:
        skill = skills.find(cmd.name)
        if skill is not None:
            return SlashOutcome.skill(skill.name, cmd.args)

    return SlashOutcome.show_message(
        f"/{cmd.name}: unknown command. Try /help.", Severity.ERROR
    )


def resolve(cmd: ParsedCommand, registry: CommandRegistry) -> SlashOutcome:
    """Resolve a command against the built-ins only."""
    return _resolve(cmd, registry, None)


def resolve_with_skills(
    cmd: ParsedCommand, registry: CommandRegistry, skills: _SkillLookup
) -> SlashOutcome:
    """Resolve against built-ins first, then user-defined skills.

    Built-in names always shadow skills.
    """
    return _resolve(cmd, registry, skills)