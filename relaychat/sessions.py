"""Saved-conversation listing, titles and fuzzy filtering for the session picker."""

from __future__ import annotations

import json
import unicodedata
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable

from .conversation import Agent, Conversation, Role
from .fuzzy import fuzzy_score

_CONVERSATION_JSON = "conversation.json"
_TITLE_LIMIT = 80
_NO_MESSAGES = "(no messages)"


@dataclass
class SessionEntry:
    """Metadata about one saved conversation, used for display and search."""

    id: uuid.UUID
    updated_at: datetime
    title: str
    message_count: int
    agents: str

    def search_haystack(self) -> str:
        """Text the fuzzy filter searches: title, uuid and agent labels."""
        return f"{self.title} {self.id} {self.agents}"


def _read_conversation(path: Path) -> Conversation | None:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            return None
        return Conversation.from_dict(raw)
    except (OSError, ValueError, KeyError, TypeError, AttributeError):
        return None


def load_session_entries(harness_dir: str | Path) -> list[SessionEntry]:
    """List conversations under ``<harness_dir>/conversations/``, newest first.

    Directories that are not named by a uuid, or whose JSON cannot be read
    or parsed, are skipped. A missing directory yields an empty list.
    """
    conv_dir = Path(harness_dir) / "conversations"
    if not conv_dir.is_dir():
        return []

    entries: list[SessionEntry] = []
    for child in conv_dir.iterdir():
        try:
            conversation_id = uuid.UUID(child.name)
        except ValueError:
            continue
        json_path = child / _CONVERSATION_JSON
        if not json_path.is_file():
            continue
        conv = _read_conversation(json_path)
        if conv is None:
            continue
        entries.append(entry_from_conversation(conversation_id, conv))

    entries.sort(key=lambda e: e.updated_at, reverse=True)
    return entries


def entry_from_conversation(conversation_id: uuid.UUID, conv: Conversation) -> SessionEntry:
    """Build the picker entry for a loaded conversation."""
    return SessionEntry(
        id=conversation_id,
        updated_at=conv.updated_at,
        title=derive_title(conv),
        message_count=len(conv.turns),
        agents=derive_agent_labels(conv),
    )


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _decontrol(text: str) -> str:
    return "".join(" " if unicodedata.category(ch) == "Cc" else ch for ch in text)


def derive_title(conv: Conversation) -> str:
    """First non-blank line of the first user message, cleaned and truncated."""
    raw = next(
        (turn.content for turn in conv.turns if turn.role is Role.USER),
        _NO_MESSAGES,
    )
    line = next((ln for ln in _lines(raw) if ln.strip()), raw)
    return truncate_chars(_decontrol(line).strip(), _TITLE_LIMIT)


def derive_agent_labels(conv: Conversation) -> str:
    """Distinct participating agents in order of first appearance."""
    seen: list[Agent] = []
    for turn in conv.turns:
        if turn.agent not in seen:
            seen.append(turn.agent)
    if not seen:
        seen.append(conv.active_agent)
    return ", ".join(agent.label() for agent in seen)


def truncate_chars(text: str, limit: int) -> str:
    """Keep at most ``limit`` characters, marking a cut with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + "…"
    return text


def fuzzy_filter(entries: Iterable[SessionEntry], query: str) -> list[SessionEntry]:
    """Filter and rank entries by fuzzy match, best first.

    An empty query keeps the input order. Whitespace-separated tokens must
    all match; their scores are summed.
    """
    entries = list(entries)
    tokens = query.split()
    if not tokens:
        return entries

    scored: list[tuple[float, SessionEntry]] = []
    for entry in entries:
        haystack = entry.search_haystack()
        total = 0.0
        for token in tokens:
            score = fuzzy_score(token, haystack)
            if score is None:
                break
            total += score
        else:
            scored.append((total, entry))

    scored.sort(key=lambda pair: pair[0])
    return [entry for _, entry in scored]


def format_age(delta: timedelta) -> str:
    """Compact age such as ``now``, ``5m``, ``3h``, ``2d``, ``1w``, ``4mo``, ``2y``."""
    secs = max(int(delta.total_seconds()), 0)
    if secs < 60:
        return "now"
    mins = secs // 60
    if mins < 60:
        return f"{mins}m"
    hours = mins // 60
    if hours < 24:
        return f"{hours}h"
    days = hours // 24
    if days < 7:
        return f"{days}d"
    weeks = days // 7
    if weeks < 5:
        return f"{weeks}w"
    months = days // 30
    if months < 12:
        return f"{months}mo"
    return f"{days // 365}y"


def default_harness_dir() -> Path:
    """The conventional harness directory, relative to the working directory."""
    return Path(".agent-harness")