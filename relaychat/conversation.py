"""Conversation model shared by the chat worker, persistence and pickers."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

CONVERSATION_SCHEMA_VERSION = 2

_FRACTION = re.compile(r"(\.\d+)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as RFC 3339."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp, tolerating `Z` and nanosecond fractions."""
    cleaned = text.strip()
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"
    cleaned = _FRACTION.sub(lambda m: m.group(1)[:7], cleaned, count=1)
    parsed = datetime.fromisoformat(cleaned)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Agent(Enum):
    CLAUDE = "claude"
    GPT = "gpt"
    CODEX = "codex"

    def label(self) -> str:
        return _AGENT_LABELS[self]


_AGENT_LABELS = {Agent.CLAUDE: "Claude", Agent.GPT: "GPT", Agent.CODEX: "Codex"}


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    HANDOFF = "handoff"
    SYSTEM = "system"


class TurnStatus(Enum):
    STREAMING = "streaming"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class Turn:
    """One message in a conversation."""

    agent: Agent
    role: Role
    content: str
    status: TurnStatus = TurnStatus.COMPLETE
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    ts: datetime = field(default_factory=utc_now)
    summarized_turn_count: int | None = None

    @classmethod
    def new_summary(cls, content: str, summarized_turn_count: int) -> Turn:
        """A system turn standing in for `summarized_turn_count` compacted turns."""
        return cls(
            agent=Agent.GPT,
            role=Role.SYSTEM,
            content=content,
            status=TurnStatus.COMPLETE,
            summarized_turn_count=summarized_turn_count,
        )

    def is_summary(self) -> bool:
        return self.summarized_turn_count is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": str(self.id),
            "agent": self.agent.value,
            "role": self.role.value,
            "content": self.content,
            "ts": format_timestamp(self.ts),
            "status": self.status.value,
        }
        if self.summarized_turn_count is not None:
            data["summarized_turn_count"] = self.summarized_turn_count
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Turn:
        return cls(
            id=uuid.UUID(data["id"]),
            agent=Agent(data["agent"]),
            role=Role(data["role"]),
            content=data["content"],
            ts=parse_timestamp(data["ts"]),
            status=TurnStatus(data["status"]),
            summarized_turn_count=data.get("summarized_turn_count"),
        )


@dataclass
class Sessions:
    """Backend session identifiers carried across turns."""

    claude_session_id: str | None = None
    codex_thread_id: str | None = None


@dataclass
class Conversation:
    """A multi-agent chat with its turns and backend session state."""

    active_agent: Agent
    auto_handoff_enabled: bool = True
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    turns: list[Turn] = field(default_factory=list)
    sessions: Sessions = field(default_factory=Sessions)
    summary: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    schema_version: int = CONVERSATION_SCHEMA_VERSION

    @classmethod
    def new(cls, active_agent: Agent, auto_handoff_enabled: bool) -> Conversation:
        now = utc_now()
        return cls(
            active_agent=active_agent,
            auto_handoff_enabled=auto_handoff_enabled,
            created_at=now,
            updated_at=now,
        )

    def append_turn(self, turn: Turn) -> None:
        self.turns.append(turn)
        self.updated_at = utc_now()

    def last_assistant_turn(self) -> Turn | None:
        return next(
            (turn for turn in reversed(self.turns) if turn.role is Role.ASSISTANT),
            None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "id": str(self.id),
            "turns": [turn.to_dict() for turn in self.turns],
            "active_agent": self.active_agent.value,
            "sessions": {
                "claude_session_id": self.sessions.claude_session_id,
                "codex_thread_id": self.sessions.codex_thread_id,
            },
            "auto_handoff_enabled": self.auto_handoff_enabled,
            "summary": self.summary,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Conversation:
        sessions = data.get("sessions") or {}
        return cls(
            schema_version=data.get("schema_version", CONVERSATION_SCHEMA_VERSION),
            id=uuid.UUID(data["id"]),
            turns=[Turn.from_dict(turn) for turn in data.get("turns", [])],
            active_agent=Agent(data["active_agent"]),
            sessions=Sessions(
                claude_session_id=sessions.get("claude_session_id"),
                codex_thread_id=sessions.get("codex_thread_id"),
            ),
            auto_handoff_enabled=bool(data.get("auto_handoff_enabled", True)),
            summary=data.get("summary"),
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
        )