"""NDJSON events emitted by non-interactive print mode.

Each event serialises to one JSON object with a ``type`` tag followed by the
event's fields. This is a stable surface for tooling that consumes the output.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .conversation import Agent


class PrintEventKind(Enum):
    TURN_START = "turn_start"
    TURN_END = "turn_end"
    ERROR = "error"
    DONE = "done"


def _agent_label(agent: Agent | str | None) -> str | None:
    if isinstance(agent, Agent):
        return agent.label()
    return agent


@dataclass(frozen=True)
class PrintEvent:
    """One print-mode event: a kind plus its ordered fields."""

    kind: PrintEventKind
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def turn_start(cls, agent: Agent | str, seq: int) -> PrintEvent:
        """Emitted before an agent's turn begins."""
        return cls(
            PrintEventKind.TURN_START,
            {"agent": _agent_label(agent), "seq": seq},
        )

    @classmethod
    def turn_end(cls, agent: Agent | str, seq: int, content: str) -> PrintEvent:
        """Emitted after an agent's turn completes successfully."""
        return cls(
            PrintEventKind.TURN_END,
            {"agent": _agent_label(agent), "seq": seq, "content": content},
        )

    @classmethod
    def error(cls, agent: Agent | str | None, message: str) -> PrintEvent:
        """Emitted on a backend or worker error; ``agent`` may be unknown."""
        return cls(
            PrintEventKind.ERROR,
            {"agent": _agent_label(agent), "message": message},
        )

    @classmethod
    def done(cls, conversation_id: object, exit_code: int) -> PrintEvent:
        """Final event of a run; ``exit_code`` is 0 on success."""
        return cls(
            PrintEventKind.DONE,
            {"conversation_id": str(conversation_id), "exit_code": exit_code},
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, **self.fields}

    def to_json(self) -> str:
        """Serialise as a single compact JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))