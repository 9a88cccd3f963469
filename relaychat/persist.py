"""Conversation persistence: JSON plus a markdown transcript per conversation.

Conversations live under ``<harness>/conversations/<uuid>/``. When the harness
is not initialised the store is disabled and saving does nothing.
"""

from __future__ import annotations

import copy
import json
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from .conversation import (
    CONVERSATION_SCHEMA_VERSION,
    Conversation,
    Role,
    TurnStatus,
    format_timestamp,
)

log = logging.getLogger(__name__)

CONVERSATION_JSON = "conversation.json"
TRANSCRIPT_MD = "transcript.md"


class StoreError(RuntimeError):
    """Raised when a conversation cannot be loaded or migrated."""


@dataclass
class MigrationResult:
    """A migrated conversation document and what was done to it."""

    data: dict[str, Any]
    starting_version: int
    final_version: int
    steps_applied: list[str] = field(default_factory=list)

    @property
    def upgraded(self) -> bool:
        return self.final_version > self.starting_version


def _v1_to_v2(data: dict[str, Any]) -> None:
    for turn in data.get("turns", []):
        turn.setdefault("summarized_turn_count", None)


_MIGRATIONS: dict[int, Callable[[dict[str, Any]], None]] = {1: _v1_to_v2}


def migrate(raw: dict[str, Any]) -> MigrationResult:
    """Bring a raw conversation document up to the current schema version."""
    data = copy.deepcopy(raw)
    version = data.get("schema_version", 1)
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        raise StoreError(f"invalid schema_version {version!r}")
    if version > CONVERSATION_SCHEMA_VERSION:
        raise StoreError(
            f"conversation schema_version {version} is newer than supported "
            f"version {CONVERSATION_SCHEMA_VERSION}"
        )
    result = MigrationResult(data=data, starting_version=version, final_version=version)
    while version < CONVERSATION_SCHEMA_VERSION:
        step = _MIGRATIONS.get(version)
        if step is None:
            raise StoreError(f"no migration from schema_version {version}")
        step(data)
        result.steps_applied.append(f"v{version}->v{version + 1}")
        version += 1
        data["schema_version"] = version
    result.final_version = version
    return result


def render_transcript(conv: Conversation) -> str:
    """Render a human-readable markdown transcript of a conversation."""
    parts = [
        f"# conversation {conv.id}\n\n",
        f"created: {format_timestamp(conv.created_at)}\n"
        f"updated: {format_timestamp(conv.updated_at)}\n"
        f"active: {conv.active_agent.label()}\n"
        f"auto-handoff: {str(conv.auto_handoff_enabled).lower()}\n\n",
    ]
    if conv.sessions.claude_session_id is not None:
        parts.append(f"claude session: `{conv.sessions.claude_session_id}`\n")
    if conv.sessions.codex_thread_id is not None:
        parts.append(f"codex thread: `{conv.sessions.codex_thread_id}`\n")
    parts.append("\n")
    for turn in conv.turns:
        if turn.role is Role.USER:
            heading = "## you"
        elif turn.role is Role.HANDOFF:
            heading = f"## ↪ handoff → {turn.agent.label()}"
        elif turn.role is Role.ASSISTANT:
            heading = f"## {turn.agent.label()}"
        else:
            heading = "## system"
        parts.append(heading)
        if turn.status is TurnStatus.ERROR:
            parts.append("  _(error)_")
        elif turn.status is TurnStatus.STREAMING:
            parts.append("  _(interrupted while streaming)_")
        parts.append(f"\n_{format_timestamp(turn.ts)}_\n\n{turn.content}\n\n")
    return "".join(parts)


class ConversationStore:
    """Reads and writes conversations under an initialised harness root."""

    def __init__(self, root: str | Path | None) -> None:
        path = Path(root) if root is not None else None
        if path is not None and not (path / "config.toml").is_file():
            path = None
        self._root = path

    def is_enabled(self) -> bool:
        return self._root is not None

    def conversation_dir(self, conversation_id: uuid.UUID | str) -> Path:
        if self._root is None:
            raise StoreError("no harness initialised")
        return self._root / "conversations" / str(conversation_id)

    def save(self, conv: Conversation) -> None:
        """Write the conversation JSON and transcript; no-op when disabled."""
        if self._root is None:
            return
        directory = self.conversation_dir(conv.id)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / CONVERSATION_JSON).write_text(
            json.dumps(conv.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
        )
        (directory / TRANSCRIPT_MD).write_text(render_transcript(conv), encoding="utf-8")

    def load(self, conversation_id: uuid.UUID | str) -> Conversation:
        """Load a conversation, migrating and rewriting older schema versions."""
        if self._root is None:
            raise StoreError(
                f"no harness initialised; cannot load conversation {conversation_id}"
            )
        path = self.conversation_dir(conversation_id) / CONVERSATION_JSON
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"reading conversation {path}: {exc}") from exc
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreError(f"parsing conversation json: {exc}") from exc
        if not isinstance(raw, dict):
            raise StoreError("parsing conversation json: expected an object")

        try:
            result = migrate(raw)
        except StoreError as exc:
            raise StoreError(
                f"migrating conversation {conversation_id} at {path}: {exc}"
            ) from exc

        try:
            conv = Conversation.from_dict(result.data)
        except (KeyError, ValueError, TypeError) as exc:
            raise StoreError(
                f"parsing conversation json after migration: {exc}"
            ) from exc

        if result.upgraded:
            log.info(
                "migrated conversation %s schema from %s to %s (%s)",
                conv.id,
                result.starting_version,
                result.final_version,
                ", ".join(result.steps_applied),
            )
            try:
                self.save(conv)
            except OSError as exc:
                log.warning(
                    "failed to write migrated conversation %s back to disk: %s",
                    conv.id,
                    exc,
                )
        return conv