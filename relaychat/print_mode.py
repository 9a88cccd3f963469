"""Argument parsing for non-interactive print mode."""

from __future__ import annotations

from enum import Enum

from .conversation import Agent

_AGENT_NAMES = {"claude": Agent.CLAUDE, "gpt": Agent.GPT, "codex": Agent.CODEX}


class PrintFormat(Enum):
    """Output format for print mode."""

    TEXT = "text"
    JSON = "json"

    @classmethod
    def parse(cls, text: str) -> PrintFormat:
        name = text.strip().lower()
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"invalid --format `{name}` (expected `text` or `json`)"
            ) from None


def parse_rotation(text: str) -> list[Agent]:
    """Parse a comma-separated agent rotation such as ``"claude,codex,gpt"``.

    Blank entries are skipped; an unknown name or an empty result raises
    ValueError.
    """
    rotation = []
    for raw in text.split(","):
        name = raw.strip()
        if not name:
            continue
        lowered = name.lower()
        agent = _AGENT_NAMES.get(lowered)
        if agent is None:
            raise ValueError(
                f"unknown agent `{lowered}` in --rotation "
                "(expected one of: claude, gpt, codex)"
            )
        rotation.append(agent)
    if not rotation:
        raise ValueError(
            "--rotation cannot be empty "
            "(expected comma-separated list of: claude, gpt, codex)"
        )
    return rotation