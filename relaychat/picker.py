"""Cursor and filter state for the session picker."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .sessions import SessionEntry, fuzzy_filter


@dataclass(frozen=True)
class PickerOutcome:
    """What the user chose: an existing conversation, a new one, or nothing."""

    class Kind(Enum):
        SELECTED = "selected"
        NEW_CONVERSATION = "new_conversation"
        CANCELLED = "cancelled"

    kind: PickerOutcome.Kind
    id: uuid.UUID | None = None

    @classmethod
    def selected(cls, conversation_id: uuid.UUID) -> PickerOutcome:
        return cls(cls.Kind.SELECTED, conversation_id)

    @classmethod
    def new_conversation(cls) -> PickerOutcome:
        return cls(cls.Kind.NEW_CONVERSATION)

    @classmethod
    def cancelled(cls) -> PickerOutcome:
        return cls(cls.Kind.CANCELLED)


class PickerState:
    """Query, filtered entries and cursor.

    Row 0 is the "New conversation" row; rows 1.. are the filtered entries.
    """

    def __init__(self, entries: Iterable[SessionEntry]) -> None:
        self.all: list[SessionEntry] = list(entries)
        self.filtered: list[SessionEntry] = list(self.all)
        self.query = ""
        self.cursor = 1

    def rerank(self) -> None:
        """Refilter by the current query and clamp the cursor."""
        self.filtered = fuzzy_filter(self.all, self.query)
        self.cursor = min(self.cursor, len(self.filtered))
        if self.cursor == 0 and self.filtered:
            self.cursor = 1

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_down(self) -> None:
        if self.cursor < len(self.filtered):
            self.cursor += 1

    def page_up(self, page: int) -> None:
        self.cursor = max(self.cursor - max(page, 1), 0)

    def page_down(self, page: int) -> None:
        self.cursor = min(self.cursor + max(page, 1), len(self.filtered))

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.filtered)

    def select_current(self) -> PickerOutcome:
        if 1 <= self.cursor <= len(self.filtered):
            return PickerOutcome.selected(self.filtered[self.cursor - 1].id)
        return PickerOutcome.new_conversation()