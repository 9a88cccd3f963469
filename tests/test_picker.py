import uuid
from datetime import datetime, timezone

from relaychat.picker import PickerOutcome, PickerState
from relaychat.sessions import SessionEntry


def entry(id_byte, title, mins_ago, agents):
    updated = datetime.fromtimestamp(1_700_000_000 - mins_ago * 60, tz=timezone.utc)
    return SessionEntry(
        id=uuid.UUID(bytes=bytes([id_byte]) * 16),
        updated_at=updated,
        title=title,
        message_count=1,
        agents=agents,
    )


def three_entries():
    return [
        entry(1, "alpha worker", 5, "Claude"),
        entry(2, "beta worker", 10, "Codex"),
        entry(3, "gamma worker", 15, "GPT"),
    ]


def test_initial_cursor_skips_sentinel():
    s = PickerState(three_entries())
    assert s.cursor == 1
    assert s.query == ""
    assert len(s.filtered) == 3


def test_picker_state_clamps_cursor_after_filter_shrinks():
    s = PickerState(three_entries())
    s.cursor = 3
    s.query = "alpha"
    s.rerank()
    assert s.cursor <= 1
    assert [e.title for e in s.filtered] == ["alpha worker"]


def test_rerank_moves_cursor_off_sentinel_when_matches_exist():
    s = PickerState(three_entries())
    s.cursor = 0
    s.query = "beta"
    s.rerank()
    assert s.cursor == 1


def test_rerank_with_no_matches_lands_on_sentinel():
    s = PickerState(three_entries())
    s.query = "zzzz"
    s.rerank()
    assert s.filtered == []
    assert s.cursor == 0
    assert s.select_current() == PickerOutcome.new_conversation()


def test_picker_state_select_sentinel_and_entry():
    s = PickerState([entry(0xCD, "thing", 5, "Codex")])
    s.cursor = 0
    assert s.select_current() == PickerOutcome.new_conversation()
    s.cursor = 1
    outcome = s.select_current()
    assert outcome.kind is PickerOutcome.Kind.SELECTED
    assert outcome.id == uuid.UUID(bytes=bytes([0xCD]) * 16)


def test_select_out_of_range_is_new_conversation():
    s = PickerState([])
    assert s.cursor == 1
    assert s.select_current().kind is PickerOutcome.Kind.NEW_CONVERSATION


def test_move_up_and_down_are_bounded():
    s = PickerState(three_entries())
    s.move_up()
    s.move_up()
    assert s.cursor == 0
    for _ in range(10):
        s.move_down()
    assert s.cursor == 3


def test_page_up_and_down_clamp():
    s = PickerState(three_entries())
    s.page_down(8)
    assert s.cursor == 3
    s.page_up(2)
    assert s.cursor == 1
    s.page_up(8)
    assert s.cursor == 0
    s.page_down(0)
    assert s.cursor == 1


def test_home_and_end():
    s = PickerState(three_entries())
    s.end()
    assert s.cursor == 3
    assert s.select_current().id == uuid.UUID(bytes=bytes([3]) * 16)
    s.home()
    assert s.cursor == 0


def test_outcome_constructors():
    assert PickerOutcome.cancelled().kind is PickerOutcome.Kind.CANCELLED
    assert PickerOutcome.cancelled().id is None
    conv_id = uuid.UUID(int=7)
    assert PickerOutcome.selected(conv_id).id == conv_id