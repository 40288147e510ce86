import pytest

from date_math import CalendarDate
from models import (
    Delete,
    Edit,
    EditState,
    EventRecord,
    FinishEdition,
    PersistedSnapshot,
    SnapshotEntry,
    TitleEdited,
    ValidationError,
    event_to_jsonable,
    normalize_event_payload,
)


def _make_record(title: str = "Dentist") -> EventRecord:
    return EventRecord(title=title, date=CalendarDate(2024, 3, 7))


def test_record_starts_idle_and_enters_editing() -> None:
    record = _make_record()
    assert record.edit_state is EditState.IDLE

    assert record.update(Edit()) is True
    assert record.is_editing
    assert record.update(Edit()) is False


def test_title_edits_only_apply_while_editing() -> None:
    record = _make_record()
    assert record.update(TitleEdited("Ignored")) is False
    assert record.title == "Dentist"

    record.update(Edit())
    assert record.update(TitleEdited("Orthodontist")) is True
    assert record.title == "Orthodontist"
    assert record.is_editing


def test_finish_edition_refuses_empty_titles() -> None:
    record = _make_record()
    record.update(Edit())
    record.update(TitleEdited(""))

    assert record.update(FinishEdition()) is False
    assert record.edit_state is EditState.EDITING

    record.update(TitleEdited("Gym"))
    assert record.update(FinishEdition()) is True
    assert record.edit_state is EditState.IDLE


def test_delete_is_left_to_the_owner() -> None:
    with pytest.raises(ValueError):
        _make_record().update(Delete())


def test_normalize_event_payload_creates_record() -> None:
    record = normalize_event_payload({"title": "Café ☕", "date": "2024-03-07"})
    assert record.title == "Café ☕"
    assert record.date == CalendarDate(2024, 3, 7)
    assert record.edit_state is EditState.IDLE
    assert event_to_jsonable(record) == {"title": "Café ☕", "date": "2024-03-07"}


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "x"},
        {"date": "2024-03-07"},
        {"title": "x", "date": "2024-03-07", "done": True},
        {"title": 3, "date": "2024-03-07"},
        {"title": "x", "date": "2024-02-30"},
        {"title": "x", "date": 20240307},
        ["x", "2024-03-07"],
    ],
)
def test_normalize_event_payload_rejects_bad_rows(payload) -> None:
    with pytest.raises(ValidationError):
        normalize_event_payload(payload)


def test_snapshot_drops_edit_state() -> None:
    record = _make_record()
    record.update(Edit())
    snapshot = PersistedSnapshot.from_records([record])
    assert snapshot.events == (SnapshotEntry("Dentist", "2024-03-07"),)

    restored = snapshot.to_records()
    assert restored[0].edit_state is EditState.IDLE


def test_whitespace_title_still_finishes_editing() -> None:
    record = _make_record()
    record.update(Edit())
    record.update(TitleEdited("   "))

    assert record.update(FinishEdition()) is True
    assert record.edit_state is EditState.IDLE
    assert record.title == "   "
