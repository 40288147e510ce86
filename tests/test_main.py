import pytest

import main
from config import Config
from date_math import CalendarDate
from models import PersistedSnapshot, SnapshotEntry, ValidationError
from state import CalendarStore
from store import load_snapshot


def test_parse_args_collects_flags() -> None:
    flags = main.parse_args(["-a", "Dentist", "-t", "2024-03-07", "-d"])
    assert flags == {"a": "Dentist", "t": "2024-03-07", "d": True}


@pytest.mark.parametrize("argv", [["-x"], ["-a"], ["-t", "2024-03-07"]])
def test_parse_args_rejects_bad_usage(argv) -> None:
    with pytest.raises(ValidationError):
        main.parse_args(argv)


def test_main_rejects_bad_month(capsys) -> None:
    assert main.main(["-g", "2024-13"]) == 1
    assert "Expected YYYY-MM" in capsys.readouterr().out


def test_month_grid_text_marks_events() -> None:
    snapshot = PersistedSnapshot((SnapshotEntry("Dentist", "2024-03-07"),))
    store = CalendarStore.from_snapshot(snapshot, today=CalendarDate(2024, 3, 7))
    lines = main.format_month_grid(store, CalendarDate(2024, 3, 1)).splitlines()

    assert lines[0] == "March 2024"
    assert lines[1].split() == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert len(lines) == 8
    assert lines[2].split() == ["(25)", "(26)", "(27)", "(28)", "(29)", "1", "2"]
    assert "7*" in lines[3].split()


def test_add_then_list(tmp_path, monkeypatch, capsys) -> None:
    path = tmp_path / "calendar.json"
    monkeypatch.setattr(main, "load_config", lambda: Config(data_path=path, save_interval=0.0))

    assert main.main(["-a", "Dentist", "-t", "2024-03-07"]) == 0
    assert load_snapshot(path).events == (SnapshotEntry("Dentist", "2024-03-07"),)

    capsys.readouterr()
    assert main.main(["-l"]) == 0
    assert capsys.readouterr().out.strip() == "2024-03-07  Dentist"
