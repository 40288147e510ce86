from pathlib import Path

import paths
from config import load_config


def test_defaults_without_config_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr(paths.sys, "platform", "linux")
    config = load_config(tmp_path / "missing.json")

    assert config.data_path == tmp_path / "data" / "datepad" / "calendar.json"
    assert config.save_interval == 2.0
    assert config.log_level == "WARNING"


def test_config_values_with_trailing_commas(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        '{"data_path": "%s", "save_interval": 0.5, "log_level": "debug",}'
        % (tmp_path / "cal.json").as_posix(),
        encoding="utf-8",
    )
    config = load_config(path)

    assert config.data_path == tmp_path / "cal.json"
    assert config.save_interval == 0.5
    assert config.log_level == "DEBUG"


def test_invalid_values_fall_back(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"save_interval": -1, "log_level": "loud"}', encoding="utf-8")
    config = load_config(path)

    assert config.save_interval == 2.0
    assert config.log_level == "WARNING"


def test_unparseable_config_is_ignored(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{nope", encoding="utf-8")
    assert load_config(path).save_interval == 2.0


def test_data_dir_falls_back_to_cwd(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(paths, "user_data_dir", lambda: None)
    monkeypatch.chdir(tmp_path)
    assert paths.default_data_path() == Path.cwd() / "calendar.json"


def test_windows_uses_appdata(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(paths.sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert paths.user_data_dir() == tmp_path / "datepad"
    monkeypatch.delenv("APPDATA")
    assert paths.user_data_dir() is None
