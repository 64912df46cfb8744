from __future__ import annotations

import importlib
from pathlib import Path

from contactbook import config


def test_default_paths_live_under_base_dir() -> None:
    base = Path(config.BASE_DIR)

    assert Path(config.DATA_DIR).name == "data"
    assert Path(config.EVENTS_DIR).name == "ui_state"
    assert base in Path(config.DATA_DIR).parents


def test_contact_rules_defaults() -> None:
    assert config.NAME_MAX_LENGTH == 100
    assert config.EMAIL_MAX_LENGTH == 254
    assert config.SCHEMA_VERSION == 1
    assert config.MAX_VISIBLE_PAGES == 5


def test_environment_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CONTACTBOOK_DATA_DIR", str(tmp_path / "store"))
    monkeypatch.setenv("CONTACTBOOK_STORAGE_KEY", "people")
    monkeypatch.setenv("CONTACTBOOK_QUOTA_BYTES", "1024")
    monkeypatch.setenv("CONTACTBOOK_PAGE_SIZE", "10")

    try:
        reloaded = importlib.reload(config)
        assert reloaded.DATA_DIR == str(tmp_path / "store")
        assert reloaded.STORAGE_KEY == "people"
        assert reloaded.QUOTA_BYTES == 1024
        assert reloaded.PAGE_SIZE == 10
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_page_size_default_is_five() -> None:
    assert config.PAGE_SIZE == 5
    assert config.StorageConfig().storage_key == "contacts"
