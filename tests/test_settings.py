import json

from pong_settings import SettingsStore, load_preferences, persist_settings
from pong_sim import Event, SETTING, PAUSE


def test_missing_file_uses_fallback(tmp_path):
    store = SettingsStore(str(tmp_path / "nope" / "settings.json"))
    assert store.load("ballSpeed", 5) == 5


def test_save_then_load(tmp_path):
    store = SettingsStore(str(tmp_path / "pong" / "settings.json"))
    store.save("ballSpeed", 8)
    assert store.load("ballSpeed", 5) == 8
    # values are string-encoded on disk
    with open(store.path) as f:
        assert json.load(f) == {"ballSpeed": "8"}


def test_save_keeps_other_keys(tmp_path):
    store = SettingsStore(str(tmp_path / "settings.json"))
    store.save("ballSpeed", 3)
    store.save("botDifficulty", 9)
    assert store.load("ballSpeed", 5) == 3
    assert store.load("botDifficulty", 4) == 9


def test_non_numeric_value_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"ballSpeed": "fast", "botDifficulty": "nan"}))
    store = SettingsStore(str(path))
    assert store.load("ballSpeed", 5) == 5
    assert store.load("botDifficulty", 4) == 4


def test_corrupt_file_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    store = SettingsStore(str(path))
    assert store.load("ballSpeed", 5) == 5


def test_non_object_file_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2, 3]")
    assert SettingsStore(str(path)).load("ballSpeed", 5) == 5


def test_load_preferences_defaults(tmp_path):
    store = SettingsStore(str(tmp_path / "settings.json"))
    assert load_preferences(store) == (5, 4)


def test_load_preferences_clamps_out_of_range(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"ballSpeed": "42", "botDifficulty": "-3"}))
    assert load_preferences(SettingsStore(str(path))) == (10, 1)


def test_load_preferences_rounds_fractions(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"ballSpeed": "6.7", "botDifficulty": 2}))
    assert load_preferences(SettingsStore(str(path))) == (7, 2)


def test_unwritable_path_is_not_fatal(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    # parent "directory" is a regular file, so makedirs fails
    store = SettingsStore(str(blocker / "settings.json"))
    store.save("ballSpeed", 7)
    assert store.load("ballSpeed", 5) == 5


def test_persist_listener_only_writes_settings(tmp_path):
    store = SettingsStore(str(tmp_path / "settings.json"))
    listener = persist_settings(store)
    listener(Event(PAUSE, value=True))
    assert not (tmp_path / "settings.json").exists()
    listener(Event(SETTING, key="botDifficulty", value=6))
    assert store.load("botDifficulty", 4) == 6


def test_boolean_and_null_values_fall_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"ballSpeed": True, "botDifficulty": None}))
    store = SettingsStore(str(path))
    assert store.load("ballSpeed", 5) == 5
    assert load_preferences(store) == (5, 4)
