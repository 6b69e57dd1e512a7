"""
Persisted preferences (ball speed, bot difficulty).

Stored as a small JSON object of string values in the per-user config dir.
Anything that goes wrong while reading is treated as "not set".
"""
import os
import json
import math
import logging

from pong_sim import (BALL_SPEED_KEY, BOT_DIFFICULTY_KEY, DEFAULT_BALL_SPEED,
                      DEFAULT_BOT_DIFFICULTY, clamp_setting, on_setting)

logger = logging.getLogger(__name__)


def get_config_path():
    base = os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "pong", "settings.json")


class SettingsStore:
    def __init__(self, path=None):
        self.path = path or get_config_path()

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read settings from %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self.path)
            return {}
        return data

    def load(self, key, fallback):
        raw = self._read().get(key)
        if raw is None or isinstance(raw, bool):
            return fallback
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return fallback
        if not math.isfinite(value):
            return fallback
        return value

    def save(self, key, value):
        data = self._read()
        data[key] = str(value)
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Could not write settings to %s: %s", self.path, e)


def load_preferences(store: SettingsStore):
    """(ball_speed, bot_difficulty), clamped into the slider range."""
    ball_speed = clamp_setting(store.load(BALL_SPEED_KEY, DEFAULT_BALL_SPEED))
    bot_difficulty = clamp_setting(store.load(BOT_DIFFICULTY_KEY, DEFAULT_BOT_DIFFICULTY))
    logger.info("Loaded preferences: ball speed %d, bot difficulty %d", ball_speed, bot_difficulty)
    return ball_speed, bot_difficulty


def persist_settings(store: SettingsStore):
    """Listener for GameLoop.subscribe that writes every preference change."""
    return on_setting(store.save)
