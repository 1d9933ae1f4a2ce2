"""
Application settings for the completion client and file output.

Secrets (the Groq API key) stay in the environment. Tunables such as the
model name and token limit live in a small JSON file so they can be changed
without touching code; a missing or broken file falls back to defaults.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TypedDict

from src.logging_helper import Log


class SettingsSchema(TypedDict, total=False):
    model: str
    max_completion_tokens: int
    request_timeout: float
    output_dir: str


DEFAULT_SETTINGS_FILE = Path.home() / ".config" / "calbot" / "settings.json"

DEFAULT_SETTINGS: SettingsSchema = {
    "model": "llama-3.3-70b-versatile",
    "max_completion_tokens": 300,
    "request_timeout": 30.0,
    "output_dir": str(Path.home() / "Downloads"),
}


def settings_file() -> Path:
    """Return the settings path, honouring CALBOT_SETTINGS_FILE."""
    override = os.getenv("CALBOT_SETTINGS_FILE")
    if override:
        return Path(override)
    return DEFAULT_SETTINGS_FILE


def load_settings() -> SettingsSchema:
    """
    Load settings from disk, falling back to defaults if anything fails.
    """
    path = settings_file()
    if not path.exists():
        Log.info(f"Settings file not found, using defaults: {path}")
        return DEFAULT_SETTINGS.copy()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Settings data is not a JSON object")
    except (OSError, ValueError) as err:
        Log.warn(f"Failed to read settings file ({path}): {err}")
        return DEFAULT_SETTINGS.copy()

    merged: SettingsSchema = DEFAULT_SETTINGS.copy()
    # Merge only known keys
    for key in DEFAULT_SETTINGS:
        if key in data:
            merged[key] = data[key]  # type: ignore[literal-required]
    return merged


def get_max_completion_tokens() -> int:
    settings = load_settings()
    value = settings.get("max_completion_tokens", DEFAULT_SETTINGS["max_completion_tokens"])
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        Log.warn(f"Invalid max_completion_tokens value '{value}', using default")
        value = DEFAULT_SETTINGS["max_completion_tokens"]
    return value


def get_output_dir() -> Path:
    settings = load_settings()
    return Path(settings.get("output_dir", DEFAULT_SETTINGS["output_dir"])).expanduser()
