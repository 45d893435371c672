"""Persisted user settings for xml formatter."""

import os
import json
from typing import Any, Dict, Optional
from rich.console import Console

console = Console()

# Settings file path
_settings_dir = os.path.join(os.path.expanduser('~'), '.xml_formatter')
_settings_file = os.path.join(_settings_dir, 'settings.json')


def get_settings_file() -> str:
    """Return the path of the settings file."""
    return _settings_file


def _ensure_settings_dir(settings_file: str):
    """Ensure settings directory exists."""
    settings_dir = os.path.dirname(settings_file)
    if settings_dir and not os.path.exists(settings_dir):
        os.makedirs(settings_dir, exist_ok=True)


def load_settings(settings_file: Optional[str] = None) -> Dict[str, Any]:
    """Load settings from disk.

    Args:
        settings_file: Optional path overriding the default settings file.

    Returns:
        The saved settings, or an empty dictionary if none could be loaded.
    """
    settings_file = settings_file or _settings_file
    if not os.path.exists(settings_file):
        return {}

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            settings = json.load(f)
    except (json.JSONDecodeError, ValueError, IOError) as e:
        console.print(f"[yellow]Error loading settings: {e}[/yellow]")
        return {}

    if not isinstance(settings, dict):
        console.print(f"[yellow]Ignoring malformed settings file: {settings_file}[/yellow]")
        return {}
    return settings


def save_settings(settings: Dict[str, Any], settings_file: Optional[str] = None) -> bool:
    """Save settings to disk, merged into any settings already saved.

    Args:
        settings: Dictionary of settings to save.
        settings_file: Optional path overriding the default settings file.

    Returns:
        True if the settings were written.
    """
    settings_file = settings_file or _settings_file
    _ensure_settings_dir(settings_file)

    current_settings = load_settings(settings_file)
    current_settings.update(settings)

    try:
        with open(settings_file, 'w', encoding='utf-8') as f:
            json.dump(current_settings, f, indent=2)
    except IOError as e:
        console.print(f"[yellow]Error saving settings: {e}[/yellow]")
        return False
    return True
