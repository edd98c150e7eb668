"""Default file locations for tagging sessions.

Each location is taken from the first of: command-line option, environment
variable, ``[session]`` table of ``./.eepytagger.toml``, ``[session]`` table
of the global config file, built-in default.
"""

import json
import os
import sys
import tempfile
import tomllib
from pathlib import Path

DEFAULT_OUTPUT_FILE = "timestamps.txt"
DEFAULT_TEMP_FILENAME = "timestamps.txt"

LOCAL_CONFIG_FILENAME = ".eepytagger.toml"

# [session] key -> environment override
SESSION_SETTINGS = {
    "output": "EEPYTAGGER_OUTPUT",
    "temp": "EEPYTAGGER_TEMP",
    "history": "EEPYTAGGER_HISTORY",
}
ENV_CONFIG = "EEPYTAGGER_CONFIG"


def default_temp_file() -> Path:
    return Path(tempfile.gettempdir()) / DEFAULT_TEMP_FILENAME


def global_config_path() -> Path:
    override = os.environ.get(ENV_CONFIG)
    if override:
        return Path(override).expanduser()

    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / "eepytagger" / "config.toml"
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "eepytagger" / "config.toml"
        return home / "AppData" / "Roaming" / "eepytagger" / "config.toml"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "eepytagger" / "config.toml"
    return home / ".config" / "eepytagger" / "config.toml"


def local_config_path(directory: Path | None = None) -> Path:
    return (directory or Path.cwd()) / LOCAL_CONFIG_FILENAME


def read_session_table(path: Path) -> dict[str, str]:
    """Return the non-blank ``[session]`` locations set in a config file.

    Missing, unreadable, or malformed files contribute nothing.
    """
    try:
        data = tomllib.loads(path.read_bytes().decode("utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return {}
    table = data.get("session")
    if not isinstance(table, dict):
        return {}
    return {
        key: value.strip()
        for key, value in table.items()
        if key in SESSION_SETTINGS and isinstance(value, str) and value.strip()
    }


def load_config(*, directory: Path | None = None) -> dict[str, str]:
    settings: dict[str, str] = {}
    for path in (global_config_path(), local_config_path(directory)):
        settings.update(read_session_table(path))
    return settings


def _session_path(key: str, option: str | None, settings: dict[str, str]) -> Path | None:
    if option:
        return Path(option)
    env = os.environ.get(SESSION_SETTINGS[key], "").strip()
    if env:
        return Path(env).expanduser()
    if key in settings:
        return Path(settings[key]).expanduser()
    return None


def resolve_output_path(option: str | None, settings: dict[str, str]) -> Path:
    return _session_path("output", option, settings) or Path(DEFAULT_OUTPUT_FILE)


def resolve_temp_path(option: str | None, settings: dict[str, str]) -> Path:
    return _session_path("temp", option, settings) or default_temp_file()


def resolve_history_path(settings: dict[str, str]) -> Path | None:
    return _session_path("history", None, settings)


def render_config_toml(settings: dict[str, str]) -> str:
    """Render a ``[session]`` table; blank locations are left out."""
    lines = [
        f"{key} = {json.dumps(settings[key].strip(), ensure_ascii=False)}"
        for key in SESSION_SETTINGS
        if isinstance(settings.get(key), str) and settings[key].strip()
    ]
    if not lines:
        return ""
    return "\n".join(["[session]", *lines]) + "\n"
