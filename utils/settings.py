from pathlib import Path
from typing import Any

import yaml

PREFERENCES_FILENAME = "notification_preferences.yaml"


def get_preferences_path(output_dir: str = None) -> Path:
    """Returns the path to the notification preferences file."""
    if output_dir is None:
        from config import get_config

        output_dir = get_config()["OUTPUT_DIR"]
    return Path(output_dir) / PREFERENCES_FILENAME


def load_preferences_yaml(path: Path) -> dict[str, Any]:
    """Loads stored preferences from YAML; returns {} if missing or unreadable."""
    path = Path(path)
    if not path.exists():
        return {}
    raw = path.read_text(encoding="utf-8").strip()
    if not raw:
        return {}
    try:
        data = yaml.safe_load(raw)
        return data if isinstance(data, dict) else {}
    except yaml.YAMLError:
        return {}


def save_preferences_yaml(preferences: dict[str, Any], path: Path) -> None:
    """Saves preferences as YAML, creating the parent directory if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(preferences, handle, sort_keys=True)
