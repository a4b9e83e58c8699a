# frontend/settings_store.py
import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".code_review_assistant" / "settings.json"


@dataclass
class UserSettings:
    api_key: str = ""
    selected_project: str = ""
    participant_id: str = ""

    def needs_setup(self) -> bool:
        return not (self.api_key or self.selected_project)


class SettingsStore:
    """Keeps UserSettings in a small JSON file on the machine running the UI."""

    def __init__(self, path: Optional[Path] = None):
        env_path = os.getenv("ASSISTANT_SETTINGS_PATH")
        self.path = Path(path or env_path or DEFAULT_PATH)

    def load(self) -> UserSettings:
        if not self.path.exists():
            return UserSettings()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return UserSettings()
        if not isinstance(raw, dict):
            return UserSettings()
        known = {f.name for f in fields(UserSettings)}
        return UserSettings(**{k: str(v) for k, v in raw.items() if k in known and v is not None})

    def save(self, settings: UserSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
        # holds the API key: owner-only
        os.chmod(tmp, 0o600)
        os.replace(tmp, self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
