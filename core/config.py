"""JSON-backed application settings for Lectern."""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CONFIG_PATH = CONFIG_DIR / "settings.json"
DEFAULT_LIBRARY_PATH = CONFIG_DIR / "library.json"


@dataclass
class Config:
    """All user-configurable settings with sensible defaults."""

    papers_folder: str = ""  # persisted FolderReference, "" = none chosen
    library_path: str = ""  # "" means DEFAULT_LIBRARY_PATH
    poll_interval_ms: int = 5_000  # fallback rescan for network drives, 0 = off
    render_dpi: int = 110
    log_level: str = "INFO"

    # Window geometry persistence
    window_width: int = 1400
    window_height: int = 900
    window_x: int = -1  # -1 means center on screen
    window_y: int = -1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dict, ignoring unknown keys."""
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered)

    def resolved_library_path(self) -> Path:
        """Where the paper library JSON lives."""
        if self.library_path.strip():
            return Path(self.library_path).expanduser()
        return DEFAULT_LIBRARY_PATH


def load_config(path: Path = CONFIG_PATH) -> Config:
    """Load config from JSON file. Returns defaults if file missing."""
    if not path.exists():
        logger.info("No config file at %s, using defaults", path)
        return Config()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        logger.info("Loaded config from %s", path)
        return Config.from_dict(raw)
    except (json.JSONDecodeError, TypeError, AttributeError) as exc:
        logger.warning("Corrupt config at %s: %s, using defaults", path, exc)
        return Config()


def save_config(config: Config, path: Path = CONFIG_PATH) -> None:
    """Write config to JSON file, creating parent dirs as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(config.to_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.info("Saved config to %s", path)
