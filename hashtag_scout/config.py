from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import Settings

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_SETTINGS_PATH = PROJECT_ROOT / "config/settings.yml"


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def resolve_path(path: Path) -> Path:
    if path.is_absolute():
        return path.resolve()
    return (PROJECT_ROOT / path).resolve()


def load_settings(settings_path: Optional[Path] = None) -> Settings:
    """Load runtime settings, falling back to defaults when the file is absent."""

    path = resolve_path(Path(settings_path)) if settings_path else DEFAULT_SETTINGS_PATH
    if not path.exists():
        return Settings()
    return Settings(**load_yaml(path))
