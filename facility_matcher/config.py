from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .store import DEFAULT_NAMESPACE


class MatchingSettings(BaseModel):
    threshold: float = 0.65
    suggestion_limit: int = Field(default=20, ge=1)
    suggestion_min_score: float = 0.3
    browse_page_size: int = Field(default=50, ge=1)
    results_page_size: int = Field(default=50, ge=1)
    debounce_seconds: float = Field(default=0.3, ge=0.0)

    @field_validator("threshold", "suggestion_min_score")
    @classmethod
    def _unit_interval(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("must be within [0, 1]")
        return value


class StoreSettings(BaseModel):
    path: Path = Field(default=Path("./data/sessions.sqlite3"), validate_default=True)
    namespace: str = DEFAULT_NAMESPACE

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class UserSettings(BaseModel):
    id: str = "local"


class Settings(BaseModel):
    matching: MatchingSettings = MatchingSettings()
    store: StoreSettings = StoreSettings()
    user: UserSettings = UserSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path] = None) -> Settings:
    """Settings from the given or discovered config file, defaults when there is none."""
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)
