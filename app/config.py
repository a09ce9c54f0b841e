# app/config.py
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict
import json
import logging

from app.errors import ConfigError
from app.validation import positive_int

logger = logging.getLogger(__name__)

_SETTINGS_FILE = Path("settings.json")


@dataclass(frozen=True)
class PaginationConfig:
    words_per_chunk: int = 50
    max_chunk_chars: int = 300
    chunks_per_page: int = 4

    def __post_init__(self):
        positive_int("words_per_chunk", self.words_per_chunk)
        positive_int("max_chunk_chars", self.max_chunk_chars)
        positive_int("chunks_per_page", self.chunks_per_page)


@dataclass(frozen=True)
class SessionConfig:
    # settle delay between a completed chunk and the next one
    advance_delay_ms: int = 1000

    def __post_init__(self):
        if isinstance(self.advance_delay_ms, bool) or not isinstance(self.advance_delay_ms, int):
            raise ConfigError(f"advance_delay_ms must be an integer, got {self.advance_delay_ms!r}")
        if self.advance_delay_ms < 0:
            raise ConfigError("advance_delay_ms must not be negative")


@dataclass(frozen=True)
class Settings:
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    db_path: str = "data/typereader.db"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be an object")
    return section


def settings_from_dict(data: Dict[str, Any]) -> Settings:
    if not isinstance(data, dict):
        raise ConfigError("settings must be a JSON object")
    try:
        pagination = PaginationConfig(**_section(data, "pagination"))
        session = SessionConfig(**_section(data, "session"))
    except TypeError as e:
        # unknown keys
        raise ConfigError(str(e)) from e
    db_path = data.get("db_path", Settings.db_path)
    if not isinstance(db_path, str) or not db_path:
        raise ConfigError("db_path must be a non-empty string")
    return Settings(pagination=pagination, session=session, db_path=db_path)


def load_settings(path: Path | str = _SETTINGS_FILE) -> Settings:
    """
    Read optional overrides from a JSON file.
    A missing file means defaults; anything unreadable is a ConfigError.
    """
    p = Path(path)
    if not p.exists():
        logger.debug("No settings file at %s, using defaults", p)
        return Settings()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read {p}: {e}") from e
    settings = settings_from_dict(data)
    logger.info("Loaded settings from %s", p)
    return settings
