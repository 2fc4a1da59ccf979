"""Environment-based configuration."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from tabdirective.constants import (
    DEFAULT_TAB_WIDTH,
    DIRECTIVE_FILENAME,
    HEURISTICS_MAX_GUESSES,
    HEURISTICS_MAX_LINES,
    MAX_HIERARCHY_DEPTH,
    WATCH_JOIN_TIMEOUT_SECONDS,
    GuessPolicy,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and ``TABDIRECTIVE_*`` environment variables."""

    # Directive resolution
    directive_filename: str = DIRECTIVE_FILENAME
    max_hierarchy_depth: int = MAX_HIERARCHY_DEPTH

    # Heuristics
    heuristics_max_lines: int = HEURISTICS_MAX_LINES
    heuristics_max_guesses: int = HEURISTICS_MAX_GUESSES
    guess_policy: GuessPolicy = GuessPolicy.LEAST_FREQUENT
    default_tab_width: int = DEFAULT_TAB_WIDTH

    # Watching
    watch_join_timeout_seconds: float = WATCH_JOIN_TIMEOUT_SECONDS

    # Logging
    log_level: str = "INFO"

    # Scanning
    skip_directories: Annotated[list[str], NoDecode] = [
        "node_modules",
        "vendor",
        ".venv",
        "__pycache__",
        "build",
        "dist",
        "bin",
        "obj",
        "target",
    ]

    @field_validator("skip_directories", mode="before")
    @classmethod
    def _parse_skip_directories(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator(
        "max_hierarchy_depth",
        "heuristics_max_lines",
        "heuristics_max_guesses",
        "default_tab_width",
    )
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("directive_filename")
    @classmethod
    def _validate_filename(cls, v: str) -> str:
        name = v.strip()
        if not name or "/" in name or "\\" in name:
            raise ValueError(
                "directive_filename must be a bare file name"
            )
        if name != DIRECTIVE_FILENAME:
            logger.info(
                "event=directive_filename_override filename=%s", name
            )
        return name

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "TABDIRECTIVE_",
        "extra": "ignore",
    }
