"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CSV_PATH = Path("data/field_mappings.csv")
DEFAULT_MATCH_THRESHOLD = 30.0
DEFAULT_MAX_MATCHES = 10
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


@dataclass
class Settings:
    csv_path: Path = DEFAULT_CSV_PATH
    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    max_matches: int = DEFAULT_MAX_MATCHES
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    fuzzy_matching: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``CSV_PATH``, ``MATCH_THRESHOLD``, ``MAX_MATCHES`` and friends.

        Values that fail to parse fall back to their defaults with a warning.
        """
        env = os.environ if environ is None else environ
        return cls(
            csv_path=Path(env.get("CSV_PATH") or DEFAULT_CSV_PATH),
            match_threshold=_parse(env, "MATCH_THRESHOLD", float, DEFAULT_MATCH_THRESHOLD),
            max_matches=_parse(env, "MAX_MATCHES", int, DEFAULT_MAX_MATCHES),
            host=env.get("HOST") or DEFAULT_HOST,
            port=_parse(env, "PORT", int, DEFAULT_PORT),
            fuzzy_matching=_parse_bool(env.get("FUZZY_MATCHING")),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


def _parse(env: Mapping[str, str], key: str, convert: Callable[[str], T], default: T) -> T:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return convert(raw)
    except ValueError:
        logger.warning(f"Invalid value {raw!r} for {key}; using {default}")
        return default


def _parse_bool(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes", "on"}
