# weighbench/core/config.py
from __future__ import annotations
import os
import re
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)
_ENV_LOADED = False

_TRUE_VALUES = ("true", "1", "yes")


# Project checkout root: weighbench/core/config.py -> <root>/.env
DOTENV_PATH = Path(__file__).resolve().parents[2] / ".env"

_ENV_LINE = re.compile(r'^([A-Za-z0-9_]+)=(.*)$')


def _parse_env_line(line: str):
    """Return ``(key, value)`` for a ``KEY=value`` line, or None for blanks and comments."""
    line = line.strip()
    if not line or line.startswith('#'):
        return None
    match = _ENV_LINE.match(line)
    if not match:
        return None
    key, value = match.groups()
    if value[:1] in ('"', "'") and value.endswith(value[0]) and len(value) > 1:
        return key, value[1:-1]
    return key, value.split('#', 1)[0].strip()


def load_env_vars(path: Path = DOTENV_PATH) -> None:
    """Export KEY=value settings from a .env file once; variables already set are kept."""
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True
    if not path.exists():
        logger.debug(f"No .env file at {path}")
        return
    try:
        lines = path.read_text(encoding='utf-8').splitlines()
    except OSError as e:
        logger.warning(f"Error loading .env file: {e}")
        return
    for line in lines:
        parsed = _parse_env_line(line)
        if parsed is not None:
            os.environ.setdefault(*parsed)


load_env_vars()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer value for {name}: {raw!r}")
        return default


@dataclass
class DatabaseConfig:
    path: str = ":memory:"
    timeout: int = 30
    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        return cls(
            path=os.getenv("WEIGHBENCH_DB_PATH", ":memory:"),
            timeout=_env_int("WEIGHBENCH_DB_TIMEOUT", 30),
        )


@dataclass
class EngineConfig:
    """Sweep defaults.

    ``clamp_zero_width`` makes a component whose range is empty (``low == high``)
    run one step at ``low`` instead of being skipped.
    """
    steps: int = 10
    repeat: int = 1
    clamp_zero_width: bool = False

    def __post_init__(self):
        if self.steps <= 0:
            raise ValueError(f"steps must be positive, got {self.steps}")
        if self.repeat <= 0:
            raise ValueError(f"repeat must be positive, got {self.repeat}")

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        load_env_vars()
        return cls(
            steps=_env_int("WEIGHBENCH_STEPS", 10),
            repeat=_env_int("WEIGHBENCH_REPEAT", 1),
            clamp_zero_width=os.getenv("WEIGHBENCH_CLAMP_ZERO_WIDTH", "false").lower() in _TRUE_VALUES,
        )


@dataclass
class WeighbenchConfig:
    database: DatabaseConfig
    engine: EngineConfig
    log_level: str = field(default_factory=lambda: os.getenv("WEIGHBENCH_LOG_LEVEL", "INFO"))
    @classmethod
    def from_env(cls) -> 'WeighbenchConfig':
        return cls(
            database=DatabaseConfig.from_env(),
            engine=EngineConfig.from_env(),
            log_level=os.getenv("WEIGHBENCH_LOG_LEVEL", "INFO"),
        )
    @classmethod
    def default(cls) -> 'WeighbenchConfig':
        return cls(database=DatabaseConfig(), engine=EngineConfig(), log_level=os.getenv("WEIGHBENCH_LOG_LEVEL", "INFO"))
