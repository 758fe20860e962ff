"""Runtime settings for the web application.

Every value can be overridden through an environment variable prefixed
with ``ALGEBRA_GENIUS_`` (e.g. ``ALGEBRA_GENIUS_PORT=9000``); the CLI in
``main.py`` overrides the environment in turn.
"""

import os
from dataclasses import dataclass

ENV_PREFIX = "ALGEBRA_GENIUS_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    solve_delay_seconds: float = 1.0   # simulated "thinking" time per solve
    history_limit: int = 5

    def __post_init__(self) -> None:
        if self.solve_delay_seconds < 0:
            raise ValueError("solve_delay_seconds cannot be negative.")
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1.")


def load_settings() -> Settings:
    """Build Settings from the environment, falling back to defaults."""
    try:
        return Settings(
            host=_env("HOST", Settings.host),
            port=int(_env("PORT", str(Settings.port))),
            log_level=_env("LOG_LEVEL", Settings.log_level).upper(),
            solve_delay_seconds=float(_env("SOLVE_DELAY_SECONDS", str(Settings.solve_delay_seconds))),
            history_limit=int(_env("HISTORY_LIMIT", str(Settings.history_limit))),
        )
    except ValueError as e:
        raise ValueError(f"Invalid {ENV_PREFIX}* environment setting: {e}")
