"""
Controller configuration.

Defaults match the game client's observed behaviour; every value can be
overridden in code or through TERAVERSE_* environment variables.
"""

import os
from dataclasses import dataclass, field

from teraverse.energy.retry import RetryPolicy
from teraverse.exceptions import ConfigurationError


ENV_PREFIX = "TERAVERSE_"


@dataclass
class ControllerConfig:
    """
    Configuration for the controller and its orchestrators.
    """
    # Connection
    base_url: str = "https://gigaverse.io"
    bearer_token: str | None = None
    address: str = ""
    request_timeout_seconds: float = 15.0
    http_max_retries: int = 3
    http_retry_delay: float = 1.0

    # Auto-play
    max_steps: int = 60  # Safety limit
    pace_delay_seconds: float = 0.05
    provider: str = "random"

    # Claims
    claim_delay_seconds: float = 0.8

    # Energy scheduling
    min_timer_delay_seconds: float = 0.1
    energy_retry: RetryPolicy = field(default_factory=RetryPolicy)

    # History
    history_db_path: str | None = None  # None keeps history in memory

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ConfigurationError: On the first invalid value
        """
        if self.max_steps < 0:
            raise ConfigurationError("max_steps must be >= 0", config_key="max_steps")
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError(
                "request_timeout_seconds must be > 0",
                config_key="request_timeout_seconds",
            )
        if self.http_max_retries < 1:
            raise ConfigurationError(
                "http_max_retries must be >= 1",
                config_key="http_max_retries",
            )
        for key in (
            "http_retry_delay",
            "pace_delay_seconds",
            "claim_delay_seconds",
            "min_timer_delay_seconds",
        ):
            if getattr(self, key) < 0:
                raise ConfigurationError(f"{key} must be >= 0", config_key=key)
        if self.energy_retry.max_attempts < 1:
            raise ConfigurationError(
                "energy_retry.max_attempts must be >= 1",
                config_key="energy_retry",
            )
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigurationError(
                f"Unknown log level: {self.log_level}",
                config_key="log_level",
            )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "ControllerConfig":
        """Build a config from TERAVERSE_* variables over the defaults."""
        env = os.environ if environ is None else environ
        config = cls()

        config.bearer_token = env.get(f"{ENV_PREFIX}TOKEN") or None
        config.address = env.get(f"{ENV_PREFIX}ADDRESS", config.address)
        config.base_url = env.get(f"{ENV_PREFIX}BASE_URL", config.base_url)
        config.provider = env.get(f"{ENV_PREFIX}PROVIDER", config.provider)
        config.history_db_path = env.get(f"{ENV_PREFIX}HISTORY_DB") or None
        config.log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL", config.log_level)

        max_steps = env.get(f"{ENV_PREFIX}MAX_STEPS")
        if max_steps is not None:
            config.max_steps = _parse_int("max_steps", max_steps)

        json_logs = env.get(f"{ENV_PREFIX}JSON_LOGS")
        if json_logs is not None:
            config.json_logs = json_logs.strip().lower() in {"1", "true", "yes", "on"}

        return config


def _parse_int(key: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid integer for {ENV_PREFIX}{key.upper()}: {raw!r}",
            config_key=key,
        ) from e
