"""Configuration management for circdesk.

Loads configuration from environment variables and provides defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_LOAN_PERIOD_DAYS = 14
DEFAULT_FINE_PER_DAY = 1

_TRUTHY = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a whole number, got {raw!r}") from None


@dataclass
class Config:
    """Application configuration."""

    # Storage
    data_path: Path
    keep_corrupt: bool

    # Circulation policy
    loan_period_days: int
    fine_per_day: int  # currency units per whole day overdue

    # Diagnostics
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Raises:
            ValueError: If a numeric setting is not a whole number
        """
        data_path_str = os.environ.get(
            "CIRCDESK_DATA_PATH",
            str(Path.home() / ".circdesk" / "library.db"),
        )

        return cls(
            data_path=Path(data_path_str).expanduser(),
            keep_corrupt=os.environ.get("CIRCDESK_KEEP_CORRUPT", "").lower() in _TRUTHY,
            loan_period_days=_env_int("CIRCDESK_LOAN_DAYS", DEFAULT_LOAN_PERIOD_DAYS),
            fine_per_day=_env_int("CIRCDESK_FINE_PER_DAY", DEFAULT_FINE_PER_DAY),
            log_level=os.environ.get("CIRCDESK_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.loan_period_days <= 0:
            errors.append(f"Loan period must be positive, got {self.loan_period_days}")
        if self.fine_per_day < 0:
            errors.append(f"Fine per day cannot be negative, got {self.fine_per_day}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")

        # Check data directory is writable
        if not self.data_path.parent.exists():
            try:
                self.data_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError:
                errors.append(f"Cannot create data directory: {self.data_path.parent}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
