"""UI Scout configuration.

Defaults for a discovery run, overridable from JSON files or from
UI_SCOUT_* environment variables (a .env file is honoured).
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ui_scout.utils import ValidationError, validate_positive

# =============================================================================
# BACKENDS
# =============================================================================

SUPPORTED_BACKENDS = ("playwright", "puppeteer", "snapshot")
DEFAULT_BACKEND = "playwright"

# =============================================================================
# TIMEOUTS (seconds)
# =============================================================================

# Bound on every single driver call made by the executor
DEFAULT_TIMEOUT = 5.0

# Bound on page navigation
DEFAULT_NAVIGATION_TIMEOUT = 30.0

# =============================================================================
# OUTPUT
# =============================================================================

REPORT_FILENAME = "feature-discovery-report.json"
SCREENSHOT_FILENAME = "page.png"

ENV_PREFIX = "UI_SCOUT_"


class ConfigurationError(ValidationError):
    """Invalid backend name or configuration value."""
    pass


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ScoutConfig:
    """Runtime configuration for one discovery run."""

    # Backend
    backend: str = DEFAULT_BACKEND

    # Timeouts
    timeout: float = DEFAULT_TIMEOUT
    navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT

    # Pipeline stages
    generate_tests: bool = True
    execute_tests: bool = True
    discover_dynamic: bool = False
    analyze_page: bool = False
    capture_screenshot: bool = False

    # Discovery filters
    include_hidden: bool = False
    include_disabled: bool = False

    # Output
    output_dir: Optional[str] = None
    screenshot_dir: Optional[str] = None

    def validate(self) -> "ScoutConfig":
        """
        Check every value.

        Raises:
            ConfigurationError: On an unknown backend or a non-positive timeout
        """
        if self.backend not in SUPPORTED_BACKENDS:
            raise ConfigurationError(
                f"Unsupported backend: {self.backend}. "
                f"Supported backends: {', '.join(SUPPORTED_BACKENDS)}"
            )
        try:
            validate_positive(self.timeout, "timeout")
            validate_positive(self.navigation_timeout, "navigation_timeout")
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e
        return self

    @property
    def report_path(self) -> Optional[Path]:
        if not self.output_dir:
            return None
        return Path(self.output_dir) / REPORT_FILENAME

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ScoutConfig":
        """Build from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ScoutConfig":
        """
        Build from UI_SCOUT_* environment variables.

        Example: UI_SCOUT_BACKEND=puppeteer, UI_SCOUT_TIMEOUT=10,
        UI_SCOUT_EXECUTE_TESTS=false.
        """
        load_dotenv(env_file)
        config = cls()
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            default = getattr(config, f.name)
            if isinstance(default, bool):
                value = _parse_bool(raw)
            elif isinstance(default, float):
                try:
                    value = float(raw)
                except ValueError:
                    raise ConfigurationError(f"{ENV_PREFIX}{f.name.upper()} must be a number, got {raw!r}")
            else:
                value = raw
            setattr(config, f.name, value)
        return config

    @classmethod
    def load(cls, filepath: str) -> "ScoutConfig":
        """Load config from a JSON file."""
        with open(filepath, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def save(self, filepath: str) -> None:
        """Save config to a JSON file."""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
