"""Custom exceptions for configuration handling."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from vanity.exceptions import VanityError


class ConfigError(VanityError):
    """Base exception for all configuration-related errors."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration file fails validation."""

    def __init__(self, config_path: Path | None, errors: Sequence[dict[str, Any]] | None = None) -> None:
        self.config_path = config_path
        self.errors = list(errors or [])
        details = "; ".join(
            f"{' -> '.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in self.errors
        )
        source = f" in {config_path}" if config_path else ""
        message = f"Configuration validation failed{source} with {len(self.errors)} error(s)"
        super().__init__(f"{message}: {details}" if details else message)


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""

    def __init__(self, config_path: Path, reason: str) -> None:
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Could not parse {config_path}: {reason}")


class ConfigExistsError(ConfigError):
    """Raised when ``config init`` would overwrite an existing file."""

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        super().__init__(f"Configuration already exists at {config_path} (use --force to overwrite)")
