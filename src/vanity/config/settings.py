"""Configuration for a Vanity site.

Settings live in ``.vanity/vanity.toml`` under the site root. Every path is
relative to the site root so the same file works from any checkout.

Priority, highest first:
    1. Environment variables (``VANITY_PATHS__READINGS_DIR`` and friends)
    2. The config file
    3. Defaults

Loading never writes; ``vanity config init`` is the only thing that creates
the file.
"""

from __future__ import annotations

import logging
import os
import tomllib
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vanity.config.exceptions import ConfigExistsError, ConfigParseError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".vanity"
CONFIG_FILE_NAME = "vanity.toml"
ENV_PREFIX = "VANITY_"


class PathsSettings(BaseModel):
    """Site directory layout, relative to the site root."""

    model_config = ConfigDict(extra="forbid")

    content_dir: str = Field(
        default="content",
        description="Root of all markdown content (hashed by the export cache)",
    )
    readings_dir: str = Field(
        default="content/readings",
        description="One markdown file per reading",
    )
    images_dir: str = Field(
        default="public/images/readings",
        description="Processed cover images",
    )
    data_dir: str = Field(
        default="public/data",
        description="Published JSON consumed by the website",
    )
    image_web_prefix: str = Field(
        default="/images/readings",
        description="Site-relative URL prefix the website serves covers from",
    )

    @field_validator("content_dir", "readings_dir", "images_dir", "data_dir", mode="after")
    @classmethod
    def validate_safe_path(cls, v: str) -> str:
        """Validate path is relative and does not contain traversal sequences."""
        if not v:
            msg = "Path must not be empty"
            raise ValueError(msg)
        path = Path(v)
        if path.is_absolute():
            msg = f"Path must be relative, not absolute: {v}"
            raise ValueError(msg)
        if any(part == ".." for part in path.parts):
            msg = f"Path must not contain traversal sequences ('..'): {v}"
            raise ValueError(msg)
        return v

    @field_validator("image_web_prefix", mode="after")
    @classmethod
    def validate_web_prefix(cls, v: str) -> str:
        if not v.startswith("/"):
            msg = f"Web prefix must be site-root-relative (start with '/'): {v}"
            raise ValueError(msg)
        return v.rstrip("/") or "/"


@dataclass(frozen=True, slots=True)
class SitePaths:
    """Absolute locations for one site, resolved from :class:`PathsSettings`."""

    site_root: Path
    content_dir: Path
    readings_dir: Path
    images_dir: Path
    data_dir: Path
    image_web_prefix: str


class VanityConfig(BaseSettings):
    """Root configuration, the schema of ``.vanity/vanity.toml``.

    Supports environment variable overrides with the pattern
    ``VANITY_SECTION__KEY`` (e.g. ``VANITY_PATHS__READINGS_DIR``).
    """

    paths: PathsSettings = Field(
        default_factory=PathsSettings,
        description="Site directory paths (relative to site root)",
    )

    model_config = SettingsConfigDict(
        extra="forbid",
        validate_assignment=True,
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
    )

    def site_paths(self, site_root: Path) -> SitePaths:
        root = site_root.expanduser().resolve()
        return SitePaths(
            site_root=root,
            content_dir=root / self.paths.content_dir,
            readings_dir=root / self.paths.readings_dir,
            images_dir=root / self.paths.images_dir,
            data_dir=root / self.paths.data_dir,
            image_web_prefix=self.paths.image_web_prefix,
        )


def config_path_for(site_root: Path) -> Path:
    return site_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def find_vanity_config(start_dir: Path) -> Path | None:
    """Search upward from ``start_dir`` for ``.vanity/vanity.toml``."""
    current = start_dir.expanduser().resolve()
    for candidate in (current, *current.parents):
        config_path = config_path_for(candidate)
        if config_path.is_file():
            return config_path
    return None


def resolve_site_root(start_dir: Path) -> Path:
    """Return the directory owning the nearest config, or ``start_dir`` itself."""
    config_path = find_vanity_config(start_dir)
    if config_path is None:
        return start_dir.expanduser().resolve()
    return config_path.parent.parent


def _collect_env_override_paths() -> set[tuple[str, ...]]:
    """Return the set of config paths defined via environment variables."""
    env_paths: set[tuple[str, ...]] = set()
    for key in os.environ:
        if not key.startswith(ENV_PREFIX):
            continue
        parts = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if parts:
            env_paths.add(tuple(parts))
    return env_paths


def _merge_config(
    base: dict[str, Any],
    override: dict[str, Any],
    env_override_paths: set[tuple[str, ...]],
    current_path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Merge override into base, skipping keys provided via env vars."""
    merged = deepcopy(base)

    for key, value in override.items():
        path = (*current_path, str(key).lower())
        if path in env_override_paths:
            continue

        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_config(merged[key], value, env_override_paths, path)
        else:
            merged[key] = value

    return merged


def load_vanity_config(site_root: Path | None = None) -> VanityConfig:
    """Load configuration for the site at (or above) ``site_root``.

    Raises:
        ConfigParseError: if the file is not valid TOML.
        ConfigValidationError: if the file or the environment holds invalid values.

    """
    if site_root is None:
        site_root = Path.cwd()

    config_path = find_vanity_config(site_root)

    try:
        base_config = VanityConfig()
    except ValidationError as e:
        raise ConfigValidationError(None, e.errors()) from e

    if config_path is None:
        logger.debug("No %s found; using defaults", CONFIG_FILE_NAME)
        return base_config

    logger.debug("Loading config from %s", config_path)
    try:
        file_data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    merged = _merge_config(
        base_config.model_dump(mode="json"),
        file_data,
        _collect_env_override_paths(),
    )
    try:
        return VanityConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigValidationError(config_path, e.errors()) from e


def save_vanity_config(config: VanityConfig, site_root: Path, *, overwrite: bool = False) -> Path:
    """Write ``config`` to ``<site_root>/.vanity/vanity.toml``.

    Raises:
        ConfigExistsError: if the file exists and ``overwrite`` is false.

    """
    config_path = config_path_for(site_root)
    if config_path.exists() and not overwrite:
        raise ConfigExistsError(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(exclude_none=True, mode="json")
    config_path.write_text(tomli_w.dumps(data), encoding="utf-8")
    logger.debug("Saved config to %s", config_path)
    return config_path


__all__ = [
    "CONFIG_DIR_NAME",
    "CONFIG_FILE_NAME",
    "PathsSettings",
    "SitePaths",
    "VanityConfig",
    "config_path_for",
    "find_vanity_config",
    "load_vanity_config",
    "resolve_site_root",
    "save_vanity_config",
]
