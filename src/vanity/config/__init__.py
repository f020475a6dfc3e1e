"""Site configuration.

Everything configuration-related is importable from here:

    from vanity.config import VanityConfig, load_vanity_config
"""

from vanity.config.exceptions import ConfigError, ConfigExistsError, ConfigParseError, ConfigValidationError
from vanity.config.settings import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    PathsSettings,
    SitePaths,
    VanityConfig,
    config_path_for,
    find_vanity_config,
    load_vanity_config,
    resolve_site_root,
    save_vanity_config,
)

__all__ = [
    "CONFIG_DIR_NAME",
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ConfigExistsError",
    "ConfigParseError",
    "ConfigValidationError",
    "PathsSettings",
    "SitePaths",
    "VanityConfig",
    "config_path_for",
    "find_vanity_config",
    "load_vanity_config",
    "resolve_site_root",
    "save_vanity_config",
]
