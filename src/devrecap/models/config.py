"""Configuration models."""

import tomllib
from pathlib import Path
from typing import List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from devrecap.errors import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "devrecap" / "config.toml"
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "devrecap"

DEFAULT_EXCLUDE_PATTERNS = [
    "node_modules",
    "target",
    ".git",
    "dist",
    "build",
    "__pycache__",
    ".venv",
    "vendor",
    ".next",
    "out",
]

DEFAULT_CONFIG_TEMPLATE = """\
# devrecap configuration

# Author email used to filter commits (substring, case-insensitive)
# default_author_email = "you@example.com"

# Number of days to look back when no explicit dates are given
default_timespan_days = 14

# Directory names (or name fragments) skipped while scanning
exclude_patterns = [
    "node_modules",
    "target",
    ".git",
    "dist",
    "build",
    "__pycache__",
    ".venv",
    "vendor",
    ".next",
    "out",
]

# Maximum directory depth for scanning (unset = unlimited)
# max_scan_depth = 4

# Summary cache
cache_enabled = true
cache_ttl_hours = 168

# Number of repositories analyzed in parallel
max_workers = 1

log_level = "INFO"
"""


class Settings(BaseSettings):
    """Application settings.

    Values come from an optional TOML file, overlaid by environment variables
    prefixed with DEVRECAP_ (e.g., DEVRECAP_DEFAULT_TIMESPAN_DAYS) or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEVRECAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_author_email: Optional[str] = Field(
        None, description="Default author email for filtering commits"
    )
    default_timespan_days: int = Field(14, gt=0, description="Default timespan in days")
    exclude_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Directory name patterns excluded from scanning",
    )
    max_scan_depth: Optional[int] = Field(
        None, ge=0, description="Maximum directory depth for scanning (None = unlimited)"
    )
    cache_enabled: bool = Field(True, description="Enable the summary cache")
    cache_ttl_hours: int = Field(168, gt=0, description="Cache TTL in hours")
    cache_dir: Path = Field(DEFAULT_CACHE_DIR, description="Directory for cached summaries")
    max_workers: int = Field(1, ge=1, description="Repositories analyzed concurrently")
    log_level: str = Field("INFO", description="Log level")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        """Load settings from a TOML file and the environment.

        Environment variables take precedence over values from the file. A
        missing file is not an error; defaults are used instead.

        Args:
            path: Config file path (defaults to ~/.config/devrecap/config.toml)

        Returns:
            Settings object

        Raises:
            ConfigError: If the file cannot be parsed or values are invalid
        """
        config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

        file_values = {}
        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    file_values = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ConfigError(f"Could not read config file {config_path}: {e}") from e

        try:
            from_env = cls()
            overrides = {name: getattr(from_env, name) for name in from_env.model_fields_set}
            return cls(**{**file_values, **overrides})
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @staticmethod
    def write_default(path: Optional[Path] = None, force: bool = False) -> Path:
        """Write the default configuration file.

        Args:
            path: Target path (defaults to ~/.config/devrecap/config.toml)
            force: Overwrite an existing file

        Returns:
            Path of the written file

        Raises:
            ConfigError: If the file exists and force is False
        """
        config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        if config_path.exists() and not force:
            raise ConfigError(f"Config file already exists: {config_path}")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(DEFAULT_CONFIG_TEMPLATE)
        return config_path
