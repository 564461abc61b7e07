"""Configuration management for CineScope."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import toml

from cinescope.gateways.tmdb import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from cinescope.log import DEFAULT_LOG_FILE
from cinescope.ui.utils import DEFAULT_IMAGE_BASE_URL

ALLOWED_THEMES = [
    "textual-dark",
    "textual-light",
    "nord",
    "gruvbox",
    "dracula",
    "tokyo-night",
    "monokai",
    "solarized-light",
]
ALLOWED_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
CONFIG_FILE_PATH = Path.home() / ".cinescope.config"


@dataclass
class CineScopeConfig:
    """CineScope configuration settings."""

    api_base_url: str = DEFAULT_BASE_URL
    api_token: Optional[str] = None
    image_base_url: str = DEFAULT_IMAGE_BASE_URL
    trending_url: Optional[str] = None
    trending_api_key: Optional[str] = None
    request_timeout: float = DEFAULT_TIMEOUT
    theme: str = "textual-dark"
    log_file: Optional[str] = DEFAULT_LOG_FILE
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration settings."""
        if self.theme not in ALLOWED_THEMES:
            raise ValueError(f"Invalid theme '{self.theme}'. Allowed themes: {', '.join(ALLOWED_THEMES)}")

        for name in ("api_base_url", "image_base_url", "trending_url"):
            url = getattr(self, name)
            if url and not url.startswith(("http://", "https://")):
                raise ValueError(f"Invalid {name} '{url}'. It must start with http:// or https://")

        try:
            self.request_timeout = float(self.request_timeout)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid request_timeout '{self.request_timeout}'. It must be a number")
        if self.request_timeout <= 0:
            raise ValueError(f"Invalid request_timeout '{self.request_timeout}'. It must be positive")

        self.log_level = str(self.log_level).upper()
        if self.log_level not in ALLOWED_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. Allowed levels: {', '.join(ALLOWED_LOG_LEVELS)}"
            )


def load_config(config_file_path: Optional[str] = None) -> CineScopeConfig:
    """Load configuration from file."""
    if config_file_path:
        config_path = Path(config_file_path)
    else:
        config_path = CONFIG_FILE_PATH

    if not config_path.exists():
        return CineScopeConfig()

    try:
        with open(config_path, "r") as f:
            config_data = toml.load(f)

        # Extract only the fields that belong to CineScopeConfig
        valid_fields = {field.name for field in CineScopeConfig.__dataclass_fields__.values()}

        filtered_config = {key: value for key, value in config_data.items() if key in valid_fields}

        return CineScopeConfig(**filtered_config)

    except Exception as e:
        raise ValueError(f"Error loading config file {config_path}: {e}")


def merge_config_with_cli_args(config: CineScopeConfig, **cli_args) -> CineScopeConfig:
    """Merge configuration with CLI arguments, giving priority to CLI args."""
    merged_config = {}

    for field_name in CineScopeConfig.__dataclass_fields__:
        merged_config[field_name] = getattr(config, field_name)

    # Override with CLI args where provided (not None)
    for key, value in cli_args.items():
        if value is not None:
            merged_config[key] = value

    return CineScopeConfig(**merged_config)


def save_config(config: dict, config_file_path: Optional[str] = None) -> Path:
    """Validate and write a configuration dictionary as TOML."""
    config_path = Path(config_file_path) if config_file_path else CONFIG_FILE_PATH
    CineScopeConfig(**config)

    with open(config_path, "w") as f:
        toml.dump(config, f)

    return config_path
