"""Configuration management for obsi."""

import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{key}={value!r} is not an integer, using {default}")
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


HOME = Path.home()

# Default vault location
DEFAULT_VAULT_PATH = HOME / "Obsi"

# Config file (JSON, camelCase keys)
DEFAULT_CONFIG_FILE = HOME / ".config" / "obsi" / "config.json"

# Display caps. The TUI default listing is shorter than the CLI listing.
BROWSE_RESULT_LIMIT = 20
SEARCH_RESULT_LIMIT = 50

# 0 = exact, 1 = no match
FUZZY_THRESHOLD = 0.4

NOTE_EXTENSIONS = (".md",)

# Optional directory of prompt overrides (<name>.md)
PROMPTS_DIR = get_env("OBSI_PROMPTS_DIR", "")

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO")

# OBSI_DEBUG=1 behaves like --debug
DEBUG_ENV = "OBSI_DEBUG"

# Environment variables that override config.json fields
ENV_OVERRIDES = {
    "browse_limit": "OBSI_BROWSE_LIMIT",
    "search_limit": "OBSI_SEARCH_LIMIT",
}


class ObsiError(Exception):
    """Base error for obsi."""

    pass


class ConfigError(ObsiError):
    """Raised when the config file is invalid and strict loading was requested."""

    pass


class ObsiConfig(BaseModel):
    """Typed settings loaded from config.json.

    Keys use the camelCase names written by earlier releases; snake_case
    names are accepted too.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    vault_path: Path = Field(default=DEFAULT_VAULT_PATH, alias="vaultPath")
    browse_limit: int = Field(default=BROWSE_RESULT_LIMIT, alias="browseLimit", ge=1)
    search_limit: int = Field(default=SEARCH_RESULT_LIMIT, alias="searchLimit", ge=1)
    fuzzy_threshold: float = Field(
        default=FUZZY_THRESHOLD, alias="fuzzyThreshold", ge=0.0, le=1.0
    )
    note_extensions: tuple[str, ...] = Field(
        default=NOTE_EXTENSIONS, alias="noteExtensions"
    )


def get_config_file() -> Path:
    """Location of config.json ($OBSI_CONFIG_FILE overrides the default)."""
    override = get_env("OBSI_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_FILE


def apply_env_overrides(config: ObsiConfig) -> ObsiConfig:
    """
    Apply $OBSI_BROWSE_LIMIT and $OBSI_SEARCH_LIMIT on top of file settings.

    Values that are not integers, or are below 1, are ignored with a warning.
    """
    updates = {}
    for field_name, key in ENV_OVERRIDES.items():
        current = getattr(config, field_name)
        value = get_env_int(key, current)
        if value < 1:
            logger.warning(f"{key}={value} must be at least 1, using {current}")
            continue
        if value != current:
            updates[field_name] = value
    if not updates:
        return config
    logger.debug(f"Settings overridden from environment: {updates}")
    return config.model_copy(update=updates)


def load_config(config_file: Path | None = None, strict: bool = False) -> ObsiConfig:
    """
    Load config.json, falling back to defaults.

    Args:
        config_file: Path to the config file (defaults to get_config_file())
        strict: Raise ConfigError instead of falling back on invalid files

    Returns:
        ObsiConfig
    """
    path = config_file or get_config_file()
    if not path.exists():
        logger.debug(f"No config file at {path}")
        return apply_env_overrides(ObsiConfig())

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ConfigError(
                f"{path} must contain a JSON object, got {type(raw).__name__}"
            )
        config = ObsiConfig.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError, ConfigError) as e:
        if strict:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"Invalid config file {path}: {e}") from e
        logger.warning(f"Ignoring invalid config file {path}: {e}")
        return apply_env_overrides(ObsiConfig())

    logger.debug(f"Config loaded from {path}: vault_path={config.vault_path}")
    return apply_env_overrides(config)


def resolve_vault_path(vault: str | None = None, config: ObsiConfig | None = None) -> Path:
    """
    Resolve the vault path from argument, env var, config file or default.

    The vault does not have to exist; callers decide how to treat a
    missing vault.
    """
    if vault:
        return Path(vault).expanduser()

    env_vault = get_env("OBSIDIAN_VAULT")
    if env_vault:
        return Path(env_vault).expanduser()

    config = config or load_config()
    return Path(config.vault_path).expanduser()


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure and return logger."""
    level = logging.DEBUG if debug else getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )
    return logging.getLogger("obsi")
