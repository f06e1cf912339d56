"""Plugin-wide settings for chatterbox.

Reads settings from environment variables (with .env support via
python-dotenv).  The most important one is the default configuration: a
YAML document, validated like a block header, that every block's own
configuration is merged over.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from chatterbox.frontmatter import ConfigFailure, parse_yaml_config
from chatterbox.models.config import ChatterboxConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_LABEL = "Default configuration"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when settings are missing or invalid."""


@dataclass(frozen=True)
class Settings:
    """Settings loaded from environment variables.

    Attributes:
        default_config: YAML text of the default configuration
            (default ``""``, i.e. nothing configured).
        apply_markdown_fixes: Tag first/last children of rich content
            (default ``True``).
        log_level: Logging level (default ``"INFO"``).
    """

    default_config: str = ""
    apply_markdown_fixes: bool = True
    log_level: str = "INFO"


def _parse_bool(env_var: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{env_var} must be a boolean, got {raw!r}")


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the working
    directory is picked up automatically.

    ``CHATTERBOX_DEFAULT_CONFIG`` holds the default configuration inline;
    when it is unset, ``CHATTERBOX_DEFAULT_CONFIG_FILE`` may name a YAML
    file to read it from.

    Returns:
        A :class:`Settings` instance.

    Raises:
        ConfigError: If the default configuration file cannot be read or
            ``CHATTERBOX_MARKDOWN_FIXES`` is not a recognised boolean.
    """
    load_dotenv()

    values: dict[str, object] = {}

    inline_config = os.environ.get("CHATTERBOX_DEFAULT_CONFIG")
    config_file = os.environ.get("CHATTERBOX_DEFAULT_CONFIG_FILE", "").strip()

    if inline_config is not None:
        values["default_config"] = inline_config
    elif config_file:
        path = Path(config_file)
        try:
            values["default_config"] = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read default configuration file {path}: {exc}") from exc

    markdown_fixes = os.environ.get("CHATTERBOX_MARKDOWN_FIXES", "").strip()
    if markdown_fixes:
        values["apply_markdown_fixes"] = _parse_bool("CHATTERBOX_MARKDOWN_FIXES", markdown_fixes)

    log_level = os.environ.get("LOG_LEVEL", "").strip()
    if log_level:
        values["log_level"] = log_level

    return Settings(**values)  # type: ignore[arg-type]


def resolve_default_config(settings: Settings) -> ChatterboxConfig:
    """Validate the default configuration held by *settings*.

    A broken default configuration must not break every block, so errors
    are logged and the all-absent configuration is returned instead.
    """
    result = parse_yaml_config(settings.default_config, label=DEFAULT_CONFIG_LABEL)

    if isinstance(result, ConfigFailure):
        logger.warning(
            "Ignoring default configuration: %s", "; ".join(result.error_list)
        )
        return ChatterboxConfig()

    return result.config
