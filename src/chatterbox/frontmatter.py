"""YAML configuration extraction for Chatterbox blocks.

A block may start with a ``---``-delimited header holding YAML
configuration.  :func:`split_frontmatter` locates it and
:func:`parse_yaml_config` turns its text (or the plugin-wide default
configuration text) into a validated
:class:`~chatterbox.models.config.ChatterboxConfig`.

Errors are returned as data, never raised, so callers can display every
problem at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

import yaml
from pydantic import ValidationError

from chatterbox.models.config import ChatterboxConfig

logger = logging.getLogger(__name__)

FRONTMATTER_FENCE = "---"
_PATH_SEPARATOR = " → "


@dataclass(frozen=True)
class ConfigSuccess:
    """Returned by :func:`parse_yaml_config` for a usable configuration."""

    config: ChatterboxConfig
    is_error: bool = field(default=False, init=False)


@dataclass(frozen=True)
class ConfigFailure:
    """Returned by :func:`parse_yaml_config` when the source is unusable.

    Attributes:
        error_list: Human-readable messages, one per problem detected.
    """

    error_list: list[str]
    is_error: bool = field(default=True, init=False)


ConfigResult = Union[ConfigSuccess, ConfigFailure]


def format_validation_error(error: ValidationError) -> list[str]:
    """Convert a pydantic :class:`ValidationError` into display strings.

    Each issue becomes ``"<message> @ <path>"`` where the path segments
    are joined with an arrow.
    """
    return [
        f"{issue['msg']} @ {_PATH_SEPARATOR.join(str(part) for part in issue['loc'])}"
        for issue in error.errors()
    ]


def parse_yaml_config(source: str, label: str = "Frontmatter") -> ConfigResult:
    """Deserialise and validate Chatterbox configuration YAML.

    Args:
        source: YAML text.  Empty text yields an all-absent configuration.
        label: Name of the source used in the "not valid YAML" message.

    Returns:
        :class:`ConfigSuccess` with the validated configuration, or
        :class:`ConfigFailure` when the YAML is malformed or its top-level
        value is not a mapping.  Invalid individual fields never fail;
        they are dropped by the validator.
    """
    try:
        document = yaml.safe_load(source)
    except yaml.YAMLError as exc:
        logger.warning("%s is not valid YAML: %s", label, exc)
        return ConfigFailure(error_list=[f"{label} is not valid YAML."])

    try:
        config = ChatterboxConfig.model_validate(document)
    except ValidationError as exc:
        error_list = format_validation_error(exc)
        logger.warning("%s failed validation: %s", label, "; ".join(error_list))
        return ConfigFailure(error_list=error_list)

    return ConfigSuccess(config=config)


def split_frontmatter(lines: list[str]) -> tuple[str | None, int]:
    """Locate a leading ``---`` header in already split *lines*.

    Args:
        lines: Source lines without line endings.

    Returns:
        ``(header_text, body_start)``.  *header_text* is the text strictly
        between the opening and closing fence lines joined with ``\\n``, or
        ``None`` when there is no complete header; *body_start* is the
        index of the first line after the header (``0`` without one).
    """
    if len(lines) < 2 or lines[0] != FRONTMATTER_FENCE:
        return None, 0

    for idx in range(1, len(lines)):
        if lines[idx] == FRONTMATTER_FENCE:
            return "\n".join(lines[1:idx]), idx + 1

    return None, 0
