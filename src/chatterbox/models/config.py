"""Pydantic models for Chatterbox configuration.

Configuration normally comes from untrusted, loosely typed YAML.  Every
field validator here is lenient: a value that fails validation becomes
``None`` ("absent") instead of raising, so one bad field never takes its
siblings down with it.  Validation as a whole only fails when the input is
not shaped like a mapping at all.

- :class:`AuthorInfo` -- per-author display overrides.
- :class:`ChatterboxConfig` -- the full configuration record.
- :func:`merge_configs` -- shallow merge of plugin defaults and a block's
  own configuration.
"""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from chatterbox.colors import normalize_color
from chatterbox.patterns import CSS_LENGTH_RE

ChatterboxMode = Literal["base", "bubble", "simple"]

CHATTERBOX_MODES: tuple[str, ...] = get_args(ChatterboxMode)

# Defaults applied by consumers, never by the validator.
DEFAULT_MODE: ChatterboxMode = "bubble"
DEFAULT_AUTO_COLOR_AUTHORS: bool = True


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _color_or_none(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return normalize_color(value)


def _css_length_or_none(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value if CSS_LENGTH_RE.match(value) else None


def _mapping_input(value: Any) -> Any:
    """Treat a missing (``None``) document as an empty mapping."""
    return {} if value is None else value


# ---------------------------------------------------------------------------
# AuthorInfo
# ---------------------------------------------------------------------------


class AuthorInfo(BaseModel):
    """Display overrides for a single author.

    Attributes:
        background_color: Message background colour (``#rrggbbaa``).
        full_name: Name displayed instead of the short author key.
        author_color: Author name colour (``#rrggbbaa``).
        text_color: Message text colour (``#rrggbbaa``).
        subtext_color: Subtext colour (``#rrggbbaa``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    background_color: str | None = Field(default=None, alias="backgroundColor")
    full_name: str | None = Field(default=None, alias="fullName")
    author_color: str | None = Field(default=None, alias="authorColor")
    text_color: str | None = Field(default=None, alias="textColor")
    subtext_color: str | None = Field(default=None, alias="subtextColor")

    @model_validator(mode="before")
    @classmethod
    def _empty_entry(cls, value: Any) -> Any:
        return _mapping_input(value)

    @field_validator(
        "background_color", "author_color", "text_color", "subtext_color", mode="before"
    )
    @classmethod
    def _normalize_color(cls, value: Any) -> str | None:
        return _color_or_none(value)

    @field_validator("full_name", mode="before")
    @classmethod
    def _full_name_string(cls, value: Any) -> str | None:
        return _string_or_none(value)


# ---------------------------------------------------------------------------
# ChatterboxConfig
# ---------------------------------------------------------------------------


class ChatterboxConfig(BaseModel):
    """Validated configuration for one Chatterbox block.

    All fields are optional; ``None`` means "absent" whether the key was
    missing or its value was invalid.

    Attributes:
        mode: Rendering mode.  Consumers fall back to :data:`DEFAULT_MODE`.
        chatterbox_id: Identifier exposed on the rendered root element.
        auto_color_authors: Whether authors without an explicit colour get
            an automatic one.  Consumers fall back to
            :data:`DEFAULT_AUTO_COLOR_AUTHORS`.
        classes: Extra CSS class name(s) for the rendered root element.
        max_capsule_width: CSS length.
        max_comment_width: CSS length.
        min_message_width: CSS length.
        max_message_width: CSS length.
        authors: Per-author overrides keyed by author name.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mode: ChatterboxMode | None = None
    chatterbox_id: str | None = Field(default=None, alias="chatterboxId")
    auto_color_authors: bool | None = Field(default=None, alias="autoColorAuthors")
    classes: str | list[str] | None = None
    max_capsule_width: str | None = Field(default=None, alias="maxCapsuleWidth")
    max_comment_width: str | None = Field(default=None, alias="maxCommentWidth")
    min_message_width: str | None = Field(default=None, alias="minMessageWidth")
    max_message_width: str | None = Field(default=None, alias="maxMessageWidth")
    authors: dict[str, AuthorInfo] | None = None

    @model_validator(mode="before")
    @classmethod
    def _empty_document(cls, value: Any) -> Any:
        return _mapping_input(value)

    @field_validator("mode", mode="before")
    @classmethod
    def _known_mode(cls, value: Any) -> str | None:
        return value if isinstance(value, str) and value in CHATTERBOX_MODES else None

    @field_validator("chatterbox_id", mode="before")
    @classmethod
    def _id_string(cls, value: Any) -> str | None:
        return _string_or_none(value)

    @field_validator("auto_color_authors", mode="before")
    @classmethod
    def _strict_bool(cls, value: Any) -> bool | None:
        return value if isinstance(value, bool) else None

    @field_validator("classes", mode="before")
    @classmethod
    def _class_names(cls, value: Any) -> str | list[str] | None:
        if isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return [item for item in value if isinstance(item, str)]
        return None

    @field_validator(
        "max_capsule_width",
        "max_comment_width",
        "min_message_width",
        "max_message_width",
        mode="before",
    )
    @classmethod
    def _css_length(cls, value: Any) -> str | None:
        return _css_length_or_none(value)

    @field_validator("authors", mode="before")
    @classmethod
    def _author_map(cls, value: Any) -> dict[str, AuthorInfo] | None:
        if not isinstance(value, dict):
            return None

        authors: dict[str, AuthorInfo] = {}
        for name, info in value.items():
            if isinstance(info, AuthorInfo):
                authors[str(name)] = info
            elif info is None or isinstance(info, dict):
                authors[str(name)] = AuthorInfo.model_validate(info)
        return authors

    @property
    def class_list(self) -> list[str]:
        """Extra CSS classes as a list, whatever form they were given in."""
        if self.classes is None:
            return []
        if isinstance(self.classes, str):
            return self.classes.split()
        return list(self.classes)


def merge_configs(defaults: ChatterboxConfig, overrides: ChatterboxConfig) -> ChatterboxConfig:
    """Shallow-merge two configurations.

    Every field that is present (not ``None``) in *overrides* replaces the
    corresponding field of *defaults*; nested values such as ``authors``
    are replaced wholesale, not merged.

    Args:
        defaults: Plugin-wide default configuration.
        overrides: Configuration of the block being rendered.

    Returns:
        A new :class:`ChatterboxConfig`.
    """
    update = {
        name: getattr(overrides, name)
        for name in ChatterboxConfig.model_fields
        if getattr(overrides, name) is not None
    }
    return defaults.model_copy(update=update)
