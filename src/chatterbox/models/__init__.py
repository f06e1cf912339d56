"""Data models for chatterbox."""

from __future__ import annotations

from chatterbox.models.config import (
    CHATTERBOX_MODES,
    DEFAULT_AUTO_COLOR_AUTHORS,
    DEFAULT_MODE,
    AuthorInfo,
    ChatterboxConfig,
    merge_configs,
)
from chatterbox.models.entries import (
    CapsuleEntry,
    CommentEntry,
    DelimiterEntry,
    Entry,
    EntryKind,
    MessageDirection,
    MessageEntry,
    RichBlockEntry,
)

__all__ = [
    "CHATTERBOX_MODES",
    "DEFAULT_AUTO_COLOR_AUTHORS",
    "DEFAULT_MODE",
    "AuthorInfo",
    "CapsuleEntry",
    "ChatterboxConfig",
    "CommentEntry",
    "DelimiterEntry",
    "Entry",
    "EntryKind",
    "MessageDirection",
    "MessageEntry",
    "RichBlockEntry",
    "merge_configs",
]
