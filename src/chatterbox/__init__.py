"""chatterbox: a small markup language for stylised chat transcripts.

Parses Chatterbox blocks (speech messages, comments, capsules, delimiters
and rich-text blocks, with an optional YAML header) into typed entries
and renders them into an HTML element tree.
"""

from __future__ import annotations

from chatterbox.frontmatter import ConfigFailure, ConfigSuccess, parse_yaml_config
from chatterbox.models.config import AuthorInfo, ChatterboxConfig, merge_configs
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
from chatterbox.parser import ParseFailure, ParseSuccess, parse_chatterbox, parse_chatterbox_file

__version__ = "0.1.0"

__all__ = [
    "AuthorInfo",
    "CapsuleEntry",
    "ChatterboxConfig",
    "CommentEntry",
    "ConfigFailure",
    "ConfigSuccess",
    "DelimiterEntry",
    "Entry",
    "EntryKind",
    "MessageDirection",
    "MessageEntry",
    "ParseFailure",
    "ParseSuccess",
    "RichBlockEntry",
    "merge_configs",
    "parse_chatterbox",
    "parse_chatterbox_file",
    "parse_yaml_config",
]
