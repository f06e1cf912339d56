"""Console output for parsed Chatterbox blocks.

:func:`format_parse_result` renders a parse result as a plain-text
summary: the effective configuration, the authors with their order
labels, and one line per entry.  :func:`print_parse_result` writes it to
stdout.
"""

from __future__ import annotations

import sys

from chatterbox.authors import author_order_map
from chatterbox.models.config import DEFAULT_MODE
from chatterbox.models.entries import (
    CapsuleEntry,
    CommentEntry,
    Entry,
    MessageDirection,
    MessageEntry,
    RichBlockEntry,
)
from chatterbox.parser import ParseFailure, ParseResult, ParseSuccess

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BANNER_WIDTH = 60
_SEPARATOR = "=" * _BANNER_WIDTH
_PREVIEW_WIDTH = 48

_DIRECTION_ARROWS = {
    MessageDirection.LEFT: "<",
    MessageDirection.RIGHT: ">",
    MessageDirection.CENTER: "^",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def format_parse_result(result: ParseResult, source: str = "<string>") -> str:
    """Render *result* as a multi-line console summary.

    Args:
        result: Parse result to describe.
        source: Label for where the block came from (e.g. a file path).

    Returns:
        A multi-line string ready for console display.
    """
    lines: list[str] = [_SEPARATOR, f"  CHATTERBOX: {source}", _SEPARATOR]

    if isinstance(result, ParseFailure):
        lines.append("")
        lines.append("--- Errors ---")
        lines.extend(f"  - {error}" for error in result.error_list)
    else:
        _append_config(lines, result)
        _append_authors(lines, result)
        _append_entries(lines, result)

    lines.append(_SEPARATOR)
    return "\n".join(lines)


def print_parse_result(result: ParseResult, source: str = "<string>") -> None:
    """Format and print *result* to stdout."""
    sys.stdout.write(format_parse_result(result, source) + "\n")


# ---------------------------------------------------------------------------
# Internal formatters
# ---------------------------------------------------------------------------


def _append_config(lines: list[str], result: ParseSuccess) -> None:
    config = result.config
    lines.append("")
    lines.append("--- Configuration ---")
    lines.append(f"  Mode: {config.mode or DEFAULT_MODE}")

    for key, value in config.model_dump(by_alias=True, exclude_none=True).items():
        if key in ("mode", "authors"):
            continue
        lines.append(f"  {key}: {value}")

    for name, info in (config.authors or {}).items():
        overrides = ", ".join(
            f"{key}={value}"
            for key, value in info.model_dump(by_alias=True, exclude_none=True).items()
        )
        lines.append(f"  Author {name!r}: {overrides or 'no overrides'}")


def _append_authors(lines: list[str], result: ParseSuccess) -> None:
    order = author_order_map(result.entries)
    named = [f"{author} ({idx})" for author, idx in order.items() if author]

    lines.append("")
    lines.append("--- Authors ---")
    lines.append(f"  {', '.join(named) if named else 'none'}")


def _append_entries(lines: list[str], result: ParseSuccess) -> None:
    lines.append("")
    lines.append(f"--- Entries ({len(result.entries)}) ---")

    for idx, entry in enumerate(result.entries, start=1):
        lines.append(f"  {idx:>3}. {_describe_entry(entry)}")


def _preview(content: str) -> str:
    flat = content.replace("\n", " / ")
    if len(flat) > _PREVIEW_WIDTH:
        return flat[: _PREVIEW_WIDTH - 3] + "..."
    return flat


def _describe_entry(entry: Entry) -> str:
    if isinstance(entry, MessageEntry):
        author = entry.author or "(anonymous)"
        flags = []
        if entry.show_author is False:
            flags.append("hidden name")
        if entry.render_rich:
            flags.append("rich")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        subtext = f" | {entry.subtext}" if entry.subtext else ""
        arrow = _DIRECTION_ARROWS[entry.direction]
        return f"message {arrow} {author}{subtext}: {_preview(entry.content)}{suffix}"
    if isinstance(entry, CapsuleEntry):
        return f"capsule: {_preview(entry.content)}"
    if isinstance(entry, CommentEntry):
        return f"comment: {_preview(entry.content)}"
    if isinstance(entry, RichBlockEntry):
        return f"rich block: {_preview(entry.content)}"
    return "delimiter"
