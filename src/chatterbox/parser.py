"""Chatterbox source parser.

Turns the text of one Chatterbox block (optionally headed by a ``---``
YAML configuration section) into a validated configuration and an ordered
list of :mod:`~chatterbox.models.entries` entries.

The scanner is a two-state machine (:class:`ParserState`).  Its state is an
immutable :class:`ScanState` value threaded through the pure :func:`step`
function, one line at a time; :func:`finish` flushes a block left open at
the end of the source.  Lines that match no pattern are dropped.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable, Union

from chatterbox.frontmatter import ConfigFailure, parse_yaml_config, split_frontmatter
from chatterbox.models.config import ChatterboxConfig, merge_configs
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
from chatterbox.patterns import (
    CAPSULE_MARKER,
    COMMENT_OR_CAPSULE_BLOCK_RE,
    COMMENT_OR_CAPSULE_RE,
    DELIMITER_RE,
    HIDE_AUTHOR_MARKER,
    MESSAGE_BLOCK_RE,
    MESSAGE_RE,
    RENDER_RICH_MARKER,
    RICH_BLOCK_RE,
)

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r?\n")

_DIRECTIONS: dict[str, MessageDirection] = {
    "<": MessageDirection.LEFT,
    ">": MessageDirection.RIGHT,
    "^": MessageDirection.CENTER,
}


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParseSuccess:
    """Parsed contents of a Chatterbox block.

    Attributes:
        config: Validated configuration (merged over any defaults).
        entries: Entries in source order.
    """

    config: ChatterboxConfig
    entries: list[Entry] = field(default_factory=list)
    is_error: bool = field(default=False, init=False)


@dataclass(frozen=True)
class ParseFailure:
    """Returned when the block's header could not be used.

    Attributes:
        error_list: Human-readable error messages.
    """

    error_list: list[str]
    is_error: bool = field(default=True, init=False)


ParseResult = Union[ParseSuccess, ParseFailure]


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class ParserState(Enum):
    """``SINGLE`` scans single-line entries; ``BLOCK`` collects block lines."""

    SINGLE = "single"
    BLOCK = "block"


@dataclass(frozen=True)
class PendingBlock:
    """A multi-line entry whose closing fence has not been seen yet."""

    kind: EntryKind
    fence: str
    lines: tuple[str, ...] = ()
    author: str = ""
    subtext: str | None = None
    direction: MessageDirection = MessageDirection.LEFT
    show_author: bool | None = None
    render_rich: bool = False

    def to_entry(self) -> Entry:
        content = "\n".join(self.lines)

        if self.kind is EntryKind.MESSAGE:
            return MessageEntry(
                author=self.author,
                content=content,
                direction=self.direction,
                subtext=self.subtext,
                show_author=self.show_author,
                render_rich=self.render_rich,
            )
        if self.kind is EntryKind.CAPSULE:
            return CapsuleEntry(content=content)
        if self.kind is EntryKind.COMMENT:
            return CommentEntry(content=content)
        return RichBlockEntry(content=content)


@dataclass(frozen=True)
class ScanState:
    """Scanner state between two lines."""

    state: ParserState = ParserState.SINGLE
    block: PendingBlock | None = None


INITIAL_STATE = ScanState()


def parse_message_params(params: str) -> tuple[str, str | None]:
    """Split ``author[|subtext]`` message parameters.

    Only the first ``|`` separates the two parts.  Both parts are trimmed
    and HTML-entity decoded; an empty subtext becomes ``None``.
    """
    author, _, subtext = params.partition("|")
    subtext = subtext.strip()

    return html.unescape(author.strip()), html.unescape(subtext) if subtext else None


def _modifier_flags(match: re.Match[str]) -> tuple[bool, bool]:
    """Return ``(show_author, render_rich)`` for a message match."""
    modifiers = (match.group("pre_modifiers") or "") + (match.group("modifiers") or "")
    return HIDE_AUTHOR_MARKER not in modifiers, RENDER_RICH_MARKER in modifiers


def _seed_lines(content: str) -> tuple[str, ...]:
    """Trailing text on a block's opening line becomes its first line."""
    content = content.lstrip()
    return (content,) if content else ()


def _match_message_block(line: str) -> PendingBlock | None:
    match = MESSAGE_BLOCK_RE.match(line)
    if match is None:
        return None

    author, subtext = parse_message_params(match.group("params"))
    show_author, render_rich = _modifier_flags(match)
    fence = match.group("fence")

    return PendingBlock(
        kind=EntryKind.MESSAGE,
        fence=fence,
        lines=_seed_lines(match.group("content")),
        author=author,
        subtext=subtext,
        direction=_DIRECTIONS.get(fence[0], MessageDirection.LEFT),
        show_author=show_author,
        render_rich=render_rich,
    )


def _match_comment_or_capsule_block(line: str) -> PendingBlock | None:
    match = COMMENT_OR_CAPSULE_BLOCK_RE.match(line)
    if match is None:
        return None

    is_capsule = match.group("capsule") == CAPSULE_MARKER
    return PendingBlock(
        kind=EntryKind.CAPSULE if is_capsule else EntryKind.COMMENT,
        fence=match.group("fence"),
        lines=_seed_lines(match.group("content")),
    )


def _match_rich_block(line: str) -> PendingBlock | None:
    match = RICH_BLOCK_RE.match(line)
    if match is None:
        return None

    return PendingBlock(
        kind=EntryKind.RICH_BLOCK,
        fence=match.group("fence"),
        lines=_seed_lines(match.group("content")),
    )


def _match_delimiter(line: str) -> DelimiterEntry | None:
    return DelimiterEntry() if DELIMITER_RE.match(line) else None


def _match_comment_or_capsule(line: str) -> CapsuleEntry | CommentEntry | None:
    match = COMMENT_OR_CAPSULE_RE.match(line)
    if match is None:
        return None

    if match.group("capsule") == CAPSULE_MARKER:
        return CapsuleEntry(content=match.group("content"))
    return CommentEntry(content=match.group("content"))


def _match_message(line: str) -> MessageEntry | None:
    match = MESSAGE_RE.match(line)
    if match is None:
        return None

    author, subtext = parse_message_params(match.group("params"))
    show_author, render_rich = _modifier_flags(match)

    return MessageEntry(
        author=author,
        content=match.group("content"),
        direction=_DIRECTIONS.get(match.group("direction"), MessageDirection.LEFT),
        subtext=subtext,
        show_author=show_author,
        render_rich=render_rich,
    )


# Priority order matters: several patterns overlap on pathological lines.
_LINE_CLASSIFIERS: tuple[Callable[[str], Entry | PendingBlock | None], ...] = (
    _match_message_block,
    _match_comment_or_capsule_block,
    _match_rich_block,
    _match_delimiter,
    _match_comment_or_capsule,
    _match_message,
)


def classify_line(line: str) -> Entry | PendingBlock | None:
    """Classify a line scanned in the ``SINGLE`` state.

    Returns:
        A finished entry, a :class:`PendingBlock` for a block start, or
        ``None`` when no pattern matches.
    """
    for classifier in _LINE_CLASSIFIERS:
        result = classifier(line)
        if result is not None:
            return result
    return None


def step(state: ScanState, line: str) -> tuple[ScanState, Entry | None]:
    """Advance the scanner by one line.

    Args:
        state: Current scanner state.
        line: Next source line, without its line ending.

    Returns:
        ``(next_state, entry)`` where *entry* is the entry completed by
        this line, if any.
    """
    block = state.block

    if state.state is ParserState.BLOCK and block is not None:
        if line != block.fence:
            return replace(state, block=replace(block, lines=block.lines + (line,))), None

        logger.debug("Closing %s block on fence %r", block.kind.value, block.fence)
        return INITIAL_STATE, block.to_entry()

    result = classify_line(line)

    if isinstance(result, PendingBlock):
        logger.debug("Opening %s block with fence %r", result.kind.value, result.fence)
        return ScanState(state=ParserState.BLOCK, block=result), None

    if result is None:
        logger.debug("Discarding unrecognised line: %r", line)

    return state, result


def finish(state: ScanState) -> Entry | None:
    """Close a block left open at the end of the source, if any."""
    if state.state is ParserState.BLOCK and state.block is not None:
        logger.debug("Implicitly closing unterminated %s block", state.block.kind.value)
        return state.block.to_entry()
    return None


def scan_entries(lines: Iterable[str]) -> Iterator[Entry]:
    """Yield the entries described by *lines*, in order."""
    state = INITIAL_STATE

    for line in lines:
        state, entry = step(state, line)
        if entry is not None:
            yield entry

    tail = finish(state)
    if tail is not None:
        yield tail


def split_lines(source: str) -> list[str]:
    """Split *source* on ``\\n`` line endings, tolerating ``\\r\\n``."""
    return _LINE_BREAK_RE.split(source)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_chatterbox(
    source: str,
    defaults: ChatterboxConfig | None = None,
) -> ParseResult:
    """Parse the text of one Chatterbox block.

    Args:
        source: Raw block text, optionally starting with a ``---``
            delimited YAML header.
        defaults: Plugin-wide default configuration.  Fields set in the
            block's header take precedence over it.

    Returns:
        :class:`ParseSuccess` with the configuration and entries, or
        :class:`ParseFailure` when the header is not valid YAML or not a
        mapping.  No entries are produced in the failure case.
    """
    lines = split_lines(source)

    header, body_start = split_frontmatter(lines)
    config = ChatterboxConfig()

    if header is not None:
        header_result = parse_yaml_config(header, label="Frontmatter")
        if isinstance(header_result, ConfigFailure):
            return ParseFailure(error_list=list(header_result.error_list))
        config = header_result.config

    if defaults is not None:
        config = merge_configs(defaults, config)

    entries = list(scan_entries(lines[body_start:]))
    logger.debug("Parsed %d entries from %d lines", len(entries), len(lines))

    return ParseSuccess(config=config, entries=entries)


def parse_chatterbox_file(
    file_path: str | Path,
    defaults: ChatterboxConfig | None = None,
) -> ParseResult:
    """Parse a Chatterbox source file.

    Reads the file at *file_path* as UTF-8 text and delegates to
    :func:`parse_chatterbox`.

    Raises:
        FileNotFoundError: If *file_path* does not exist.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Chatterbox file not found: {path}")

    return parse_chatterbox(path.read_text(encoding="utf-8"), defaults=defaults)
