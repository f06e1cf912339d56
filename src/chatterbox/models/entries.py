"""Entry data models produced by the Chatterbox parser.

Each entry is a small frozen dataclass.  The :data:`Entry` union is the
element type of :attr:`~chatterbox.parser.ParseSuccess.entries`; use the
``kind`` class attribute (or ``isinstance``) to discriminate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class EntryKind(str, Enum):
    """Discriminator for the entry variants."""

    CAPSULE = "capsule"
    COMMENT = "comment"
    DELIMITER = "delimiter"
    RICH_BLOCK = "rich_block"
    MESSAGE = "message"


class MessageDirection(str, Enum):
    """Layout direction of a message entry."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


@dataclass(frozen=True)
class CapsuleEntry:
    """A small inline annotation."""

    kind: ClassVar[EntryKind] = EntryKind.CAPSULE

    content: str


@dataclass(frozen=True)
class CommentEntry:
    """An author-less side note."""

    kind: ClassVar[EntryKind] = EntryKind.COMMENT

    content: str


@dataclass(frozen=True)
class DelimiterEntry:
    """A visual separator."""

    kind: ClassVar[EntryKind] = EntryKind.DELIMITER


@dataclass(frozen=True)
class RichBlockEntry:
    """A block of content handed to the rich-text renderer as-is."""

    kind: ClassVar[EntryKind] = EntryKind.RICH_BLOCK

    content: str


@dataclass(frozen=True)
class MessageEntry:
    """A single utterance attributed to an author.

    Attributes:
        author: Author name, HTML-entity decoded.  ``""`` for anonymous
            messages.
        content: Message text.  Multi-line block content is joined with
            ``\\n``.
        direction: Layout direction.
        subtext: Caption shown under the message, or ``None``.
        show_author: ``False`` when the ``!`` modifier was given.
        render_rich: ``True`` when the ``@`` modifier was given.
    """

    kind: ClassVar[EntryKind] = EntryKind.MESSAGE

    author: str
    content: str
    direction: MessageDirection = MessageDirection.LEFT
    subtext: str | None = None
    show_author: bool | None = None
    render_rich: bool = False


Entry = Union[CapsuleEntry, CommentEntry, DelimiterEntry, RichBlockEntry, MessageEntry]
