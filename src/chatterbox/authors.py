"""Author bookkeeping shared by the renderers.

Both maps are derived from the message entries in source order.  The
anonymous author (``""``) always has order ``"0"`` and never gets an
automatic colour.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from chatterbox.models.config import ChatterboxConfig
from chatterbox.models.entries import Entry, MessageEntry

ANONYMOUS_AUTHOR = ""
ANONYMOUS_AUTHOR_ORDER = "0"

# Number of ``--auto-color-N`` custom properties defined by the stylesheet.
NUM_AUTO_COLORS = 8


def _named_authors(entries: Iterable[Entry]) -> Iterator[str]:
    for entry in entries:
        if isinstance(entry, MessageEntry) and entry.author != ANONYMOUS_AUTHOR:
            yield entry.author


def author_order_map(entries: Iterable[Entry]) -> dict[str, str]:
    """Assign each distinct author a first-seen order label.

    Returns:
        Mapping of author name to a stringified index: ``"0"`` for the
        anonymous author, ``"1"``, ``"2"``... for the others.
    """
    order = {ANONYMOUS_AUTHOR: ANONYMOUS_AUTHOR_ORDER}

    for author in _named_authors(entries):
        if author not in order:
            order[author] = str(len(order))

    return order


def auto_author_colors(entries: Iterable[Entry], config: ChatterboxConfig) -> dict[str, str]:
    """Assign cycling automatic colours to authors without a configured one.

    Authors that have an ``authorColor`` in *config* are skipped and do not
    consume a colour slot.

    Returns:
        Mapping of author name to a ``var(--auto-color-N)`` expression.
    """
    authors = config.authors or {}
    colors: dict[str, str] = {}

    for author in _named_authors(entries):
        info = authors.get(author)
        if author in colors or (info is not None and info.author_color is not None):
            continue
        color_num = (len(colors) % NUM_AUTO_COLORS) + 1
        colors[author] = f"var(--auto-color-{color_num})"

    return colors
