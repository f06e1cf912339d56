"""Visual tree rendering for parsed Chatterbox blocks.

Rendering builds an :mod:`lxml` element tree under a caller supplied root
element.  There is a single renderer; modes only differ by a
:class:`ModeStrategy` record (root CSS classes and how a message's parts
are laid out), selected by the configuration's ``mode``.

Rich content (rich-text blocks and messages with the ``@`` modifier) is
handed to a caller supplied awaitable capability, so :func:`render_chatterbox`
is a coroutine.  The default capability inserts the content as plain text.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import NamedTuple

from lxml import etree

from chatterbox.authors import author_order_map, auto_author_colors
from chatterbox.css import CssClasses, CssProps
from chatterbox.models.config import (
    DEFAULT_AUTO_COLOR_AUTHORS,
    DEFAULT_MODE,
    AuthorInfo,
    ChatterboxConfig,
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
from chatterbox.parser import ParseFailure, ParseResult, ParseSuccess

logger = logging.getLogger(__name__)

RichTextRenderer = Callable[[str, etree._Element, str], Awaitable[None]]

ERROR_TITLE = "Chatterbox error"

# Anything outside the XML 1.0 Char production; lxml refuses such strings.
_XML_INVALID_RE = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


async def render_as_plain_text(content: str, target: etree._Element, source_path: str) -> None:
    """Fallback rich-text capability: show *content* verbatim."""
    target.text = xml_text(content)


# ---------------------------------------------------------------------------
# Element helpers
# ---------------------------------------------------------------------------


def xml_text(value: str) -> str:
    """Drop characters that cannot appear in an XML document."""
    return _XML_INVALID_RE.sub("", value)


def _add_class(element: etree._Element, *classes: str) -> None:
    existing = element.get("class", "").split()
    merged = list(existing)
    for cls in classes:
        cls = xml_text(cls)
        if cls and cls not in merged:
            merged.append(cls)
    element.set("class", " ".join(merged))


def _div(parent: etree._Element, *classes: str) -> etree._Element:
    element = etree.SubElement(parent, "div")
    if classes:
        _add_class(element, *classes)
    return element


def _set_style(element: etree._Element, props: dict[str, str | None]) -> None:
    """Append the non-``None`` custom properties to *element*'s style."""
    declarations = [f"{name}: {value}" for name, value in props.items() if value is not None]
    if not declarations:
        return

    existing = element.get("style")
    style = "; ".join(declarations)
    element.set("style", f"{existing}; {style}" if existing else style)


def apply_markdown_fixes(element: etree._Element) -> None:
    """Tag the first and last rendered child elements for styling fixes."""
    children = [child for child in element if isinstance(child.tag, str)]
    if not children:
        return

    _add_class(children[0], CssClasses.FIX_MARKDOWN_FIRST)
    _add_class(children[-1], CssClasses.FIX_MARKDOWN_LAST)


# ---------------------------------------------------------------------------
# Mode strategies
# ---------------------------------------------------------------------------


class MessageParts(NamedTuple):
    """Pieces of a message the layout builder arranges."""

    author_name: str | None
    subtext: str | None


def _build_stacked_message(message_el: etree._Element, parts: MessageParts) -> etree._Element:
    """Header, body and footer stacked vertically.  Returns the content slot."""
    if parts.author_name is not None:
        header_el = _div(message_el, CssClasses.MESSAGE_HEADER)
        _div(header_el, CssClasses.MESSAGE_AUTHOR).text = xml_text(parts.author_name)

    body_el = _div(message_el, CssClasses.MESSAGE_BODY)
    content_el = _div(body_el, CssClasses.MESSAGE_CONTENT)

    if parts.subtext is not None:
        footer_el = _div(message_el, CssClasses.MESSAGE_FOOTER)
        _div(footer_el, CssClasses.MESSAGE_SUBTEXT).text = xml_text(parts.subtext)

    return content_el


def _build_inline_message(message_el: etree._Element, parts: MessageParts) -> etree._Element:
    """Author name inline before the content.  Returns the content slot."""
    body_el = _div(message_el, CssClasses.MESSAGE_BODY)

    if parts.author_name is not None:
        author_el = etree.SubElement(body_el, "span")
        _add_class(author_el, CssClasses.MESSAGE_AUTHOR)
        author_el.text = xml_text(parts.author_name)

    content_el = _div(body_el, CssClasses.MESSAGE_CONTENT)

    if parts.subtext is not None:
        _div(message_el, CssClasses.MESSAGE_SUBTEXT).text = xml_text(parts.subtext)

    return content_el


class ModeStrategy(NamedTuple):
    """Mode-specific rendering capabilities."""

    css_classes: tuple[str, ...]
    build_message: Callable[[etree._Element, MessageParts], etree._Element]


MODE_STRATEGIES: dict[str, ModeStrategy] = {
    "base": ModeStrategy((CssClasses.MODE_BASE,), _build_stacked_message),
    "bubble": ModeStrategy((CssClasses.MODE_BUBBLE,), _build_stacked_message),
    "simple": ModeStrategy((CssClasses.MODE_SIMPLE,), _build_inline_message),
}


def strategy_for(config: ChatterboxConfig) -> ModeStrategy:
    """Select the strategy for *config*'s mode, defaulting to ``bubble``."""
    return MODE_STRATEGIES.get(config.mode or DEFAULT_MODE, MODE_STRATEGIES[DEFAULT_MODE])


# ---------------------------------------------------------------------------
# Entry rendering
# ---------------------------------------------------------------------------

_DIRECTION_CLASSES: dict[MessageDirection, str] = {
    MessageDirection.LEFT: CssClasses.MESSAGE_LEFT,
    MessageDirection.RIGHT: CssClasses.MESSAGE_RIGHT,
    MessageDirection.CENTER: CssClasses.MESSAGE_CENTER,
}

_CONTAINER_CLASSES: dict[EntryKind, str] = {
    EntryKind.CAPSULE: CssClasses.CAPSULE_CONTAINER,
    EntryKind.COMMENT: CssClasses.COMMENT_CONTAINER,
    EntryKind.DELIMITER: CssClasses.DELIMITER_CONTAINER,
    EntryKind.RICH_BLOCK: CssClasses.RICH_BLOCK_CONTAINER,
    EntryKind.MESSAGE: CssClasses.MESSAGE_CONTAINER,
}


@dataclass(frozen=True)
class _RenderContext:
    config: ChatterboxConfig
    strategy: ModeStrategy
    author_order: dict[str, str]
    auto_colors: dict[str, str]
    rich_text_renderer: RichTextRenderer
    source_path: str
    markdown_fixes: bool

    def author_info(self, author: str) -> AuthorInfo:
        return (self.config.authors or {}).get(author) or AuthorInfo()


async def _render_capsule(ctx: _RenderContext, entry: CapsuleEntry, container: etree._Element) -> None:
    _div(container, CssClasses.CAPSULE).text = xml_text(html.unescape(entry.content))


async def _render_comment(ctx: _RenderContext, entry: CommentEntry, container: etree._Element) -> None:
    _div(container, CssClasses.COMMENT).text = xml_text(html.unescape(entry.content))


async def _render_delimiter(
    ctx: _RenderContext, entry: DelimiterEntry, container: etree._Element
) -> None:
    delimiter_el = _div(container, CssClasses.DELIMITER)
    for _ in range(3):
        _div(delimiter_el, CssClasses.DELIMITER_DOT)


async def _render_rich_block(
    ctx: _RenderContext, entry: RichBlockEntry, container: etree._Element
) -> None:
    rich_el = _div(container, CssClasses.RICH_BLOCK)
    await ctx.rich_text_renderer(entry.content, rich_el, ctx.source_path)


async def _render_message(ctx: _RenderContext, entry: MessageEntry, container: etree._Element) -> None:
    info = ctx.author_info(entry.author)
    full_name = info.full_name if info.full_name is not None else entry.author

    container.set("data-cbx-author", xml_text(entry.author))
    container.set("data-cbx-author-full", xml_text(full_name))
    container.set("data-cbx-author-order", ctx.author_order.get(entry.author, ""))
    _add_class(container, _DIRECTION_CLASSES[entry.direction])

    show_name = entry.show_author is not False and full_name.strip() != ""
    show_subtext = entry.subtext is not None and entry.subtext.strip() != ""

    message_el = _div(container, CssClasses.MESSAGE)
    _set_style(
        message_el,
        {
            CssProps.MESSAGE_BACKGROUND_COLOR: info.background_color,
            CssProps.MESSAGE_AUTHOR_COLOR: (
                (info.author_color or ctx.auto_colors.get(entry.author)) if show_name else None
            ),
            CssProps.MESSAGE_CONTENT_COLOR: info.text_color,
            CssProps.MESSAGE_SUBTEXT_COLOR: info.subtext_color if show_subtext else None,
        },
    )

    parts = MessageParts(
        author_name=full_name if show_name else None,
        subtext=entry.subtext if show_subtext else None,
    )
    content_el = ctx.strategy.build_message(message_el, parts)

    if entry.render_rich:
        await ctx.rich_text_renderer(entry.content, content_el, ctx.source_path)
        if ctx.markdown_fixes:
            apply_markdown_fixes(content_el)
    else:
        content_el.text = xml_text(html.unescape(entry.content))


_ENTRY_RENDERERS = {
    EntryKind.CAPSULE: _render_capsule,
    EntryKind.COMMENT: _render_comment,
    EntryKind.DELIMITER: _render_delimiter,
    EntryKind.RICH_BLOCK: _render_rich_block,
    EntryKind.MESSAGE: _render_message,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def render_chatterbox(
    data: ParseSuccess,
    root: etree._Element,
    *,
    rich_text_renderer: RichTextRenderer = render_as_plain_text,
    source_path: str = "",
    markdown_fixes: bool = True,
) -> None:
    """Render parsed entries under *root*.

    Args:
        data: Successful parse result (configuration already merged with
            any defaults).
        root: Element that receives the ``chatterbox`` classes and the
            rendered entries.
        rich_text_renderer: Awaitable capability rendering rich content
            into a target element.  Its exceptions propagate.
        source_path: Passed through to *rich_text_renderer*.
        markdown_fixes: Tag first/last children of rich message content.
    """
    config = data.config
    strategy = strategy_for(config)
    entries: list[Entry] = data.entries

    _add_class(root, CssClasses.ROOT, *strategy.css_classes)
    if markdown_fixes:
        _add_class(root, CssClasses.FIX_MARKDOWN_EMBED)
    _add_class(root, *config.class_list)

    if config.chatterbox_id is not None:
        root.set("data-chatterbox-id", xml_text(config.chatterbox_id))

    _set_style(
        root,
        {
            CssProps.CAPSULE_MAX_WIDTH: config.max_capsule_width,
            CssProps.COMMENT_MAX_WIDTH: config.max_comment_width,
            CssProps.MESSAGE_MIN_WIDTH: config.min_message_width,
            CssProps.MESSAGE_MAX_WIDTH: config.max_message_width,
        },
    )

    auto_color = (
        config.auto_color_authors
        if config.auto_color_authors is not None
        else DEFAULT_AUTO_COLOR_AUTHORS
    )
    ctx = _RenderContext(
        config=config,
        strategy=strategy,
        author_order=author_order_map(entries),
        auto_colors=auto_author_colors(entries, config) if auto_color else {},
        rich_text_renderer=rich_text_renderer,
        source_path=source_path,
        markdown_fixes=markdown_fixes,
    )

    content_el = _div(root, CssClasses.CONTENT)
    for entry in entries:
        container = _div(content_el, CssClasses.ENTRY_CONTAINER, _CONTAINER_CLASSES[entry.kind])
        await _ENTRY_RENDERERS[entry.kind](ctx, entry, container)

    logger.debug("Rendered %d entries in %s mode", len(entries), config.mode or DEFAULT_MODE)


def render_errors(error_list: list[str], into: etree._Element) -> None:
    """Render a titled list of error messages under *into*."""
    root_el = _div(into, CssClasses.ROOT)
    container_el = _div(root_el, CssClasses.ERROR_CONTAINER)
    _div(container_el, CssClasses.ERROR_TITLE).text = ERROR_TITLE

    items_el = etree.SubElement(container_el, "ul")
    _add_class(items_el, CssClasses.ERROR_ITEMS)
    for error in error_list:
        etree.SubElement(items_el, "li").text = xml_text(error)


async def render_result(
    result: ParseResult,
    *,
    rich_text_renderer: RichTextRenderer = render_as_plain_text,
    source_path: str = "",
    markdown_fixes: bool = True,
) -> etree._Element:
    """Render a parse result (entries or errors) into a fresh ``<div>``.

    The keyword arguments are passed to :func:`render_chatterbox` and are
    ignored for a :class:`~chatterbox.parser.ParseFailure`.
    """
    root = etree.Element("div")

    if isinstance(result, ParseFailure):
        render_errors(result.error_list, root)
    else:
        await render_chatterbox(
            result,
            root,
            rich_text_renderer=rich_text_renderer,
            source_path=source_path,
            markdown_fixes=markdown_fixes,
        )

    return root


def to_html(element: etree._Element) -> str:
    """Serialise a rendered tree as indented HTML."""
    return etree.tostring(element, method="html", encoding="unicode", pretty_print=True)
