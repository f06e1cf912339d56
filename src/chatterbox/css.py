"""CSS class and custom property names used by the renderer."""

from __future__ import annotations


class CssClasses:
    """Class names applied to rendered elements."""

    ROOT = "chatterbox"
    CONTENT = "chatterbox-content"

    MODE_BASE = "mode-base"
    MODE_BUBBLE = "mode-bubble"
    MODE_SIMPLE = "mode-simple"

    ENTRY_CONTAINER = "entry-container"

    CAPSULE_CONTAINER = "capsule-container"
    CAPSULE = "capsule"

    COMMENT_CONTAINER = "comment-container"
    COMMENT = "comment"

    DELIMITER_CONTAINER = "delimiter-container"
    DELIMITER = "delimiter"
    DELIMITER_DOT = "dot"

    RICH_BLOCK_CONTAINER = "markdown-container"
    RICH_BLOCK = "markdown"

    MESSAGE_CONTAINER = "message-container"
    MESSAGE = "message"
    MESSAGE_LEFT = "message-left"
    MESSAGE_RIGHT = "message-right"
    MESSAGE_CENTER = "message-center"
    MESSAGE_HEADER = "message-header"
    MESSAGE_BODY = "message-body"
    MESSAGE_FOOTER = "message-footer"
    MESSAGE_AUTHOR = "message-author"
    MESSAGE_CONTENT = "message-content"
    MESSAGE_SUBTEXT = "message-subtext"

    ERROR_CONTAINER = "error-container"
    ERROR_TITLE = "error-title"
    ERROR_ITEMS = "error-items"

    FIX_MARKDOWN_EMBED = "fix-markdown-embed"
    FIX_MARKDOWN_FIRST = "cbx-md-fix-first"
    FIX_MARKDOWN_LAST = "cbx-md-fix-last"


class CssProps:
    """Custom properties set through ``style`` attributes."""

    CAPSULE_MAX_WIDTH = "--capsule-max-width"
    COMMENT_MAX_WIDTH = "--comment-max-width"
    MESSAGE_MIN_WIDTH = "--message-min-width"
    MESSAGE_MAX_WIDTH = "--message-max-width"

    MESSAGE_BACKGROUND_COLOR = "--message-bg-color"
    MESSAGE_AUTHOR_COLOR = "--message-author-color"
    MESSAGE_CONTENT_COLOR = "--message-content-color"
    MESSAGE_SUBTEXT_COLOR = "--message-subtext-color"
