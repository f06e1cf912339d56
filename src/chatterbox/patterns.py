"""Line grammar for Chatterbox sources.

Every pattern is built from the shared fragments below and matches a
**whole line**.  Optional captures whose marker is absent yield ``None``
(never ``""``), which the parser relies on to tell "marker missing" apart
from "marker present".

Named groups exposed by the patterns:

- ``content`` -- entry text.  For block starts it is the raw trailing
  text, which is either empty/whitespace-only or starts with whitespace.
- ``fence`` -- the repeated marker string opening a block.
- ``capsule`` -- ``"()"`` for capsules, ``None`` for comments.
- ``params`` -- ``author[|subtext]`` of a message.
- ``direction`` -- single-line direction marker (``<``, ``>`` or ``^``).
- ``pre_modifiers`` / ``modifiers`` -- ``!``/``@`` runs before and after
  the direction marker or fence.
"""

from __future__ import annotations

import re

_START = r"^"
_END = r"\Z"

_WS = r"\s"
_WS_SEQ_OPTIONAL = r"\s*"

_CONTENT = r"(?P<content>.+)"
_BLOCK_CONTENT = r"(?P<content>(?:\s.*)|(?:\s*))"

_COMMENT_SINGLE = r"#"
_COMMENT_FENCE = r"(?P<fence>###+)"
_CAPSULE_MARKER = r"(?P<capsule>\(\))?"

_MESSAGE_PARAMS = r"(?P<params>.*?)"
_MESSAGE_PRE_MODIFIERS = r"(?P<pre_modifiers>[!@]+)?"
_MESSAGE_DIR_SINGLE = r"(?P<direction>[<>^])"
_MESSAGE_DIR_FENCE = r"(?P<fence>(?:<<<+)|(?:>>>+)|(?:\^\^\^+))"
_MESSAGE_MODIFIERS = r"(?P<modifiers>[!@]+)?"

_RICH_FENCE = r"(?P<fence>@@@+)"

_DELIMITER_MARKER = r"\.\.\."

HIDE_AUTHOR_MARKER = "!"
RENDER_RICH_MARKER = "@"
CAPSULE_MARKER = "()"

# Single-line markers and the first character of a fence share one mapping.
DIRECTION_MARKERS = ("<", ">", "^")

COMMENT_OR_CAPSULE_RE = re.compile(
    _START + _COMMENT_SINGLE + _CAPSULE_MARKER + _WS + _CONTENT + _END
)

COMMENT_OR_CAPSULE_BLOCK_RE = re.compile(
    _START + _COMMENT_FENCE + _CAPSULE_MARKER + _BLOCK_CONTENT + _END
)

RICH_BLOCK_RE = re.compile(_START + _RICH_FENCE + _BLOCK_CONTENT + _END)

DELIMITER_RE = re.compile(
    _START + _WS_SEQ_OPTIONAL + _DELIMITER_MARKER + _WS_SEQ_OPTIONAL + _END
)

MESSAGE_RE = re.compile(
    _START
    + _MESSAGE_PARAMS
    + _MESSAGE_PRE_MODIFIERS
    + _WS_SEQ_OPTIONAL
    + _MESSAGE_DIR_SINGLE
    + _MESSAGE_MODIFIERS
    + _WS
    + _CONTENT
    + _END
)

MESSAGE_BLOCK_RE = re.compile(
    _START
    + _MESSAGE_PARAMS
    + _MESSAGE_PRE_MODIFIERS
    + _WS_SEQ_OPTIONAL
    + _MESSAGE_DIR_FENCE
    + _MESSAGE_MODIFIERS
    + _BLOCK_CONTENT
    + _END
)

# ---------------------------------------------------------------------------
# CSS lengths
# ---------------------------------------------------------------------------

# Longest units first so alternation never stops at a shorter prefix.
CSS_LENGTH_UNITS: tuple[str, ...] = (
    "rcap",
    "cap", "rch", "rem", "rex", "ric", "rlh",
    "ch", "cm", "em", "ex", "ic", "in", "lh", "mm", "pc", "pt", "px",
    "Q", "%",
)

_CSS_LENGTH_NUMBER = r"(?:\d*\.?\d+)"
_CSS_LENGTH_UNIT = "(?:" + "|".join(re.escape(unit) for unit in CSS_LENGTH_UNITS) + ")"

CSS_LENGTH_RE = re.compile(
    _START + r"(?:" + _CSS_LENGTH_NUMBER + _CSS_LENGTH_UNIT + r"|0)" + _END
)
