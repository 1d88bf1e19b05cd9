"""Reply text normalization."""

from __future__ import annotations

import re

ESCAPED_NEWLINE = "\\n"
_CARRIAGE_RETURN_RE = re.compile(r"\r\n?")
_INLINE_WHITESPACE_RUN_RE = re.compile(r"[^\S\n]{2,}")
_LINE_EDGE_WHITESPACE_RE = re.compile(r"[^\S\n]*\n[^\S\n]*")
_BLANK_LINES_RE = re.compile(r"\n{2,}")


def format_reply(raw: str | None) -> str:
    """Canonicalize whitespace and newlines of a raw model reply.

    Literal backslash-n sequences become real newlines, runs of blank lines
    shrink to a single blank line, runs of other whitespace shrink to one
    space and the result is trimmed. Applying it twice changes nothing.
    """
    if not raw:
        return ""
    text = raw.replace(ESCAPED_NEWLINE, "\n")
    text = _CARRIAGE_RETURN_RE.sub("\n", text)
    text = _INLINE_WHITESPACE_RUN_RE.sub(" ", text)
    text = _LINE_EDGE_WHITESPACE_RE.sub("\n", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()
