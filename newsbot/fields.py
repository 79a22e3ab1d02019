"""Render bulleted, length-bounded text blocks for webhook embed fields."""

from __future__ import annotations

from typing import Iterable, Sequence

from jinja2 import Environment

from . import SITE_URL

__all__ = [
    "FIELD_MAX_LENGTH",
    "TRUNCATION_MARKER",
    "build_extras_field",
    "build_field_value",
    "build_inline_headlines",
]

FIELD_MAX_LENGTH = 1024
TRUNCATION_MARKER = "\n…"
INLINE_MAX_HEADLINES = 6
INLINE_MAX_CHARS = 800
INLINE_HEADING = "Headlines inside the article:"

_ENV = Environment(autoescape=False)
_EXTRA_LINE = _ENV.from_string("{{ title }} — <{{ link }}>")
_INLINE_BLOCK = _ENV.from_string("\n\n{{ heading }}\n{{ body }}")


def _bulleted(lines: Iterable[str], bullet: str) -> str:
    return "\n".join(f"{bullet} {line}" for line in lines)


def truncate_lines(text: str, max_len: int) -> str:
    """Cut ``text`` to fit ``max_len`` including the truncation marker.

    Whole lines are kept where possible; a partially cut trailing line is
    dropped before the marker is appended.
    """

    if len(text) <= max_len:
        return text
    cut = text[: max(max_len - len(TRUNCATION_MARKER), 0)]
    last_newline = cut.rfind("\n")
    if last_newline > 0:
        cut = cut[:last_newline]
    return cut + TRUNCATION_MARKER


def build_field_value(lines: Sequence[str] | None, max_len: int = FIELD_MAX_LENGTH) -> str | None:
    """Return ``lines`` as a ``- `` bulleted block, or ``None`` when empty."""

    if not lines:
        return None
    return truncate_lines(_bulleted(lines, "-"), max_len)


def _extra_line(item: dict) -> str:
    title = str(item.get("title") or "No title").replace("\n", " ").strip()
    link = SITE_URL + str(item.get("url") or "")
    return _EXTRA_LINE.render(title=title, link=link)


def build_extras_field(results: Sequence, max_count: int, *, skip: int = 1) -> str | None:
    """Summarize the feed items following the current one.

    The first ``skip`` results are the article being announced; the next
    ``max_count`` become ``title — <link>`` lines.
    """

    if max_count <= 0:
        return None
    extras = [item for item in list(results)[skip : skip + max_count] if isinstance(item, dict)]
    if not extras:
        return None
    return build_field_value([_extra_line(item) for item in extras], FIELD_MAX_LENGTH)


def build_inline_headlines(
    headlines: Sequence[str],
    *,
    limit: int = INLINE_MAX_HEADLINES,
    max_chars: int = INLINE_MAX_CHARS,
) -> str:
    """Return a short headline list suitable for appending to a description."""

    if not headlines:
        return ""
    short = _bulleted(list(headlines)[:limit], "•")
    if len(short) > max_chars:
        short = short[:max_chars] + TRUNCATION_MARKER
    return _INLINE_BLOCK.render(heading=INLINE_HEADING, body=short)
