"""Recover in-article headlines from a Newswire post.

A post carries its body as a nested ``tina.payload`` document: mappings,
lists and strings in no fixed schema.  The walk below visits every container
and offers anything that looks like a structural title (block titles, item
captions, headings inside embedded HTML) to a :class:`HeadlineSet`, which
normalizes whitespace and keeps the first occurrence of each headline.

Extraction is best-effort: malformed nodes are skipped and any unexpected
error ends the walk early with whatever was collected so far.
"""

from __future__ import annotations

import re
from typing import Any, Iterator

__all__ = [
    "HeadlineSet",
    "extract_embed_headings",
    "extract_from_html",
    "extract_from_tree",
    "extract_headlines",
    "normalize_headline",
]

DEFAULT_MAX_HEADLINES = 6

TEMPLATE_KEY = "_template"
MEMOQ_KEY = "_memoq"
HTML_TEMPLATE = "HTMLElement"

# Visited explicitly before the generic container fallback.
RECURSE_KEYS = ("content", "children", "items", "images")
SKIP_KEYS = frozenset((TEMPLATE_KEY, MEMOQ_KEY) + RECURSE_KEYS)

BOLD_MIN_CHARS = 10
BOLD_MAX_CHARS = 200

_WS_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]+>")
_HEADING_RE = re.compile(r"<h[1-4][^>]*>(.*?)</h[1-4]>", re.I)
_EMBED_HEADING_RE = re.compile(r"<h[1-6][^>]*>(.*?)</h[1-6]>", re.I)
_BOLD_RE = re.compile(r"<(?:strong|b)\b[^>]*>([^<]{%d,}?)</(?:strong|b)>" % BOLD_MIN_CHARS, re.I)


def normalize_headline(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def _strip_tags(fragment: str) -> str:
    return _TAG_RE.sub("", fragment).strip()


class HeadlineSet:
    """Insertion-ordered set of normalized headlines."""

    def __init__(self) -> None:
        self._items: dict[str, None] = {}

    def offer(self, text: Any) -> bool:
        """Add ``text`` unless it is not a string, blank, or already present."""

        if not isinstance(text, str):
            return False
        clean = normalize_headline(text)
        if not clean or clean in self._items:
            return False
        self._items[clean] = None
        return True

    def offer_all(self, texts) -> None:
        for text in texts:
            self.offer(text)

    def __contains__(self, text: object) -> bool:
        return text in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self, limit: int | None = None) -> list[str]:
        items = list(self._items)
        if limit is None:
            return items
        return items[: max(limit, 0)]


def extract_from_html(html: Any) -> list[str]:
    """Return heading texts, then bolded headline-like texts, from ``html``.

    ``<h1>``..``<h4>`` contents come first in document order, followed by
    ``<strong>``/``<b>`` contents between 10 and 199 characters long.
    """

    if not html or not isinstance(html, str):
        return []
    results: list[str] = []
    for match in _HEADING_RE.finditer(html):
        text = _strip_tags(match.group(1))
        if text:
            results.append(text)
    for match in _BOLD_RE.finditer(html):
        text = match.group(1).strip()
        if text and len(text) < BOLD_MAX_CHARS:
            results.append(text)
    return results


def extract_embed_headings(html: Any) -> list[str]:
    """Return the text of every ``<h1>``..``<h6>`` element in an embed."""

    if not html or not isinstance(html, str):
        return []
    return [_strip_tags(match.group(1)) for match in _EMBED_HEADING_RE.finditer(html)]


def _offer_items(items: list, found: HeadlineSet) -> None:
    for item in items:
        if not isinstance(item, dict):
            continue
        found.offer(item.get("caption"))
        found.offer(item.get("title"))
        found.offer_all(extract_embed_headings(item.get("embed")))


def _walk(node: Any, found: HeadlineSet) -> None:
    if isinstance(node, list):
        for child in node:
            _walk(child, found)
        return
    if not isinstance(node, dict):
        # strings and scalars are leaf data, never headlines on their own
        return

    memoq = node.get(MEMOQ_KEY)
    if not isinstance(memoq, dict):
        memoq = {}
    found.offer(memoq.get("title"))
    found.offer(memoq.get("subtitle"))
    found.offer(node.get("title"))
    found.offer(node.get("heading"))

    if node.get(TEMPLATE_KEY) == HTML_TEMPLATE:
        found.offer_all(extract_from_html(memoq.get("content")))

    items = node.get("items")
    if isinstance(items, list):
        _offer_items(items, found)

    for key in RECURSE_KEYS:
        child = node.get(key)
        if child:
            _walk(child, found)

    for key, value in node.items():
        if key in SKIP_KEYS:
            continue
        if isinstance(value, (dict, list)):
            _walk(value, found)


def _payload_of(post: dict) -> dict | None:
    tina = post.get("tina")
    if not isinstance(tina, dict):
        return None
    payload = tina.get("payload")
    return payload if isinstance(payload, dict) else None


def extract_from_tree(node: Any, max_count: int = DEFAULT_MAX_HEADLINES) -> list[str]:
    """Walk a bare content node (no post envelope) and return its headlines."""

    found = HeadlineSet()
    try:
        _walk(node, found)
    except Exception as exc:
        print(f"[WARN] Headline extraction stopped early: {exc!r}")
    return found.to_list(max_count)


def extract_headlines(post: Any, max_count: int = DEFAULT_MAX_HEADLINES) -> list[str]:
    """Return up to ``max_count`` unique headlines found in ``post``."""

    found = HeadlineSet()
    if not isinstance(post, dict):
        return []
    try:
        payload = _payload_of(post)
        if payload is not None:
            meta = payload.get("meta")
            if isinstance(meta, dict):
                found.offer(meta.get("subtitle"))
                found.offer(meta.get("title"))
            _walk(payload.get("content"), found)
    except Exception as exc:
        print(f"[WARN] Headline extraction stopped early: {exc!r}")
    try:
        found.offer_all(extract_from_html(post.get("preview")))
    except Exception as exc:
        print(f"[WARN] Preview headline extraction failed: {exc!r}")
    return found.to_list(max_count)
