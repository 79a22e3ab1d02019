"""Preview image lookup for Newswire posts."""

from __future__ import annotations

import re
from typing import Any, Optional

from . import MEDIA_URL

__all__ = ["ensure_absolute", "find_preview_image"]

FLAT_IMAGE_FIELDS = ("img", "image", "hero_image")
PREFERRED_RATIO = "d16x9"

_IMG_SRC_RE = re.compile(r'<img[^>]+src="([^">]+)"', re.I)


def ensure_absolute(url: Any) -> Optional[str]:
    """Return ``url`` as an absolute https URL, or ``None`` when empty."""

    if not url or not isinstance(url, str):
        return None
    url = url.strip()
    if not url:
        return None
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("/"):
        return MEDIA_URL + url
    return url


def _from_block(block: dict) -> Optional[str]:
    preferred = ensure_absolute(block.get(PREFERRED_RATIO))
    if preferred:
        return preferred
    for value in block.values():
        candidate = ensure_absolute(value)
        if candidate:
            return candidate
    return None


def find_preview_image(post: Any) -> Optional[str]:
    """Pick the best preview image for ``post``.

    Order: the widescreen ``newswire_block`` rendition, any other rendition
    of that block, the flat image fields, then the first ``<img>`` in the
    preview HTML.
    """

    if not isinstance(post, dict):
        return None
    parsed = post.get("preview_images_parsed")
    if isinstance(parsed, dict):
        block = parsed.get("newswire_block")
        if isinstance(block, dict):
            found = _from_block(block)
            if found:
                return found
    for field in FLAT_IMAGE_FIELDS:
        found = ensure_absolute(post.get(field))
        if found:
            return found
    preview = post.get("preview")
    if isinstance(preview, str):
        match = _IMG_SRC_RE.search(preview)
        if match:
            return ensure_absolute(match.group(1))
    return None
