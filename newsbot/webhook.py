"""Build the Discord embed payload and deliver it to a webhook."""

from __future__ import annotations

import http.client
import json
import re
import socket
import urllib.error
import urllib.request
from typing import Optional, Sequence

from . import NEWSWIRE_URL, SITE_URL
from .fields import build_field_value, build_inline_headlines

__all__ = [
    "DeliveryError",
    "build_embed",
    "build_payload",
    "is_success",
    "post_payload",
    "preview_text",
]

USERNAME = "Rockstar Newswire Tracker (Actions)"
AUTHOR_NAME = "Rockstar Newswire"
EMBED_COLOR = 16756992
DESCRIPTION_MAX_CHARS = 1200
HEADLINES_FIELD = "Headlines inside the article"
EXTRAS_FIELD = "What else is new"
DEFAULT_TIMEOUT = 30
UA = "Mozilla/5.0 (Newswire Notifier)"

_TAG_RE = re.compile(r"</?[^>]+(>|$)")


class DeliveryError(RuntimeError):
    """Raised when the webhook could not be reached at all."""


def preview_text(article: dict, max_chars: int = DESCRIPTION_MAX_CHARS) -> str:
    raw = article.get("preview") or article.get("title") or ""
    return _TAG_RE.sub("", str(raw))[:max_chars]


def build_embed(
    article: dict,
    *,
    image_url: Optional[str] = None,
    headlines: Sequence[str] = (),
    extras_value: Optional[str] = None,
    inline_headlines: bool = False,
) -> dict:
    embed = {
        "author": {"name": AUTHOR_NAME, "url": NEWSWIRE_URL},
        "title": article.get("title") or "No title",
        "url": SITE_URL + str(article.get("url") or ""),
        "description": preview_text(article),
        "color": EMBED_COLOR,
        "fields": [],
    }
    if image_url:
        embed["image"] = {"url": image_url}

    field_value = None if inline_headlines else build_field_value(list(headlines))
    if field_value:
        embed["fields"].append({"name": HEADLINES_FIELD, "value": field_value, "inline": False})
    elif headlines:
        embed["description"] = (embed["description"] or "") + build_inline_headlines(list(headlines))
    else:
        print("[DEBUG] No internal headlines found to include.")

    if extras_value:
        embed["fields"].append({"name": EXTRAS_FIELD, "value": extras_value, "inline": False})
    return embed


def build_payload(embed: dict, username: str = USERNAME) -> dict:
    return {"username": username, "embeds": [embed]}


def is_success(status: int) -> bool:
    return status < 400


def post_payload(url: str, payload: dict, timeout: int = DEFAULT_TIMEOUT) -> tuple[int, str]:
    """POST ``payload`` as JSON and return ``(status, body)``.

    HTTP error statuses are returned to the caller; only transport failures
    raise :class:`DeliveryError`.
    """

    data = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json", "User-Agent": UA},
        method="POST",
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.status, resp.read().decode("utf-8", "ignore")
    except urllib.error.HTTPError as exc:
        body = ""
        if exc.fp is not None:
            try:
                body = exc.read().decode("utf-8", "ignore")
            except (http.client.HTTPException, OSError):
                body = "<unreadable body>"
        return exc.code, body
    except (urllib.error.URLError, http.client.HTTPException, socket.timeout, OSError) as exc:
        raise DeliveryError(f"webhook unreachable: {exc}") from exc
