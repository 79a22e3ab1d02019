"""Client for the Rockstar Graph API persisted queries used by the Newswire."""

from __future__ import annotations

import http.client
import json
import socket
import urllib.error
import urllib.request
from typing import Any, Optional
from urllib.parse import urlencode

__all__ = [
    "GraphError",
    "build_query_url",
    "fetch_full_article",
    "fetch_json",
    "fetch_list",
    "tag_id_for_genre",
]

GRAPH_URL = "https://graph.rockstargames.com?"
POST_QUERY_HASH = "555658813abe5acc8010de1a1feddd6fd8fddffbdc35d3723d4dc0fe4ded6810"
DEFAULT_LOCALE = "en_us"
DEFAULT_TIMEOUT = 30
UA = "Mozilla/5.0 (Newswire Notifier)"

GENRE_TAGS = {
    "gta_online": 702,
}
LATEST_GENRE = "latest"


class GraphError(RuntimeError):
    """Raised when the Graph API cannot be reached or answers unexpectedly."""


def _compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def build_query_url(operation: str, variables: dict, sha256_hash: str) -> str:
    params = [
        ("operationName", operation),
        ("variables", _compact(variables)),
        ("extensions", _compact({"persistedQuery": {"version": 1, "sha256Hash": sha256_hash}})),
    ]
    return GRAPH_URL + urlencode(params)


def tag_id_for_genre(genre: str) -> Optional[int]:
    genre = (genre or "").strip()
    if not genre or genre == LATEST_GENRE:
        return None
    if genre.isdigit():
        return int(genre)
    return GENRE_TAGS.get(genre)


def fetch_json(url: str, timeout: int = DEFAULT_TIMEOUT) -> Any:
    req = urllib.request.Request(url, headers={"User-Agent": UA, "Accept": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as r:
            raw = r.read()
    except (urllib.error.URLError, http.client.HTTPException, socket.timeout, OSError) as exc:
        raise GraphError(f"request failed: {exc}") from exc
    try:
        return json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise GraphError(f"response is not JSON: {exc}") from exc


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def fetch_list(
    genre: str,
    *,
    list_hash: str,
    page: int = 1,
    locale: str = DEFAULT_LOCALE,
    timeout: int = DEFAULT_TIMEOUT,
) -> list[dict]:
    """Return the ``page`` of Newswire summaries for ``genre``, newest first."""

    if not list_hash:
        raise GraphError("NewswireList persisted query hash is not configured")
    variables = {
        "page": page,
        "tagId": tag_id_for_genre(genre),
        "metaUrl": "/newswire",
        "locale": locale,
    }
    url = build_query_url("NewswireList", variables, list_hash)
    print("[INFO] Requesting Graph endpoint:", url)
    results = _dig(fetch_json(url, timeout), "data", "posts", "results")
    if not isinstance(results, list):
        raise GraphError("response has no data.posts.results list")
    return [item for item in results if isinstance(item, dict)]


def fetch_full_article(
    article_id: Any,
    *,
    post_hash: str = POST_QUERY_HASH,
    locale: str = DEFAULT_LOCALE,
    timeout: int = DEFAULT_TIMEOUT,
) -> Optional[dict]:
    """Return the full post document for ``article_id`` or ``None``."""

    variables = {"locale": locale, "id_hash": article_id}
    url = build_query_url("NewswirePost", variables, post_hash or POST_QUERY_HASH)
    post = _dig(fetch_json(url, timeout), "data", "post")
    return post if isinstance(post, dict) else None
