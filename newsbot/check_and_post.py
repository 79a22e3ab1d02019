#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Newswire – check and post

Fetches the newest Rockstar Newswire article for a genre and announces it on
a Discord webhook, unless it was already announced.

• Lists page 1 of the genre and takes the top article.
• Skips when .github/last_posted.json already records that article id.
• Fetches the full article (best effort) for its preview image and the
  headlines inside the article body.
• Posts one embed: title, link, description, image, "Headlines inside the
  article" and "What else is new" fields.
• Records the article id only after the webhook accepted the post, then
  commits and pushes the ledger.

Run:
  python3 -m newsbot.check_and_post [--genre latest] [--force] [--dry-run]
Env knobs (optional):
  DISCORD_WEBHOOK, FORCE, GENRE, EXTRA_COUNT, HEADLINE_COUNT,
  NEWSWIRE_LIST_HASH, NEWSWIRE_POST_HASH, NEWSWIRE_LOCALE, HTTP_TIMEOUT,
  LAST_POSTED_FILE, INLINE_HEADLINES, GIT_COMMIT
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import os
import pathlib
import sys
from typing import Iterable, Mapping, Optional

if __package__ in (None, ""):
    sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from newsbot.fields import build_extras_field
from newsbot.graph import (
    DEFAULT_LOCALE,
    POST_QUERY_HASH,
    GraphError,
    fetch_full_article,
    fetch_list,
)
from newsbot.headlines import extract_headlines
from newsbot.health import HEALTH_DIR, HealthReport
from newsbot.images import find_preview_image
from newsbot.ledger import (
    DEFAULT_LEDGER_PATH,
    commit_and_push,
    read_last_posted,
    write_last_posted,
)
from newsbot.webhook import (
    DeliveryError,
    build_embed,
    build_payload,
    is_success,
    post_payload,
)

HEALTH_NAME = "newswire"
DEFAULT_GENRE = "gta_online"
DEFAULT_EXTRA_COUNT = 3
DEFAULT_HEADLINE_COUNT = 6
DEFAULT_TIMEOUT = 30
PAYLOAD_PREVIEW_CHARS = 1500

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    """Return a positive integer from the environment or ``default``."""

    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        print(f"[WARN] Invalid {name}={raw!r}; falling back to {default}")
        return default
    return value if value > 0 else default


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = (environ.get(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    print(f"[WARN] Invalid {name}={raw!r}; falling back to {default}")
    return default


@dataclasses.dataclass(slots=True)
class Settings:
    """Knobs for one check-and-post run."""

    webhook_url: str = ""
    force: bool = False
    genre: str = DEFAULT_GENRE
    extra_count: int = DEFAULT_EXTRA_COUNT
    headline_count: int = DEFAULT_HEADLINE_COUNT
    list_hash: str = ""
    post_hash: str = POST_QUERY_HASH
    locale: str = DEFAULT_LOCALE
    timeout: int = DEFAULT_TIMEOUT
    ledger_path: pathlib.Path = DEFAULT_LEDGER_PATH
    inline_headlines: bool = False
    git_commit: bool = True
    health_dir: pathlib.Path = HEALTH_DIR


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    ledger_raw = (env.get("LAST_POSTED_FILE") or "").strip()
    return Settings(
        webhook_url=(env.get("DISCORD_WEBHOOK") or "").strip(),
        force=_env_flag(env, "FORCE", False),
        genre=(env.get("GENRE") or "").strip() or DEFAULT_GENRE,
        extra_count=_env_int(env, "EXTRA_COUNT", DEFAULT_EXTRA_COUNT),
        headline_count=_env_int(env, "HEADLINE_COUNT", DEFAULT_HEADLINE_COUNT),
        list_hash=(env.get("NEWSWIRE_LIST_HASH") or "").strip(),
        post_hash=(env.get("NEWSWIRE_POST_HASH") or "").strip() or POST_QUERY_HASH,
        locale=(env.get("NEWSWIRE_LOCALE") or "").strip() or DEFAULT_LOCALE,
        timeout=_env_int(env, "HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        ledger_path=pathlib.Path(ledger_raw) if ledger_raw else DEFAULT_LEDGER_PATH,
        inline_headlines=_env_flag(env, "INLINE_HEADLINES", False),
        git_commit=_env_flag(env, "GIT_COMMIT", True),
    )


def _fetch_detail(settings: Settings, article_id, health: HealthReport) -> Optional[dict]:
    try:
        full = fetch_full_article(
            article_id,
            post_hash=settings.post_hash,
            locale=settings.locale,
            timeout=settings.timeout,
        )
    except GraphError as exc:
        print(f"[WARN] fetch_full_article error: {exc}")
        health.record_error(f"fetch_full_article failed for {article_id}: {exc}")
        return None
    print("[DEBUG] fetch_full_article returned", "OK" if full else "null/empty")
    return full


def _record(
    settings: Settings,
    ledger: dict[str, str],
    article_id: str,
    health: HealthReport,
    *,
    commit: bool,
) -> None:
    ledger[settings.genre] = article_id
    if not write_last_posted(settings.ledger_path, ledger):
        health.record_error(f"Failed to write {settings.ledger_path}")
        return
    if commit and not commit_and_push(settings.ledger_path):
        health.record_error(f"Failed to commit/push {settings.ledger_path.name}")


def run(settings: Settings, health: Optional[HealthReport] = None) -> int:
    """Run one fetch-and-maybe-post cycle and return the exit code."""

    if health is None:
        health = HealthReport(HEALTH_NAME, health_dir=settings.health_dir)
    health.genre = settings.genre

    if not settings.webhook_url:
        print("[WARN] DISCORD_WEBHOOK not set; will only log.")

    try:
        results = fetch_list(
            settings.genre,
            list_hash=settings.list_hash,
            locale=settings.locale,
            timeout=settings.timeout,
        )
    except GraphError as exc:
        print(f"[ERROR] Graph request failed: {exc}")
        health.record_error(f"NewswireList failed: {exc}")
        return 1

    health.set_results_count(len(results))
    if not results:
        print("[INFO] No posts returned")
        return 0

    top = results[0]
    print("[INFO] Found", len(results), "results. First result title:", top.get("title"))
    if top.get("id") in (None, ""):
        print("[ERROR] Top article has no id")
        health.record_error("Top article has no id")
        return 1
    top_id = str(top["id"])
    health.article_id = top_id
    print("[INFO] Top article id:", top_id)

    ledger = read_last_posted(settings.ledger_path)
    if not settings.force and ledger.get(settings.genre) == top_id:
        print("[INFO] Top article already posted for genre", settings.genre, "- skipping.")
        return 0

    image_url = find_preview_image(top)
    full = _fetch_detail(settings, top["id"], health)
    if full and not image_url:
        image_url = find_preview_image(full)

    headlines = extract_headlines(full or top, settings.headline_count)
    print(f"[DEBUG] extracted internal headlines (count={len(headlines)}):", headlines)

    extras_value = build_extras_field(results, settings.extra_count)
    embed = build_embed(
        top,
        image_url=image_url,
        headlines=headlines,
        extras_value=extras_value,
        inline_headlines=settings.inline_headlines,
    )
    payload = build_payload(embed)
    preview = json.dumps(payload, ensure_ascii=False)[:PAYLOAD_PREVIEW_CHARS]
    print("[DEBUG] payload preview:", preview)

    if not settings.webhook_url:
        print("[INFO] DISCORD_WEBHOOK not set; would post payload.")
        _record(settings, ledger, top_id, health, commit=False)
        return 0

    try:
        status, body = post_payload(settings.webhook_url, payload, timeout=settings.timeout)
    except DeliveryError as exc:
        print(f"[ERROR] Failed to post to Discord webhook: {exc}")
        health.record_error(str(exc))
        return 1

    print("[INFO] Discord response:", status, body or "<no body>")
    if not is_success(status):
        print("[ERROR] Discord returned error; not updating", settings.ledger_path.name)
        health.record_error(f"Discord returned HTTP {status}")
        return 1

    health.published = True
    _record(settings, ledger, top_id, health, commit=settings.git_commit)
    return 0


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Announce the latest Newswire article on Discord")
    parser.add_argument("--genre", help="Feed category to poll (default: GENRE or gta_online)")
    parser.add_argument("--force", action="store_true", help="Post even if the article was already posted")
    parser.add_argument("--ledger", type=pathlib.Path, help="Path to last_posted.json")
    parser.add_argument("--dry-run", action="store_true", help="Log the payload instead of posting it")
    parser.add_argument("--health-dir", type=pathlib.Path, help="Directory for the health heartbeat")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = load_settings()
    if args.genre:
        settings.genre = args.genre.strip() or settings.genre
    if args.force:
        settings.force = True
    if args.ledger is not None:
        settings.ledger_path = args.ledger
    if args.dry_run:
        settings.webhook_url = ""
    if args.health_dir is not None:
        settings.health_dir = args.health_dir

    health = HealthReport(HEALTH_NAME, health_dir=settings.health_dir)
    try:
        return run(settings, health)
    except Exception as exc:
        health.record_error(f"Unhandled newsbot error: {exc}")
        raise
    finally:
        try:
            health.write()
        except OSError as health_exc:
            print(f"[WARN] Failed to write newsbot health: {health_exc}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
