"""Helpers for writing notifier health heartbeat files."""

from __future__ import annotations

import datetime as _dt
import json
import pathlib
from typing import Sequence

ROOT = pathlib.Path(__file__).resolve().parent.parent
HEALTH_DIR = ROOT / "_health"

__all__ = ["HealthReport", "HEALTH_DIR"]


def _utc_now_iso() -> str:
    """Return a second-precision UTC timestamp with a ``Z`` suffix."""

    now = _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0, tzinfo=None)
    return now.isoformat() + "Z"


def _coerce_errors(messages: Sequence[str], *, limit: int = 20) -> list[str]:
    """Clean and deduplicate error strings while preserving order."""

    seen: set[str] = set()
    cleaned: list[str] = []
    for raw in messages:
        text = str(raw or "").strip()
        if not text or text in seen:
            continue
        seen.add(text)
        cleaned.append(text)
        if len(cleaned) >= limit:
            break
    return cleaned


def _coerce_non_negative_int(value, *, default: int = 0) -> int:
    if value is None:
        return default
    try:
        coerced = int(value)
    except (TypeError, ValueError):
        return default
    return max(0, coerced)


class HealthReport:
    """Accumulate run state and persist it to ``_health/<name>.json``."""

    def __init__(self, name: str, *, health_dir: pathlib.Path | None = None) -> None:
        self.name = name
        self.health_dir = health_dir or HEALTH_DIR
        self.errors: list[str] = []
        self.genre = ""
        self.results_count = 0
        self.article_id: str | None = None
        self.published = False

    # Public API ---------------------------------------------------------
    def record_error(self, message: str) -> None:
        text = str(message or "").strip()
        if text:
            self.errors.append(text)

    def set_results_count(self, value) -> None:
        self.results_count = _coerce_non_negative_int(value)

    def to_dict(self) -> dict:
        return {
            "last_run": _utc_now_iso(),
            "genre": self.genre,
            "results_count": self.results_count,
            "article_id": self.article_id,
            "published": self.published,
            "errors": _coerce_errors(self.errors),
        }

    def write(self) -> pathlib.Path:
        path = self.health_dir / f"{self.name}.json"
        self.health_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        return path
