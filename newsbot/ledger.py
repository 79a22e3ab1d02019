"""Persisted record of the last article announced per genre."""

from __future__ import annotations

import json
import pathlib
import subprocess

from . import LAST_POSTED_FILENAME

__all__ = [
    "DEFAULT_LEDGER_PATH",
    "commit_and_push",
    "read_last_posted",
    "write_last_posted",
]

ROOT = pathlib.Path(__file__).resolve().parent.parent
DEFAULT_LEDGER_PATH = ROOT / ".github" / LAST_POSTED_FILENAME

BOT_EMAIL = "41898282+github-actions[bot]@users.noreply.github.com"
BOT_NAME = "github-actions[bot]"
COMMIT_MESSAGE = "chore: update last_posted.json (newsbot)"


def read_last_posted(path: pathlib.Path) -> dict[str, str]:
    """Return the genre → article id mapping; unreadable files count as empty."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        print(f"[WARN] Failed to read {path}: {exc}")
        return {}
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        print(f"[WARN] {path} is not valid JSON; starting from an empty ledger")
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v) for k, v in data.items() if v is not None}


def write_last_posted(path: pathlib.Path, ledger: dict[str, str]) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(ledger, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        print(f"[ERROR] Failed to write {path}: {exc}")
        return False
    return True


def _git(*args: str, cwd: pathlib.Path) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)


def commit_and_push(
    path: pathlib.Path,
    *,
    message: str = COMMIT_MESSAGE,
    push: bool = True,
) -> bool:
    """Commit ``path`` as the Actions bot and push; return ``False`` on failure."""

    cwd = path.resolve().parent
    try:
        _git("config", "user.email", BOT_EMAIL, cwd=cwd)
        _git("config", "user.name", BOT_NAME, cwd=cwd)
        _git("add", str(path.resolve()), cwd=cwd)
        try:
            _git("commit", "-m", message, cwd=cwd)
        except subprocess.CalledProcessError:
            print("[INFO] Nothing to commit for", path.name)
        if push:
            _git("push", "--no-verify", cwd=cwd)
    except (subprocess.CalledProcessError, OSError) as exc:
        detail = getattr(exc, "stderr", "") or exc
        print(f"[WARN] Failed to commit/push {path.name}: {detail}")
        return False
    print(f"[INFO] Committed{' and pushed' if push else ''} {path.name}")
    return True
