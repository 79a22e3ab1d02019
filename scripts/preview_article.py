#!/usr/bin/env python3
"""Show what the notifier would extract from a saved Newswire article."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

sys.path.append(str(Path(__file__).resolve().parents[1]))

from newsbot.fields import build_field_value
from newsbot.headlines import DEFAULT_MAX_HEADLINES, extract_headlines
from newsbot.images import find_preview_image


def load_post(path: Path) -> dict:
    """Return the post from a bare post file or a ``NewswirePost`` response."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise RuntimeError(f"{path}: unable to load JSON ({exc})") from exc
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"].get("post")
    if not isinstance(data, dict):
        raise RuntimeError(f"{path}: no post object found")
    return data


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path, help="Article JSON file")
    parser.add_argument("--max", type=int, default=DEFAULT_MAX_HEADLINES, help="Headlines to keep")
    args = parser.parse_args(argv)

    try:
        post = load_post(args.path)
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        return 1

    headlines = extract_headlines(post, args.max)
    print(f"Title: {post.get('title') or '-'}")
    print(f"Image: {find_preview_image(post) or '-'}")
    print(f"Headlines ({len(headlines)}):")
    print(build_field_value(headlines) or "  (none)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
