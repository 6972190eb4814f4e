"""
The current-title slot: which title the user is watching right now.

Stored as a small JSON file and passed around as a WatchContext value;
nothing else is persisted.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from .schema import has_title


@dataclass(frozen=True)
class WatchContext:
    title: str
    site: Optional[str] = None
    url: Optional[str] = None


def load_context(path: Path) -> Optional[WatchContext]:
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return None
            data = json.loads(content)
    except (json.JSONDecodeError, IOError):
        return None
    if not isinstance(data, dict) or not has_title(data.get("title")):
        return None
    return WatchContext(title=data["title"], site=data.get("site"), url=data.get("url"))


def save_context(path: Path, context: WatchContext) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(asdict(context), f, indent=2, ensure_ascii=False)


def clear_context(path: Path) -> bool:
    """Remove the slot. Returns False if there was nothing to clear."""
    if not path.exists():
        return False
    path.unlink()
    return True
