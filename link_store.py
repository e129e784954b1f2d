"""JSON file store of record for the link collection."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from models import Category, LinkRecord

DEFAULT_STORE_PATH = "links.json"

LOGGER = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the store file cannot be read or written."""


def load_store(path: str | None = None) -> tuple[list[LinkRecord], list[Category]]:
    """Read the ordered links and the categories. A missing file is an empty store."""
    store_path = _store_path(path)
    data = _read(store_path)
    try:
        links = [LinkRecord.from_dict(item) for item in data.get("links", [])]
        categories = [Category.from_dict(item) for item in data.get("categories", [])]
    except (KeyError, TypeError, AttributeError) as exc:
        raise StoreError(f"Malformed record in {store_path}: {exc}") from exc
    return links, categories


def load_links(path: str | None = None) -> list[LinkRecord]:
    return load_store(path)[0]


def commit_collection(links: Sequence[LinkRecord], path: str | None = None) -> None:
    """Replace the stored collection with links, keeping the stored categories.

    The file is written to a sibling temp file and swapped in with os.replace,
    so readers never see a half-written collection.
    """
    target = _store_path(path)
    ids = [link.id for link in links]
    if len(ids) != len(set(ids)):
        raise StoreError("Refusing to commit a collection with duplicate link ids")

    data = _read(target)
    data["links"] = [link.to_dict() for link in links]
    data.setdefault("categories", [])

    tmp_path = target.with_name(f"{target.name}.tmp")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        os.replace(tmp_path, target)
    except OSError as exc:
        raise StoreError(f"Could not write {target}: {exc}") from exc

    LOGGER.debug("Committed %s links to %s", len(links), target)


def _read(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        raise StoreError(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise StoreError(f"Expected a JSON object in {path}")
    return data


def _store_path(path: str | None) -> Path:
    # Read at call time so a .env loaded after import still applies.
    return Path(path or os.getenv("LINKS_STORE_PATH", DEFAULT_STORE_PATH))
