"""Pure transformations over the ordered link collection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from models import LinkRecord

ALL_CATEGORIES = "all"


def index_of(links: Sequence[LinkRecord], link_id: str) -> int:
    """Return the position of link_id in links, or -1 when absent."""
    for index, link in enumerate(links):
        if link.id == link_id:
            return index
    return -1


def move_before(links: Sequence[LinkRecord], moved_id: str, target_id: str) -> list[LinkRecord]:
    """Return a copy of links with moved_id placed immediately before target_id.

    Moving a record onto itself, or naming an id that is not in the
    collection, is a no-op: the input order is returned unchanged. Every other
    record keeps its relative order.
    """
    result = list(links)
    if moved_id == target_id:
        return result

    source_index = index_of(result, moved_id)
    if source_index == -1 or index_of(result, target_id) == -1:
        return result

    moved = result.pop(source_index)
    result.insert(index_of(result, target_id), moved)
    return result


def missing_descriptions(links: Sequence[LinkRecord]) -> list[LinkRecord]:
    """Records that still need a description, in collection order."""
    return [link for link in links if link.needs_description]


def with_description(links: Sequence[LinkRecord], link_id: str, description: str) -> list[LinkRecord]:
    """Return a copy of links where the record matching link_id carries description."""
    return [replace(link, description=description) if link.id == link_id else link for link in links]


def filter_by_category(links: Sequence[LinkRecord], category_id: str | None) -> list[LinkRecord]:
    if not category_id or category_id == ALL_CATEGORIES:
        return list(links)
    return [link for link in links if link.category_id == category_id]


def category_ids(links: Sequence[LinkRecord]) -> list[str]:
    """Distinct category ids used by links, in first-seen order."""
    seen: dict[str, None] = {}
    for link in links:
        seen.setdefault(link.category_id, None)
    return list(seen)
