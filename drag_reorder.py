"""Drag-and-drop reordering of the link collection.

Every hover over another record commits the reordered collection right away,
so the order shown while dragging is always the order that gets persisted.
Dropping ends the gesture without further changes; there is no undo.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from collection import index_of, move_before
from models import LinkRecord

LOGGER = logging.getLogger(__name__)

CommitFn = Callable[[list[LinkRecord]], None]


class DragReorderController:
    """Two-state machine: idle, or dragging one record by id."""

    def __init__(self, commit: CommitFn) -> None:
        self._commit = commit
        self._moved_id: str | None = None

    @property
    def moved_id(self) -> str | None:
        return self._moved_id

    @property
    def dragging(self) -> bool:
        return self._moved_id is not None

    def drag_start(self, link_id: str) -> None:
        if self._moved_id is not None and self._moved_id != link_id:
            LOGGER.debug("Drag restarted: %s replaces %s", link_id, self._moved_id)
        self._moved_id = link_id

    def drag_over(self, links: Sequence[LinkRecord], target_id: str) -> list[LinkRecord]:
        """Move the dragged record before target_id and commit the new order.

        links is the current collection. Hovers while idle, over the dragged
        record itself, or naming ids missing from links (e.g. deleted
        elsewhere mid-drag) leave the order untouched and commit nothing.
        Errors from the commit callback propagate.
        """
        moved_id = self._moved_id
        if moved_id is None or moved_id == target_id:
            return list(links)

        if index_of(links, moved_id) == -1 or index_of(links, target_id) == -1:
            LOGGER.debug("Ignoring hover moved=%s target=%s: id not in collection", moved_id, target_id)
            return list(links)

        reordered = move_before(links, moved_id, target_id)
        if [link.id for link in reordered] == [link.id for link in links]:
            return reordered

        self._commit(reordered)
        return reordered

    def drop(self) -> None:
        self._moved_id = None

    drag_end = drop
