"""Sequential, cancellable description enrichment for the link collection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from collection import index_of, missing_descriptions, with_description
from description_client import ProviderError
from models import LinkRecord, Progress, ProviderConfig, RunResult, RunState

LOGGER = logging.getLogger(__name__)

GenerateFn = Callable[[str, str, ProviderConfig], str]
CommitFn = Callable[[list[LinkRecord]], None]
SnapshotFn = Callable[[], Sequence[LinkRecord]]
ProgressFn = Callable[[Progress], None]


class AlreadyRunningError(RuntimeError):
    """Raised when a run is started while another is still live."""


class EnrichmentPipeline:
    """Fill in missing descriptions one record at a time.

    Each successful description is merged into the collection by id and the
    whole collection is committed before the next record is requested, so an
    interrupted run keeps everything done so far. Provider failures are logged
    and skipped. Commit failures propagate to the caller.

    Only one run may be live per instance. request_cancel() is honoured
    between records; a request already sent to the provider always finishes.
    """

    def __init__(
        self,
        generate: GenerateFn,
        commit: CommitFn,
        on_progress: ProgressFn | None = None,
    ) -> None:
        self._generate = generate
        self._commit = commit
        self._on_progress = on_progress
        self._state = RunState.IDLE
        self._progress = Progress()
        self._cancel_requested = False

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is RunState.RUNNING

    @property
    def progress(self) -> Progress:
        return self._progress

    def request_cancel(self) -> None:
        """Ask the live run to stop before its next record. No-op when idle."""
        if not self.running or self._cancel_requested:
            return
        LOGGER.info("Enrichment cancellation requested at %s/%s", self._progress.current, self._progress.total)
        self._cancel_requested = True

    async def run(
        self,
        links: Sequence[LinkRecord],
        config: ProviderConfig,
        snapshot: SnapshotFn | None = None,
    ) -> RunResult:
        """Enrich every record in links that lacks a description.

        Args:
            links: The collection at start time; targets are chosen from it.
            config: Provider settings handed to the generate collaborator.
            snapshot: Optional callable returning the store's current
                collection. When given, each description is merged into the
                latest collection instead of the start-time copy, so reorders
                made during the run are kept.
        """
        if self.running:
            raise AlreadyRunningError("An enrichment run is already in progress")

        self._state = RunState.RUNNING
        self._cancel_requested = False
        targets = missing_descriptions(links)
        result = RunResult(state=RunState.RUNNING, progress=Progress(0, len(targets)))
        self._publish(result.progress)

        try:
            if not targets:
                LOGGER.info("Enrichment skipped: every link already has a description")
                return self._finish(result, RunState.COMPLETED)

            LOGGER.info("Enrichment started: %s links missing a description", len(targets))
            working = list(links)
            loop = asyncio.get_running_loop()

            for position, target in enumerate(targets, start=1):
                if self._cancel_requested:
                    return self._finish(result, RunState.CANCELLED)

                try:
                    description = await loop.run_in_executor(
                        None, self._generate, target.title, target.url, config
                    )
                except ProviderError as exc:
                    self._record_failure(result, target, str(exc))
                else:
                    if snapshot is not None:
                        working = list(snapshot())
                    if index_of(working, target.id) == -1:
                        self._record_failure(result, target, "link no longer in collection")
                    else:
                        working = with_description(working, target.id, description)
                        self._commit(list(working))
                        result.succeeded += 1
                        LOGGER.info("Described link_id=%s (%s)", target.id, target.title)

                result.progress = Progress(position, len(targets))
                self._publish(result.progress)

            return self._finish(result, RunState.COMPLETED)
        finally:
            # Reached only when a commit error or task cancellation escapes.
            if self._state is RunState.RUNNING:
                self._state = RunState.IDLE
                self._cancel_requested = False

    def run_sync(
        self,
        links: Sequence[LinkRecord],
        config: ProviderConfig,
        snapshot: SnapshotFn | None = None,
    ) -> RunResult:
        """Blocking wrapper around run() for scripts without an event loop."""
        return asyncio.run(self.run(links, config, snapshot=snapshot))

    def _record_failure(self, result: RunResult, target: LinkRecord, message: str) -> None:
        result.failed += 1
        result.failures.append((target.id, message))
        LOGGER.warning("Description failed for link_id=%s (%s): %s", target.id, target.title, message)

    def _publish(self, progress: Progress) -> None:
        self._progress = progress
        if self._on_progress is not None:
            self._on_progress(progress)

    def _finish(self, result: RunResult, state: RunState) -> RunResult:
        result.state = state
        self._state = state
        self._cancel_requested = False
        LOGGER.info(
            "Enrichment %s: processed=%s/%s succeeded=%s failed=%s",
            state.value,
            result.progress.current,
            result.progress.total,
            result.succeeded,
            result.failed,
        )
        return result
