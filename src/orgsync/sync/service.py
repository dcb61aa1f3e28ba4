"""Service layer running the download and upload sync flows."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from orgsync.errors import DateFormatError, PartialUploadFailure, SyncError
from orgsync.mapper import (
    attach_identifiers,
    project_from_record,
    record_identifier,
    render_outline,
    task_from_record,
    to_create_request,
)
from orgsync.outline.models import Project, Task
from orgsync.outline.parser import TASK_LEVEL, parse, parse_headlines
from orgsync.reconcile import find_new

logger = logging.getLogger(__name__)


class TaskTransport(Protocol):
    """Remote task service as seen by the sync flows."""

    async def list_projects(self) -> Sequence[Mapping[str, Any]]: ...

    async def list_tasks(self) -> Sequence[Mapping[str, Any]]: ...

    async def create_task(
        self, content: str, project_id: Optional[str]
    ) -> Mapping[str, Any]: ...


class OutlineStorage(Protocol):
    """Medium holding the outline text."""

    async def read_outline(self) -> str: ...

    async def write_outline(self, text: str) -> None: ...


class FlowState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RENDERING = "rendering"
    PERSISTED = "persisted"
    RECONCILING = "reconciling"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    PARTIALLY_FAILED = "partially_failed"
    FAILED = "failed"


@dataclass(slots=True)
class DownloadResult:
    """Snapshot written to storage by a download."""

    projects: List[Project]
    tasks: List[Task]
    text: str


@dataclass(slots=True)
class CreatedTask:
    """A local task together with the remote task created for it."""

    local: Task
    remote: Task


@dataclass(slots=True)
class UploadFailure:
    """A local task the remote service refused to create."""

    content: str
    project_id: Optional[str]
    error: SyncError


@dataclass(slots=True)
class UploadResult:
    """Outcome of submitting every new task of the outline."""

    created: List[CreatedTask] = field(default_factory=list)
    failures: List[UploadFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def record(self, outcome: CreatedTask | UploadFailure) -> "UploadResult":
        if isinstance(outcome, CreatedTask):
            return UploadResult(self.created + [outcome], self.failures)
        return UploadResult(self.created, self.failures + [outcome])


class SyncService:
    """Coordinate the remote task service and the outline storage."""

    def __init__(
        self,
        transport: TaskTransport,
        storage: OutlineStorage,
        *,
        write_back_ids: bool = True,
    ):
        self._transport = transport
        self._storage = storage
        self._write_back_ids = write_back_ids
        self._flow_lock = asyncio.Lock()
        self._state = FlowState.IDLE

    @property
    def state(self) -> FlowState:
        return self._state

    def _enter(self, state: FlowState) -> None:
        logger.debug("Sync state %s -> %s", self._state.value, state.value)
        self._state = state

    async def download(self) -> DownloadResult:
        """Replace the outline with the remote projects and tasks.

        Projects and tasks are fetched concurrently and both requests are
        awaited to completion; if either fails nothing is written.
        """

        async with self._flow_lock:
            self._enter(FlowState.FETCHING)
            try:
                results = await asyncio.gather(
                    self._transport.list_projects(),
                    self._transport.list_tasks(),
                    return_exceptions=True,
                )
                for outcome in results:
                    if isinstance(outcome, BaseException):
                        raise outcome
                project_records, task_records = results

                self._enter(FlowState.RENDERING)
                projects = [project_from_record(record) for record in project_records]
                tasks = [task_from_record(record) for record in task_records]
                text = render_outline(projects, tasks)

                await self._storage.write_outline(text)
            except Exception as exc:
                self._enter(FlowState.FAILED)
                logger.warning("Download failed, outline left unchanged: %s", exc)
                raise

            self._enter(FlowState.PERSISTED)
            logger.info(
                "Downloaded %d project(s) and %d task(s)", len(projects), len(tasks)
            )
            return DownloadResult(projects=projects, tasks=tasks, text=text)

    async def _submit(self, task: Task) -> CreatedTask | UploadFailure:
        request = to_create_request(task)
        try:
            record = await self._transport.create_task(**request)
        except SyncError as exc:
            logger.warning("Could not create task %r: %s", task.content, exc)
            return UploadFailure(
                content=task.content, project_id=task.project_id, error=exc
            )

        # The remote task exists from here on, so its id must be kept
        try:
            remote = task_from_record(record)
        except DateFormatError as exc:
            logger.warning(
                "Created task %r returned an unreadable due date: %s", task.content, exc
            )
            remote = replace(task, id=record_identifier(record))

        logger.info("Created task %r as %s", task.content, remote.id)
        return CreatedTask(local=task, remote=remote)

    async def upload(self) -> UploadResult:
        """Create a remote task for every outline task without an identifier.

        Creations run one at a time in outline order. When some of them fail,
        :class:`PartialUploadFailure` is raised after the successes have been
        written back to the outline.
        """

        async with self._flow_lock:
            self._enter(FlowState.RECONCILING)
            try:
                text = await self._storage.read_outline()
                tasks = parse(text)
            except Exception as exc:
                self._enter(FlowState.FAILED)
                logger.warning("Upload failed before submitting tasks: %s", exc)
                raise

            new_tasks = find_new(tasks)
            logger.info("Found %d new task(s) to upload", len(new_tasks))
            self._enter(FlowState.SUBMITTING)

            result = UploadResult()
            for task in new_tasks:
                result = result.record(await self._submit(task))

            if self._write_back_ids and result.created:
                try:
                    await self._write_back(text, tasks, result.created)
                except Exception as exc:
                    self._enter(FlowState.FAILED)
                    logger.warning("Created tasks could not be written back: %s", exc)
                    raise

            if result.failures:
                self._enter(FlowState.PARTIALLY_FAILED)
                raise PartialUploadFailure(result.created, result.failures)

            self._enter(FlowState.COMPLETED)
            return result

    async def _write_back(
        self, text: str, tasks: Sequence[Task], created: Sequence[CreatedTask]
    ) -> None:
        # parse() yields one task per level-2 headline, in headline order
        task_lines = [
            headline.line_number
            for headline in parse_headlines(text)
            if headline.level == TASK_LEVEL
        ]
        line_of = {id(task): line for task, line in zip(tasks, task_lines)}

        assignments: Dict[int, str] = {}
        for entry in created:
            line = line_of.get(id(entry.local))
            if line is None or entry.remote.id is None:
                continue
            assignments[line] = entry.remote.id

        if not assignments:
            return
        await self._storage.write_outline(attach_identifiers(text, assignments))
        logger.info("Wrote %d new identifier(s) back to the outline", len(assignments))


__all__ = [
    "CreatedTask",
    "DownloadResult",
    "FlowState",
    "OutlineStorage",
    "SyncService",
    "TaskTransport",
    "UploadFailure",
    "UploadResult",
]
