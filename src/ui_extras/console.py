"""Console command interpreter used by ``OnClick.cli`` actions."""

from __future__ import annotations

import logging
import shlex
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable
from uuid import uuid4

from ui_extras.ecs.system import System, into_system
from ui_extras.ecs.world import World
from ui_extras.errors import UnknownCommandError


class ConsoleJobStatus(str, Enum):
    """Outcome of one console command line."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class ConsoleJob:
    """Record of a console command line and how it finished."""

    id: str
    line: str
    submitted_at: datetime
    status: ConsoleJobStatus
    error: str | None = None


@dataclass(slots=True)
class _RegisteredCommand:
    system: System
    initialized: bool = False


class InMemoryHistoryStore:
    """Bounded in-memory history store."""

    def __init__(self, max_jobs: int = 200) -> None:
        self._jobs: deque[ConsoleJob] = deque(maxlen=max_jobs)

    def append(self, job: ConsoleJob) -> None:
        self._jobs.appendleft(job)

    def list_recent(self, limit: int) -> list[ConsoleJob]:
        return list(self._jobs)[:limit]


class ConsoleCommands:
    """Registry of named commands, installed on the world as a resource.

    Command callables may declare ``args`` (the tokens after the command
    name), ``world`` and ``commands`` parameters.
    """

    def __init__(
        self,
        *,
        strict: bool = False,
        history_size: int = 200,
        logger: logging.Logger | None = None,
    ) -> None:
        self._commands: dict[str, _RegisteredCommand] = {}
        self._strict = strict
        self._history = InMemoryHistoryStore(max_jobs=history_size)
        self._logger = logger or logging.getLogger("ui_extras.console")

    def register(self, name: str, func: Callable[..., Any] | System) -> ConsoleCommands:
        if not name or any(char.isspace() for char in name):
            raise ValueError(f"Invalid console command name: {name!r}")
        self._commands[name] = _RegisteredCommand(system=into_system(func, input_param="args"))
        return self

    def names(self) -> list[str]:
        return sorted(self._commands)

    def list_recent(self, limit: int = 20) -> list[ConsoleJob]:
        return self._history.list_recent(limit)

    def run(self, world: World, line: str) -> ConsoleJob | None:
        """Parse and execute one command line against ``world``."""
        job = ConsoleJob(
            id=uuid4().hex,
            line=line,
            submitted_at=datetime.now(timezone.utc),
            status=ConsoleJobStatus.UNKNOWN,
        )
        try:
            tokens = shlex.split(line)
        except ValueError as exc:
            job.status = ConsoleJobStatus.FAILED
            job.error = f"{type(exc).__name__}: {exc}"
            self._history.append(job)
            self._logger.error("console_command_unparsable", extra={"command_line": line})
            raise
        if not tokens:
            return None

        name, arguments = tokens[0], tokens[1:]
        registered = self._commands.get(name)
        if registered is None:
            job.error = f"Unknown console command: {name}"
            self._history.append(job)
            self._logger.error("console_command_unknown", extra={"command_name": name})
            if self._strict:
                raise UnknownCommandError(job.error)
            return job

        try:
            if not registered.initialized:
                registered.system.initialize(world)
                registered.initialized = True
            registered.system.run(arguments, world)
            registered.system.apply_deferred(world)
        except Exception as exc:
            job.status = ConsoleJobStatus.FAILED
            job.error = f"{type(exc).__name__}: {exc}"
            self._history.append(job)
            raise

        job.status = ConsoleJobStatus.SUCCEEDED
        self._history.append(job)
        self._logger.info("console_command_succeeded", extra={"command_name": name, "job_id": job.id})
        return job
