"""Process supervisor bridge: asks pm2 to run and report on the dev processes."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any

from ..errors import SupervisorError
from ..models import ProcessInfo, ProjectConfig

log = logging.getLogger(__name__)


class ProcessSupervisor(ABC):
    """The subset of a process manager the dev tools rely on."""

    @abstractmethod
    async def list_processes(self) -> list[ProcessInfo]:
        ...

    @abstractmethod
    async def start(self, name: str, command: str) -> None:
        ...

    @abstractmethod
    async def logs(self, name: str, lines: int = 30) -> str:
        ...

    async def find(self, name: str) -> ProcessInfo | None:
        """Return the named process, or None if the supervisor does not know it."""
        for info in await self.list_processes():
            if info.name == name:
                return info
        return None

    async def is_online(self, name: str) -> bool:
        info = await self.find(name)
        return info is not None and info.online


class Pm2Supervisor(ProcessSupervisor):
    def __init__(self, cwd: str | None = None, *, executable: str = "pm2") -> None:
        self.cwd = cwd or os.getcwd()
        self.executable = executable

    async def list_processes(self) -> list[ProcessInfo]:
        try:
            raw = await self._run("jlist")
            entries = json.loads(raw)
        except (SupervisorError, ValueError):
            log.warning("Could not list pm2 processes", exc_info=True)
            return []
        if not isinstance(entries, list):
            return []
        return [info for info in map(_parse_entry, entries) if info is not None]

    async def start(self, name: str, command: str) -> None:
        await self._run("start", command, "--name", name)
        log.info("pm2 started '%s': %s", name, command)

    async def logs(self, name: str, lines: int = 30) -> str:
        return await self._run("logs", name, "--lines", str(lines), "--nostream")

    async def _run(self, *args: str) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
            )
        except OSError as exc:
            raise SupervisorError(f"Could not run {self.executable}: {exc}") from exc

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise SupervisorError(
                f"{self.executable} {args[0]} exited with code {proc.returncode}: {detail}"
            )
        return stdout.decode("utf-8", errors="replace")


def _parse_entry(entry: Any) -> ProcessInfo | None:
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
        return None
    env = entry.get("pm2_env")
    status = env.get("status") if isinstance(env, dict) else None
    pid = entry.get("pid")
    return ProcessInfo(
        name=entry["name"],
        status=status if isinstance(status, str) else "unknown",
        pid=pid if isinstance(pid, int) and pid > 0 else None,
    )


async def start_dev(project: ProjectConfig, supervisor: ProcessSupervisor) -> list[str]:
    """Start every dev command that is not already online.

    Idempotent: a process the supervisor already reports as online is left
    alone.  Returns one status line per command.
    """
    results: list[str] = []
    for name, command in zip(project.process_names(), project.commands):
        if await supervisor.is_online(name):
            results.append(f"already online: {name}")
            continue
        await supervisor.start(name, command)
        results.append(f"started: {name}")
    return results
