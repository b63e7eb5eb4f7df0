import json

import pytest

from surgent.errors import SupervisorError
from surgent.models import ProcessInfo, ProjectConfig
from surgent.plugin.supervisor import Pm2Supervisor, ProcessSupervisor, start_dev


class FakeSupervisor(ProcessSupervisor):
    def __init__(self, processes=None):
        self.processes = list(processes or [])
        self.started = []

    async def list_processes(self):
        return list(self.processes)

    async def start(self, name, command):
        self.started.append((name, command))
        self.processes.append(ProcessInfo(name=name, status="online"))

    async def logs(self, name, lines=30):
        return f"{lines} lines of {name}"


def _pm2(monkeypatch, outputs):
    """Pm2Supervisor whose pm2 invocations return canned stdout (or raise)."""
    sv = Pm2Supervisor(cwd="/srv/app")
    calls = []

    async def _run(*args):
        calls.append(args)
        result = outputs[args[0]]
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(sv, "_run", _run)
    return sv, calls


@pytest.mark.asyncio
async def test_pm2_parses_jlist(monkeypatch):
    jlist = json.dumps([
        {"name": "bot", "pid": 4242, "pm2_env": {"status": "online"}},
        {"name": "worker", "pid": 0, "pm2_env": {"status": "stopped"}},
        {"pid": 1},
    ])
    sv, _ = _pm2(monkeypatch, {"jlist": jlist})

    processes = await sv.list_processes()

    assert processes == [
        ProcessInfo(name="bot", status="online", pid=4242),
        ProcessInfo(name="worker", status="stopped", pid=None),
    ]
    assert await sv.is_online("bot")
    assert not await sv.is_online("worker")
    assert await sv.find("ghost") is None


@pytest.mark.asyncio
async def test_pm2_listing_failure_means_nothing_running(monkeypatch):
    sv, _ = _pm2(monkeypatch, {"jlist": SupervisorError("pm2 not installed")})

    assert await sv.list_processes() == []
    assert not await sv.is_online("bot")


@pytest.mark.asyncio
async def test_pm2_start_and_logs_arguments(monkeypatch):
    sv, calls = _pm2(monkeypatch, {"start": "", "logs": "line 1\nline 2\n"})

    await sv.start("bot:1", "bun run src/bot.ts")
    text = await sv.logs("bot", 50)

    assert calls == [
        ("start", "bun run src/bot.ts", "--name", "bot:1"),
        ("logs", "bot", "--lines", "50", "--nostream"),
    ]
    assert text == "line 1\nline 2\n"


@pytest.mark.asyncio
async def test_pm2_missing_executable_raises_supervisor_error(tmp_path):
    sv = Pm2Supervisor(cwd=str(tmp_path), executable=str(tmp_path / "no-such-pm2"))
    with pytest.raises(SupervisorError):
        await sv.logs("bot")


@pytest.mark.asyncio
async def test_start_dev_single_command():
    sv = FakeSupervisor()
    project = ProjectConfig(name="bot", commands=["bun dev"])

    assert await start_dev(project, sv) == ["started: bot"]
    assert sv.started == [("bot", "bun dev")]


@pytest.mark.asyncio
async def test_start_dev_skips_online_processes():
    sv = FakeSupervisor([
        ProcessInfo(name="app:1", status="online"),
        ProcessInfo(name="app:2", status="errored"),
    ])
    project = ProjectConfig(name="app", commands=["bun api", "bun worker"])

    lines = await start_dev(project, sv)

    assert lines == ["already online: app:1", "started: app:2"]
    assert sv.started == [("app:2", "bun worker")]


@pytest.mark.asyncio
async def test_start_dev_is_idempotent():
    sv = FakeSupervisor()
    project = ProjectConfig(name="bot", commands=["bun dev"])

    await start_dev(project, sv)
    assert await start_dev(project, sv) == ["already online: bot"]
    assert len(sv.started) == 1
