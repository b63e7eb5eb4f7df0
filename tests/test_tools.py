import json

import pytest

from surgent.errors import SupervisorError
from surgent.models import CallResult, CallStatus
from surgent.plugin.tools import DevTools, TelegramTools, format_ack, format_data

from .test_supervisor import FakeSupervisor


class FakeRelay:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def call(self, method, params=None):
        self.calls.append((method, params))
        return self.result


def _ok(data=None):
    return CallResult("id-1", CallStatus.OK, data=data)


def _fail(status, error):
    return CallResult("id-1", status, error=error)


def test_format_ack():
    assert format_ack(_ok(), "Message sent") == "✓ Message sent"
    assert format_ack(_fail(CallStatus.REMOTE_ERROR, "chat not found"), "x") == "✗ chat not found"
    assert format_ack(_fail(CallStatus.TIMEOUT, "Telegram request timeout"), "x") == (
        "✗ Telegram request timeout"
    )


def test_format_data_pretty_prints():
    assert format_data(_ok({"a": [1]})) == json.dumps({"a": [1]}, indent=2)
    assert format_data(_fail(CallStatus.TRANSPORT_ERROR, "WebSocket error")) == "✗ WebSocket error"


@pytest.mark.asyncio
async def test_telegram_tools_use_wire_parameter_names():
    relay = FakeRelay(_ok())
    tools = TelegramTools(relay)

    assert await tools.send_message("123", "hi") == "✓ Message sent"
    assert await tools.send_command("123", "/start") == "✓ Command sent: /start"
    assert await tools.click_button("123", 7, 0, 1) == "✓ Button clicked"
    assert await tools.start_bot("@my_bot") == "✓ Bot started"
    await tools.start_bot("@my_bot", "ref42")

    assert relay.calls == [
        ("sendMessage", {"chatId": "123", "text": "hi"}),
        ("sendCommand", {"chatId": "123", "command": "/start"}),
        ("clickInlineButton", {
            "chatId": "123", "messageId": 7, "buttonIndex": 0, "buttonColumnIndex": 1,
        }),
        ("startBot", {"botId": "@my_bot"}),
        ("startBot", {"botId": "@my_bot", "startParam": "ref42"}),
    ]


@pytest.mark.asyncio
async def test_telegram_query_tools_return_json():
    chats = [{"id": "123", "title": "Test"}]
    relay = FakeRelay(_ok(chats))
    tools = TelegramTools(relay)

    assert json.loads(await tools.get_chats()) == chats
    await tools.get_messages("123")
    await tools.get_chat_info("123")

    assert relay.calls == [
        ("getChats", {"limit": 20}),
        ("getMessages", {"chatId": "123", "limit": 10}),
        ("getChatInfo", {"chatId": "123"}),
    ]


@pytest.mark.asyncio
async def test_telegram_query_tool_remote_error():
    tools = TelegramTools(FakeRelay(_fail(CallStatus.REMOTE_ERROR, "chat not found")))
    assert await tools.get_chat_info("0") == "✗ chat not found"


@pytest.mark.asyncio
async def test_dev_starts_processes(tmp_path):
    (tmp_path / "surgent.json").write_text(
        json.dumps({"name": "bot", "scripts": {"dev": ["bun api", "bun worker"]}})
    )
    sv = FakeSupervisor()

    out = await DevTools(str(tmp_path), sv).dev()

    assert out == "started: bot:1\nstarted: bot:2"


@pytest.mark.asyncio
async def test_dev_config_error_never_reaches_supervisor(tmp_path):
    class ExplodingSupervisor(FakeSupervisor):
        async def list_processes(self):
            raise AssertionError("supervisor must not be queried")

    (tmp_path / "surgent.json").write_text(json.dumps({"name": "bot"}))

    out = await DevTools(str(tmp_path), ExplodingSupervisor()).dev()

    assert out == 'Failed: Missing "scripts.dev" in surgent.json'


@pytest.mark.asyncio
async def test_dev_logs(tmp_path):
    (tmp_path / "surgent.json").write_text(json.dumps({"name": "bot", "scripts": {"dev": "x"}}))

    assert await DevTools(str(tmp_path), FakeSupervisor()).dev_logs(5) == "5 lines of bot"


@pytest.mark.asyncio
async def test_dev_logs_supervisor_failure(tmp_path):
    class BrokenLogs(FakeSupervisor):
        async def logs(self, name, lines=30):
            raise SupervisorError("pm2 logs exited with code 1: boom")

    (tmp_path / "surgent.json").write_text(json.dumps({"name": "bot", "scripts": {"dev": "x"}}))

    out = await DevTools(str(tmp_path), BrokenLogs()).dev_logs()

    assert out == "Failed: pm2 logs exited with code 1: boom"


@pytest.mark.asyncio
async def test_dev_logs_needs_only_a_name(tmp_path):
    (tmp_path / "surgent.json").write_text(json.dumps({"name": "bot"}))

    assert await DevTools(str(tmp_path), FakeSupervisor()).dev_logs(5) == "5 lines of bot"


@pytest.mark.asyncio
async def test_dev_logs_without_name(tmp_path):
    out = await DevTools(str(tmp_path), FakeSupervisor()).dev_logs()

    assert out == 'Failed: Missing "name" in surgent.json'


def test_failure_without_error_text_uses_fallback():
    result = CallResult("id-1", CallStatus.REMOTE_ERROR)

    assert format_ack(result, "Message sent") == "✗ Request failed"
    assert format_data(result) == "✗ Request failed"
