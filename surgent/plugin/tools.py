"""Tool implementations behind the MCP server.

Every tool returns a final human-readable string.  Relay results stay
structured (CallResult) until ``format_*`` turns them into text here.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..config import load_project_config, load_project_name
from ..errors import SurgentError
from ..models import CallResult
from ..relay import RelayClient
from .supervisor import ProcessSupervisor, start_dev

log = logging.getLogger(__name__)

OK_MARK = "✓"
FAIL_MARK = "✗"
UNKNOWN_ERROR = "Request failed"


def format_ack(result: CallResult, message: str) -> str:
    if result.ok:
        return f"{OK_MARK} {message}"
    return f"{FAIL_MARK} {result.error or UNKNOWN_ERROR}"


def format_data(result: CallResult) -> str:
    if result.ok:
        return json.dumps(result.data, indent=2, ensure_ascii=False)
    return f"{FAIL_MARK} {result.error or UNKNOWN_ERROR}"


class DevTools:
    """Start and inspect the project's dev processes through the supervisor."""

    def __init__(self, project_dir: str, supervisor: ProcessSupervisor) -> None:
        self.project_dir = project_dir
        self.supervisor = supervisor

    async def dev(self) -> str:
        try:
            project = load_project_config(self.project_dir)
            return "\n".join(await start_dev(project, self.supervisor))
        except SurgentError as exc:
            return f"Failed: {exc}"

    async def dev_logs(self, lines: int = 30) -> str:
        try:
            name = load_project_name(self.project_dir)
            return await self.supervisor.logs(name, lines)
        except SurgentError as exc:
            return f"Failed: {exc}"


class TelegramTools:
    """Relay-backed Telegram actions. Parameter names follow the relay's wire schema."""

    def __init__(self, relay: RelayClient) -> None:
        self.relay = relay

    async def send_message(self, chat_id: str, text: str) -> str:
        res = await self.relay.call("sendMessage", {"chatId": chat_id, "text": text})
        return format_ack(res, "Message sent")

    async def send_command(self, chat_id: str, command: str) -> str:
        res = await self.relay.call("sendCommand", {"chatId": chat_id, "command": command})
        return format_ack(res, f"Command sent: {command}")

    async def click_button(
        self,
        chat_id: str,
        message_id: int,
        button_index: int,
        button_column_index: int,
    ) -> str:
        res = await self.relay.call("clickInlineButton", {
            "chatId": chat_id,
            "messageId": message_id,
            "buttonIndex": button_index,
            "buttonColumnIndex": button_column_index,
        })
        return format_ack(res, "Button clicked")

    async def start_bot(self, bot_id: str, start_param: str | None = None) -> str:
        params: dict[str, Any] = {"botId": bot_id}
        if start_param is not None:
            params["startParam"] = start_param
        res = await self.relay.call("startBot", params)
        return format_ack(res, "Bot started")

    async def get_chats(self, limit: int = 20) -> str:
        return format_data(await self.relay.call("getChats", {"limit": limit}))

    async def get_messages(self, chat_id: str, limit: int = 10) -> str:
        return format_data(
            await self.relay.call("getMessages", {"chatId": chat_id, "limit": limit})
        )

    async def get_chat_info(self, chat_id: str) -> str:
        return format_data(await self.relay.call("getChatInfo", {"chatId": chat_id}))
