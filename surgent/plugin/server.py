"""MCP Server exposing the dev-process and Telegram relay tools."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from surgent.config import PluginConfig
from surgent.plugin.supervisor import Pm2Supervisor, ProcessSupervisor
from surgent.plugin.tools import DevTools, TelegramTools
from surgent.relay import RelayClient

# Default port for the streamable HTTP transport
DEFAULT_PORT = 8902


def create_server(
    config: PluginConfig,
    supervisor: ProcessSupervisor | None = None,
    relay: RelayClient | None = None,
    port: int = DEFAULT_PORT,
) -> FastMCP:
    """Create and configure the surgent tool server."""

    dev_tools = DevTools(config.project_dir, supervisor or Pm2Supervisor(config.project_dir))
    telegram = TelegramTools(relay or RelayClient.from_config(config.relay))

    mcp = FastMCP(
        name="surgent",
        instructions=(
            "Runs the project's bot under pm2 and drives a Telegram account "
            "through the remote relay. Use dev to start the bot, dev_logs to "
            "read its output, and the telegram_* tools to talk to it."
        ),
        host="127.0.0.1",
        port=port,
        stateless_http=True,
    )

    # ------------------------------------------------------------------
    # Dev process tools
    # ------------------------------------------------------------------
    @mcp.tool()
    async def dev() -> str:
        """Start the bot server if not already running."""
        return await dev_tools.dev()

    @mcp.tool()
    async def dev_logs(lines: int = 30) -> str:
        """Show last N lines of bot logs.

        Args:
            lines: Number of log lines to return.
        """
        return await dev_tools.dev_logs(lines)

    # ------------------------------------------------------------------
    # Telegram relay tools
    # ------------------------------------------------------------------
    @mcp.tool()
    async def telegram_send_message(chat_id: str, text: str) -> str:
        """Send a message to a Telegram chat.

        Args:
            chat_id: Chat ID (e.g. "-1001234567890" for groups, "123456789" for users).
            text: Message text to send.
        """
        return await telegram.send_message(chat_id, text)

    @mcp.tool()
    async def telegram_send_command(chat_id: str, command: str) -> str:
        """Send a command (like /start) to a Telegram bot.

        Args:
            chat_id: Chat ID of the bot.
            command: Command to send (e.g. "/start", "/help").
        """
        return await telegram.send_command(chat_id, command)

    @mcp.tool()
    async def telegram_click_button(
        chat_id: str,
        message_id: int,
        button_index: int,
        button_column_index: int,
    ) -> str:
        """Click an inline button in a Telegram message.

        Args:
            chat_id: Chat ID.
            message_id: Message ID containing the button.
            button_index: Row index of the button (0-based).
            button_column_index: Column index within the row (0-based).
        """
        return await telegram.click_button(chat_id, message_id, button_index, button_column_index)

    @mcp.tool()
    async def telegram_start_bot(bot_id: str, start_param: str | None = None) -> str:
        """Start a Telegram bot with optional deep link parameter.

        Args:
            bot_id: Bot user ID or username.
            start_param: Optional start parameter (deep link).
        """
        return await telegram.start_bot(bot_id, start_param)

    @mcp.tool()
    async def telegram_get_chats(limit: int = 20) -> str:
        """Get list of Telegram chats.

        Args:
            limit: Max number of chats to return.
        """
        return await telegram.get_chats(limit)

    @mcp.tool()
    async def telegram_get_messages(chat_id: str, limit: int = 10) -> str:
        """Get messages from a Telegram chat.

        Args:
            chat_id: Chat ID.
            limit: Max number of messages to return.
        """
        return await telegram.get_messages(chat_id, limit)

    @mcp.tool()
    async def telegram_get_chat_info(chat_id: str) -> str:
        """Get info about a Telegram chat.

        Args:
            chat_id: Chat ID.
        """
        return await telegram.get_chat_info(chat_id)

    return mcp
