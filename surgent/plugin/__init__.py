"""Agent plugin: MCP tools for running and driving a Telegram bot under development.

Exposes these MCP tools:
  - dev / dev_logs: start the project's bot under pm2 and read its logs
  - telegram_*:     relay commands to a Telegram account over the relay socket

Can run standalone:
    python -m surgent.plugin serve [--transport stdio|http]
"""

from surgent.plugin.server import create_server
from surgent.plugin.supervisor import Pm2Supervisor, ProcessSupervisor

__all__ = ["Pm2Supervisor", "ProcessSupervisor", "create_server"]
