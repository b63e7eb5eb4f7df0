"""Correlated request/response client for the Telegram relay.

    client = RelayClient.from_config(RelayConfig.from_env())
    result = await client.call("sendMessage", {"chatId": "123", "text": "hi"})
"""

from surgent.relay.client import RelayClient, build_relay_url
from surgent.relay.correlator import Correlator

__all__ = ["Correlator", "RelayClient", "build_relay_url"]
