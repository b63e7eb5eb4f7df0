"""Run the agent plugin tool server, or print provider overrides.

Usage:
    python -m surgent.plugin serve [--transport stdio|http] [--port PORT]
    python -m surgent.plugin providers [--config FILE]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import uvicorn

from surgent.config import PluginConfig
from surgent.errors import ConfigError
from surgent.plugin.providers import apply_provider_overrides
from surgent.plugin.server import DEFAULT_PORT, create_server

log = logging.getLogger(__name__)


async def _serve_http(config: PluginConfig, port: int) -> None:
    server = create_server(config, port=port)
    uvi = uvicorn.Server(
        uvicorn.Config(
            server.streamable_http_app(), host="127.0.0.1", port=port, log_level="info",
        )
    )
    await uvi.serve()


def _serve(args: argparse.Namespace, config: PluginConfig) -> None:
    if args.transport == "http":
        log.info("Starting surgent plugin on http://127.0.0.1:%d/mcp", args.port)
        asyncio.run(_serve_http(config, args.port))
    else:
        log.info("Starting surgent plugin on stdio (project: %s)", config.project_dir)
        create_server(config).run(transport="stdio")


def _providers(args: argparse.Namespace, config: PluginConfig) -> None:
    base: dict = {}
    if args.config is not None:
        base = json.loads(args.config.read_text())
    if not config.ai_base_url:
        log.info("SURGENT_AI_BASE_URL is not set; provider config left unchanged")
    result = apply_provider_overrides(base, config.ai_base_url, config.api_key)
    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")


def main() -> None:
    parser = argparse.ArgumentParser(description="Surgent agent plugin")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the MCP tool server (default)")
    serve.add_argument(
        "--transport", choices=("stdio", "http"), default="stdio",
        help="MCP transport (default: stdio)",
    )
    serve.add_argument(
        "--port", type=int, default=DEFAULT_PORT,
        help=f"Port for the http transport (default: {DEFAULT_PORT})",
    )

    providers = sub.add_parser("providers", help="Print agent config with provider overrides")
    providers.add_argument(
        "--config", type=Path, default=None,
        help="Existing agent config JSON to merge into",
    )

    args = parser.parse_args()
    if args.command is None:
        args = parser.parse_args(["serve"])

    # stdout carries the MCP stdio stream; logs go to stderr.
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [surgent-plugin] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = PluginConfig.from_env()
    except ConfigError as exc:
        parser.exit(2, f"surgent-plugin: {exc}\n")

    if args.command == "providers":
        _providers(args, config)
    else:
        _serve(args, config)


if __name__ == "__main__":
    main()
