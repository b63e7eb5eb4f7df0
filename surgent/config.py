from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .errors import ConfigError
from .models import ProjectConfig

log = logging.getLogger(__name__)

DEFAULT_RELAY_URL = "http://localhost:5050/ws/telegram-remote"
DEFAULT_RELAY_TIMEOUT = 30.0
DEFAULT_BOT_PORT = 8000
PROJECT_FILE = "surgent.json"


@dataclass(frozen=True)
class RelayConfig:
    url: str = DEFAULT_RELAY_URL
    token: str | None = None
    timeout: float = DEFAULT_RELAY_TIMEOUT

    @classmethod
    def from_env(cls, env_path: str | Path | None = None) -> RelayConfig:
        load_dotenv(env_path)

        url = os.getenv("TELEGRAM_RELAY_URL") or DEFAULT_RELAY_URL
        token = os.getenv("TELEGRAM_RELAY_TOKEN") or None
        if token is None:
            log.warning("TELEGRAM_RELAY_TOKEN is not set; relay authentication disabled")

        raw_timeout = os.getenv("TELEGRAM_RELAY_TIMEOUT", "").strip()
        timeout = DEFAULT_RELAY_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigError(
                    f"TELEGRAM_RELAY_TIMEOUT must be a number, got {raw_timeout!r}"
                ) from None
            if timeout <= 0:
                raise ConfigError("TELEGRAM_RELAY_TIMEOUT must be positive")

        return cls(url=url, token=token, timeout=timeout)


@dataclass(frozen=True)
class PluginConfig:
    relay: RelayConfig = field(default_factory=RelayConfig)
    project_dir: str = field(default_factory=os.getcwd)
    ai_base_url: str | None = None
    api_key: str | None = None

    @classmethod
    def from_env(cls, env_path: str | Path | None = None) -> PluginConfig:
        load_dotenv(env_path)

        project_dir = Path(os.getenv("SURGENT_PROJECT_DIR") or os.getcwd()).resolve()
        if not project_dir.is_dir():
            raise ConfigError(f"Project directory does not exist: {project_dir}")

        return cls(
            relay=RelayConfig.from_env(env_path),
            project_dir=str(project_dir),
            ai_base_url=os.getenv("SURGENT_AI_BASE_URL") or None,
            api_key=os.getenv("SURGENT_API_KEY") or None,
        )


@dataclass(frozen=True)
class BotConfig:
    bot_token: str
    webhook_url: str | None = None
    port: int = DEFAULT_BOT_PORT

    @classmethod
    def from_env(cls, env_path: str | Path | None = None) -> BotConfig:
        load_dotenv(env_path)

        token = os.getenv("BOT_TOKEN")
        if not token:
            raise ConfigError("BOT_TOKEN is not set")

        try:
            port = int(os.getenv("PORT", "")) or DEFAULT_BOT_PORT
        except ValueError:
            port = DEFAULT_BOT_PORT

        return cls(
            bot_token=token,
            webhook_url=(os.getenv("BOT_WEBHOOK_URL") or "").rstrip("/") or None,
            port=port,
        )


def _read_project_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError):
        log.debug("Could not read %s, treating as empty", path)
        return {}
    return data if isinstance(data, dict) else {}


def load_project_name(project_dir: str | Path) -> str:
    """Return the trimmed ``name`` from ``surgent.json``; raises ConfigError if missing."""
    return _project_name(_read_project_file(Path(project_dir) / PROJECT_FILE))


def _project_name(raw: dict[str, Any]) -> str:
    name = raw.get("name")
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        raise ConfigError(f'Missing "name" in {PROJECT_FILE}')
    return name


def load_project_config(project_dir: str | Path) -> ProjectConfig:
    """Load the dev process definition from ``surgent.json``.

    ``scripts.dev`` may be a single command or a list of commands:

        {"name": "my-bot", "scripts": {"dev": "bun run src/bot.ts"}}
        {"name": "my-bot", "scripts": {"dev": ["bun run api", "bun run worker"]}}

    Raises ConfigError when ``name`` or ``scripts.dev`` is missing.
    """
    raw = _read_project_file(Path(project_dir) / PROJECT_FILE)
    name = _project_name(raw)

    scripts = raw.get("scripts")
    dev = scripts.get("dev") if isinstance(scripts, dict) else None
    if not dev:
        raise ConfigError(f'Missing "scripts.dev" in {PROJECT_FILE}')

    commands = dev if isinstance(dev, list) else [dev]
    if not all(isinstance(cmd, str) and cmd.strip() for cmd in commands):
        raise ConfigError(f'"scripts.dev" in {PROJECT_FILE} must contain non-empty strings')

    return ProjectConfig(name=name, commands=list(commands))
