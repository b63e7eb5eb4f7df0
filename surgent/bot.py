"""Minimal Telegram bot served over a webhook."""

from __future__ import annotations

import logging

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route
from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from .config import BotConfig

log = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

WELCOME_TEXT = "Welcome! Up and running."
HELP_TEXT = "Available commands:\n/start - Start the bot\n/help - Show help"
FALLBACK_TEXT = "Got your message!"


async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.effective_message.reply_text(WELCOME_TEXT)


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.effective_message.reply_text(HELP_TEXT)


async def on_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.effective_message.reply_text(FALLBACK_TEXT)


def build_application(token: str) -> Application:
    # No updater: updates arrive through the webhook route, not polling.
    application = Application.builder().token(token).updater(None).build()
    application.add_handler(CommandHandler("start", cmd_start))
    application.add_handler(CommandHandler("help", cmd_help))
    application.add_handler(MessageHandler(filters.UpdateType.MESSAGE, on_message))
    return application


def create_webhook_app(application: Application) -> Starlette:
    """HTTP front: POST /webhook feeds the bot, everything else answers OK."""

    async def webhook(request: Request) -> Response:
        payload = await request.json()
        await application.update_queue.put(Update.de_json(payload, application.bot))
        return Response()

    async def health(request: Request) -> Response:
        return PlainTextResponse("OK")

    return Starlette(
        routes=[
            Route(WEBHOOK_PATH, webhook, methods=["POST"]),
            Route("/{path:path}", health, methods=ALL_METHODS),
        ]
    )


async def serve(config: BotConfig) -> None:
    application = build_application(config.bot_token)
    server = uvicorn.Server(
        uvicorn.Config(
            create_webhook_app(application),
            host="0.0.0.0",
            port=config.port,
            log_level="info",
        )
    )

    async with application:
        await application.start()
        if config.webhook_url:
            await application.bot.set_webhook(f"{config.webhook_url}{WEBHOOK_PATH}")
            log.info("Webhook set to %s%s", config.webhook_url, WEBHOOK_PATH)

        log.info("Bot server running on port %d", config.port)
        await server.serve()
        await application.stop()
