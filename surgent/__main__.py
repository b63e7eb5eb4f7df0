import asyncio
import logging

from .bot import serve
from .config import BotConfig

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)

config = BotConfig.from_env()
asyncio.run(serve(config))
