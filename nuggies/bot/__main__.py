"""
nuggies.bot.__main__ — Entry point for ``python -m nuggies.bot``
================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (soft settings).
3. Create the SQLAlchemy engine and ensure the ``users`` table exists.
4. Build the Gemini and Tenor clients.
5. Bundle everything into a BotContext and hand it to NuggiesBot.
6. Start the bot (blocking — runs the asyncio event loop).
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from nuggies.bot.core import NuggiesBot
from nuggies.config import load_config
from nuggies.context import BotContext
from nuggies.database.engine import create_db_engine, init_db
from nuggies.services.ai_client import GeminiClient
from nuggies.services.media_client import TenorClient

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("nuggies")

REQUIRED_ENV = ("DISCORD_TOKEN", "GEMINI_API_KEY", "TENOR_API_KEY", "DATABASE_URL")


def main() -> None:
    """Bootstrap and run the Nuggies bot."""

    # 1. Environment variables (secrets).
    load_dotenv()
    missing = [name for name in REQUIRED_ENV if not os.getenv(name)]
    if missing:
        logger.critical(
            "Missing environment variables: %s.  "
            "Copy .env.example → .env and fill them in.",
            ", ".join(missing),
        )
        sys.exit(1)

    # 2. Soft configuration.
    cfg = load_config(os.getenv("NUGGIES_CONFIG", "config.yaml"))
    logger.info("Config loaded — %s (reference zone %s)", cfg.bot_name, cfg.timezone)

    # 3. Database.
    engine = create_db_engine()
    init_db(engine)

    # 4. Upstream ports.
    ai = GeminiClient(
        os.environ["GEMINI_API_KEY"],
        model=cfg.gemini_model,
        timeout=cfg.upstream_timeout,
    )
    media = TenorClient(
        os.environ["TENOR_API_KEY"],
        default_url=cfg.default_gif_url,
        timeout=cfg.upstream_timeout,
    )

    # 5. Bot.
    bot = NuggiesBot(BotContext(cfg=cfg, engine=engine, ai=ai, media=media))

    # 6. Run (blocks until Ctrl+C or SIGTERM).
    logger.info("Starting Nuggies bot…")
    try:
        bot.run(os.environ["DISCORD_TOKEN"], log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
