"""
nuggies.bot.core — Bot Instance & Cog Loader
=============================================

**Why this file exists:**
Defines :class:`NuggiesBot`, a ``commands.Bot`` subclass that:

1. Carries the shared :class:`~nuggies.context.BotContext` (config, DB
   engine, AI and media ports) and the :class:`CommandRouter` so every Cog
   reaches them via ``self.bot.ctx`` / ``self.bot.router``.
2. Loads every Cog listed in :data:`EXTENSIONS`.
3. Syncs the slash-command tree on startup (guild-scoped for dev, global
   for production — controlled by the ``DEV_GUILD_ID`` env var).
4. Drains in-flight slash commands and closes HTTP clients on shutdown.

Each gateway event runs as its own task inside discord.py; nothing here
serializes unrelated events.
"""

from __future__ import annotations

import logging
import os

import discord
from discord.ext import commands

from nuggies.context import BotContext
from nuggies.services.router import CommandRouter

logger = logging.getLogger(__name__)

EXTENSIONS: list[str] = [
    "nuggies.bot.cogs.commands",
    "nuggies.bot.cogs.messages",
    "nuggies.bot.cogs.reactions",
]


class NuggiesBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state.

    Parameters
    ----------
    ctx:
        The :class:`BotContext` built in ``__main__``.
    """

    def __init__(self, ctx: BotContext) -> None:
        # Privileged intents (must enable in Developer Portal):
        #   MESSAGE_CONTENT — keyword triggers
        #   GUILD_MEMBERS   — member lookups for reaction roles
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.reactions = True
        intents.presences = False

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            description=f"{ctx.cfg.bot_name} — chat, translate, nuggets",
        )

        self.ctx = ctx
        self.router = CommandRouter(ctx)

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load Cog extensions; one broken Cog shouldn't take down the bot."""
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Bot is connected as %s (ID: %s)", self.user.name, self.user.id)

        try:
            dev_guild_id = os.getenv("DEV_GUILD_ID")
            if dev_guild_id:
                guild = discord.Object(id=int(dev_guild_id))
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.info("Synced %d commands to dev guild %s", len(synced), dev_guild_id)
            else:
                synced = await self.tree.sync()
                logger.info("Synced %d commands globally", len(synced))
        except discord.HTTPException:
            logger.exception("Error registering application commands")

    async def close(self) -> None:
        """Graceful shutdown — finish pending replies, close HTTP clients."""
        logger.info("Bot shutting down…")
        await self.router.drain()
        for port in (self.ctx.ai, self.ctx.media):
            aclose = getattr(port, "aclose", None)
            if aclose is not None:
                await aclose()
        await super().close()
