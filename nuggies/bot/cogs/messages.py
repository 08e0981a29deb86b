"""
nuggies.bot.cogs.messages — Plain-Message Triggers
===================================================

Feeds every gateway MESSAGE_CREATE into
:func:`nuggies.services.triggers.handle_message`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from nuggies.services.triggers import handle_message

if TYPE_CHECKING:
    from nuggies.bot.core import NuggiesBot

logger = logging.getLogger(__name__)


class Messages(commands.Cog, name="Messages"):
    """Keyword replies and owner-only setup triggers."""

    def __init__(self, bot: NuggiesBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return
        try:
            await handle_message(message, self.bot.ctx)
        except Exception:
            logger.exception(
                "Error processing message %s from user %s",
                message.id, message.author.id,
            )


async def setup(bot: NuggiesBot) -> None:
    await bot.add_cog(Messages(bot))
