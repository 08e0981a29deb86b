"""
nuggies.bot.cogs.reactions — Reaction-Role Sync
================================================

Listens for raw reaction add/remove events (raw, so reactions on messages
posted before the last restart still work) and hands them to
:func:`nuggies.services.role_sync_service.sync_reaction`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from nuggies.services.role_sync_service import sync_reaction

if TYPE_CHECKING:
    from nuggies.bot.core import NuggiesBot

logger = logging.getLogger(__name__)


class Reactions(commands.Cog, name="Reactions"):
    """Grants and revokes roles from reactions on the bot's role messages."""

    def __init__(self, bot: NuggiesBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        await self._handle(payload, added=True)

    @commands.Cog.listener()
    async def on_raw_reaction_remove(self, payload: discord.RawReactionActionEvent) -> None:
        await self._handle(payload, added=False)

    async def _handle(self, payload: discord.RawReactionActionEvent, *, added: bool) -> None:
        logger.debug(
            "Gateway event: REACTION_%s from user %s on message %s",
            "ADD" if added else "REMOVE", payload.user_id, payload.message_id,
        )
        try:
            await sync_reaction(self.bot, payload, added)
        except Exception:
            logger.exception(
                "Error processing reaction on message %s from user %s",
                payload.message_id, payload.user_id,
            )


async def setup(bot: NuggiesBot) -> None:
    await bot.add_cog(Reactions(bot))
