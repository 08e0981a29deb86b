"""
nuggies.bot.cogs.commands — Slash-Command Surface
==================================================

Registers the public slash commands.  Each callback only forwards the
interaction to :class:`~nuggies.services.router.CommandRouter`, which
defers, computes out-of-band and edits the response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import discord
from discord import app_commands
from discord.ext import commands

from nuggies.constants import SLOTS_ANTE
from nuggies.services.router import InteractionReply

if TYPE_CHECKING:
    from nuggies.bot.core import NuggiesBot


class SlashCommands(commands.Cog, name="Commands"):
    """AI chat, translation, fox GIFs and the nugget economy."""

    def __init__(self, bot: NuggiesBot) -> None:
        self.bot = bot

    async def _dispatch(
        self, interaction: discord.Interaction, name: str, **options: Any
    ) -> None:
        await self.bot.router.dispatch(
            InteractionReply(interaction), name, options, interaction.user.id
        )

    @app_commands.command(name="nuggies", description="Chat with Nuggies AI")
    @app_commands.describe(message="Your message to Nuggies")
    async def nuggies(self, interaction: discord.Interaction, message: str) -> None:
        await self._dispatch(interaction, "nuggies", message=message)

    @app_commands.command(name="ask", description="Ask the AI a question")
    @app_commands.describe(question="Your question for the AI")
    async def ask(self, interaction: discord.Interaction, question: str) -> None:
        await self._dispatch(interaction, "ask", question=question)

    @app_commands.command(name="fox", description="Get a random fox GIF")
    async def fox(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, "fox")

    @app_commands.command(name="translate", description="Translate text to a specified language")
    @app_commands.describe(
        language="The language to translate to (e.g., 'French')",
        text="The text to translate",
    )
    async def translate(
        self, interaction: discord.Interaction, language: str, text: str
    ) -> None:
        await self._dispatch(interaction, "translate", language=language, text=text)

    @app_commands.command(name="daily", description="Claim your daily nuggets")
    async def daily(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, "daily")

    @app_commands.command(name="nuggetbox", description="Check your personal amount of nuggets")
    async def nuggetbox(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, "nuggetbox")

    @app_commands.command(
        name="slots", description=f"Spend {SLOTS_ANTE} nuggets for a chance to win big!"
    )
    async def slots(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, "slots")

    @app_commands.command(name="help", description="What can Nuggies do?")
    async def help(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, "help")


async def setup(bot: NuggiesBot) -> None:
    await bot.add_cog(SlashCommands(bot))
