"""
nuggies.services.triggers — Plain-Message Triggers
===================================================

An explicit, ordered list of ``(predicate, handler)`` pairs.  For each
non-bot message the predicates run top to bottom and the **first** match
wins; nothing else fires for that message.

Order:
1. ``assignrole:gender``   — owner only, posts the pronoun role message
2. ``assignrole:fcevents`` — owner only, posts the event role message
3. ``istanbul``            — anywhere in the body, case-insensitive
4. ``nuggies``             — anywhere in the body, short persona reply
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import discord

from nuggies.constants import TRIGGER_FALLBACK
from nuggies.engine.roles import EVENT_BINDING, PRONOUN_BINDING, RoleBinding
from nuggies.errors import ConfigurationMissing, UpstreamUnavailable
from nuggies.services.role_sync_service import provision_binding

if TYPE_CHECKING:
    from nuggies.context import BotContext

logger = logging.getLogger(__name__)

Predicate = Callable[[discord.Message, "BotContext"], bool]
TriggerHandler = Callable[[discord.Message, "BotContext"], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class Trigger:
    name: str
    predicate: Predicate
    handler: TriggerHandler


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------
def _owner_command(command: str) -> Predicate:
    def predicate(message: discord.Message, ctx: BotContext) -> bool:
        return (
            message.guild is not None
            and message.author.id == ctx.cfg.owner_id
            and message.content == command
        )
    return predicate


def _keyword(word: str) -> Predicate:
    def predicate(message: discord.Message, ctx: BotContext) -> bool:
        return word in message.content.lower()
    return predicate


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------
def _provision(binding: RoleBinding) -> TriggerHandler:
    async def handler(message: discord.Message, ctx: BotContext) -> None:
        logger.info("Owner triggered %s role setup in guild %s", binding.kind, message.guild.id)
        try:
            await provision_binding(message.guild, message.channel, binding)
        except ConfigurationMissing as exc:
            logger.error("Role setup (%s) aborted: %s", binding.kind, exc)
            return
        except discord.HTTPException as exc:
            logger.error("Failed to send %s role assignment message: %s", binding.kind, exc)
            return

        try:
            await message.delete()
        except discord.HTTPException as exc:
            logger.warning("Could not delete setup command message: %s", exc)
    return handler


async def _constantinople(message: discord.Message, ctx: BotContext) -> None:
    image = Path(ctx.cfg.constantinople_image)
    if image.exists():
        await message.channel.send("That's Constantinople!", file=discord.File(image))
    else:
        await message.channel.send("That's Constantinople! (but I couldn't find the image)")


async def _persona_reply(message: discord.Message, ctx: BotContext) -> None:
    prompt = (
        f"{ctx.cfg.persona_prompt}\n"
        f"Respond to the following message as {ctx.cfg.bot_name} and keep the "
        f"response at one or 2 sentences:\n\n{message.content}"
    )
    async with message.channel.typing():
        try:
            response = await ctx.ai.complete(prompt)
        except UpstreamUnavailable:
            response = TRIGGER_FALLBACK
    await message.channel.send(response[:2000])


TRIGGERS: tuple[Trigger, ...] = (
    Trigger("assignrole:gender", _owner_command("assignrole:gender"), _provision(PRONOUN_BINDING)),
    Trigger("assignrole:fcevents", _owner_command("assignrole:fcevents"), _provision(EVENT_BINDING)),
    Trigger("istanbul", _keyword("istanbul"), _constantinople),
    Trigger("nuggies", _keyword("nuggies"), _persona_reply),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def match_trigger(
    message: discord.Message,
    ctx: BotContext,
    triggers: Sequence[Trigger] = TRIGGERS,
) -> Trigger | None:
    """First trigger whose predicate accepts *message*, or ``None``."""
    if message.author.bot:
        return None
    for trigger in triggers:
        if trigger.predicate(message, ctx):
            return trigger
    return None


async def handle_message(
    message: discord.Message,
    ctx: BotContext,
    triggers: Sequence[Trigger] = TRIGGERS,
) -> str | None:
    """Run the first matching trigger; return its name (``None`` if none fired)."""
    trigger = match_trigger(message, ctx, triggers)
    if trigger is None:
        return None
    logger.info("Trigger '%s' fired for message %s", trigger.name, message.id)
    await trigger.handler(message, ctx)
    return trigger.name
