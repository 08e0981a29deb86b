"""
nuggies.services.role_sync_service — Reaction Roles on Discord
===============================================================

The platform-facing half of the reaction-role flow.  Decisions come from
:func:`nuggies.engine.roles.plan_reaction`; this module does the lookups
and the grant/revoke calls around it.

Failure isolation: every lookup or role call that Discord rejects is logged
and turns the event into a no-op.  Nothing here raises into the gateway
dispatcher.  Roles are **never** created from a reaction; only the
owner-triggered :func:`provision_binding` creates roles.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from nuggies.engine.roles import (
    ReactionSignal,
    RoleAction,
    RoleActionType,
    RoleBinding,
    plan_reaction,
    render_binding_message,
)
from nuggies.errors import ConfigurationMissing

if TYPE_CHECKING:
    from discord.abc import Messageable
    from discord.ext import commands

logger = logging.getLogger(__name__)

_LOOKUP_ERRORS = (discord.NotFound, discord.Forbidden, discord.HTTPException)


# ---------------------------------------------------------------------------
# Lookups (each returns None on failure)
# ---------------------------------------------------------------------------
async def _reactor_is_bot(
    bot: commands.Bot, payload: discord.RawReactionActionEvent
) -> bool | None:
    if payload.member is not None:
        return payload.member.bot
    user = bot.get_user(payload.user_id)
    if user is None:
        try:
            user = await bot.fetch_user(payload.user_id)
        except _LOOKUP_ERRORS as exc:
            logger.warning("Could not fetch reacting user %s: %s", payload.user_id, exc)
            return None
    return user.bot


async def _fetch_message(
    bot: commands.Bot, payload: discord.RawReactionActionEvent
) -> discord.Message | None:
    try:
        channel = bot.get_channel(payload.channel_id) or await bot.fetch_channel(
            payload.channel_id
        )
        return await channel.fetch_message(payload.message_id)  # type: ignore[union-attr]
    except _LOOKUP_ERRORS as exc:
        logger.warning("Could not fetch message %s: %s", payload.message_id, exc)
        return None


async def _fetch_member(
    guild: discord.Guild, payload: discord.RawReactionActionEvent
) -> discord.Member | None:
    if payload.member is not None:
        return payload.member
    member = guild.get_member(payload.user_id)
    if member is not None:
        return member
    try:
        return await guild.fetch_member(payload.user_id)
    except _LOOKUP_ERRORS as exc:
        logger.error("Could not fetch member %s: %s", payload.user_id, exc)
        return None


async def _find_role(guild: discord.Guild, role_name: str) -> discord.Role | None:
    try:
        roles = await guild.fetch_roles()
    except _LOOKUP_ERRORS as exc:
        logger.error("Could not fetch roles for guild %s: %s", guild.id, exc)
        return None
    return discord.utils.get(roles, name=role_name)


# ---------------------------------------------------------------------------
# Reaction → role
# ---------------------------------------------------------------------------
async def sync_reaction(
    bot: commands.Bot,
    payload: discord.RawReactionActionEvent,
    added: bool,
) -> RoleAction | None:
    """Apply the reaction-role binding for one add/remove event.

    Returns the action actually applied, or ``None`` for every no-op path
    (unbound emoji, foreign message, missing role, platform error).
    """
    if payload.guild_id is None or bot.user is None:
        return None

    reactor_is_bot = await _reactor_is_bot(bot, payload)
    if reactor_is_bot is None or reactor_is_bot:
        return None

    message = await _fetch_message(bot, payload)
    if message is None:
        return None

    signal = ReactionSignal(
        emoji_name=payload.emoji.name if payload.emoji.is_custom_emoji() else None,
        reactor_is_bot=reactor_is_bot,
        message_author_id=message.author.id,
        message_content=message.content,
        bot_user_id=bot.user.id,
        added=added,
    )
    action = plan_reaction(signal)
    if action is None:
        return None

    guild = bot.get_guild(payload.guild_id)
    if guild is None:
        logger.warning("Guild %s not in cache; skipping reaction role", payload.guild_id)
        return None

    member = await _fetch_member(guild, payload)
    if member is None:
        return None

    role = await _find_role(guild, action.role_name)
    if role is None:
        logger.warning(
            "Role '%s' does not exist in guild %s; run the setup trigger first",
            action.role_name, guild.id,
        )
        return None

    logger.info(
        "User '%s' reacted with '%s' for role '%s'",
        member.name, signal.emoji_name, role.name,
    )

    has_role = any(r.id == role.id for r in member.roles)
    try:
        if action.action is RoleActionType.GRANT:
            if not has_role:
                await member.add_roles(role, reason=f"Reaction role ({action.binding})")
            logger.info("Assigned role '%s' to '%s'", role.name, member.name)
        else:
            if has_role:
                await member.remove_roles(role, reason=f"Reaction role ({action.binding})")
            logger.info("Removed role '%s' from '%s'", role.name, member.name)
    except discord.Forbidden:
        logger.error(
            "Failed to %s role '%s' for '%s'. Check permissions.",
            "assign" if added else "remove", role.name, member.name,
        )
        return None
    except discord.HTTPException as exc:
        logger.error("Role call for '%s' on '%s' failed: %s", role.name, member.name, exc)
        return None

    return action


# ---------------------------------------------------------------------------
# Owner-triggered setup
# ---------------------------------------------------------------------------
async def get_or_create_role(
    guild: discord.Guild,
    role_name: str,
    created: list[discord.Role] | None = None,
) -> discord.Role | None:
    """Return the role called *role_name*, creating it (mentionable) if absent.

    A newly created role is also appended to *created*, when given.
    """
    try:
        roles = await guild.fetch_roles()
    except _LOOKUP_ERRORS as exc:
        logger.error("Could not fetch roles for guild %s: %s", guild.id, exc)
        return None

    role = discord.utils.get(roles, name=role_name)
    if role is not None:
        logger.debug("Found existing role: '%s'", role_name)
        return role

    logger.info("Role '%s' not found. Creating it now...", role_name)
    try:
        role = await guild.create_role(
            name=role_name, mentionable=True, reason="Nuggies: reaction-role setup"
        )
    except (discord.Forbidden, discord.HTTPException) as exc:
        logger.error("Could not create role '%s': %s", role_name, exc)
        return None
    logger.info("Created role: '%s'", role.name)
    if created is not None:
        created.append(role)
    return role


async def _delete_roles(roles: list[discord.Role]) -> None:
    for role in roles:
        try:
            await role.delete(reason="Nuggies: reaction-role setup aborted")
            logger.info("Rolled back role '%s'", role.name)
        except discord.HTTPException as exc:
            logger.error("Could not roll back role '%s': %s", role.name, exc)


async def provision_binding(
    guild: discord.Guild,
    channel: Messageable,
    binding: RoleBinding,
) -> discord.Message:
    """Post the bot-authored trigger message for *binding*.

    Order matters: every custom emoji is resolved before any role is
    created or any message sent, so a missing emoji aborts cleanly.  Roles
    created by this call are deleted again if a later role or the send
    fails, so an aborted setup leaves the guild as it found it.

    Raises
    ------
    ConfigurationMissing
        A required emoji is missing, or a role could not be found/created.
    """
    try:
        guild_emojis = await guild.fetch_emojis()
    except _LOOKUP_ERRORS as exc:
        raise ConfigurationMissing(f"could not fetch emojis for guild {guild.id}: {exc}") from exc

    emojis: dict[str, discord.Emoji] = {}
    for name in binding.emoji_names:
        emoji = discord.utils.get(guild_emojis, name=name)
        if emoji is None:
            raise ConfigurationMissing(f"emoji ':{name}:' not found on the server")
        emojis[name] = emoji

    created: list[discord.Role] = []
    for role_name in binding.role_names:
        if await get_or_create_role(guild, role_name, created) is None:
            await _delete_roles(created)
            raise ConfigurationMissing(f"failed to get or create role '{role_name}'")

    content = render_binding_message(binding, {n: str(e) for n, e in emojis.items()})
    try:
        message = await channel.send(content)
    except discord.HTTPException:
        await _delete_roles(created)
        raise
    logger.info("Sent %s role assignment message %s", binding.kind, message.id)

    for emoji in emojis.values():
        try:
            await message.add_reaction(emoji)
        except discord.HTTPException as exc:
            logger.error("Failed to react with %s: %s", emoji, exc)
    return message
