"""
nuggies.services.router — Slash-Command Dispatch
=================================================

Stateless dispatch table from command name to an effect class:

==================  ==============  ==========================================
command             effect          fallback on upstream failure
==================  ==============  ==========================================
``ask``             AI_CHAT         ``ASK_FALLBACK``
``nuggies``         AI_CHAT         ``CHAT_FALLBACK`` (persona chat)
``translate``       TRANSLATE       ``TRANSLATE_FALLBACK``
``fox``             MEDIA_SEARCH    the configured default GIF URL
``daily``           ECONOMY         ``ECONOMY_FALLBACK``
``nuggetbox``       ECONOMY         ``ECONOMY_FALLBACK``
``slots``           ECONOMY         ``ECONOMY_FALLBACK``
``help``            STATIC          —
==================  ==============  ==========================================

Every invocation is a two-phase deferred reply:

1. :meth:`DeferredReply.defer` — acknowledge inside Discord's 3-second window.
2. A per-command :class:`asyncio.Task` computes the content with its own
   error boundary, then :meth:`DeferredReply.finalize` edits the response.

The gateway loop only awaits phase 1; phase 2 always finalizes, with a fixed
fallback string if the downstream call failed or timed out.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from nuggies.constants import (
    ASK_FALLBACK,
    CHAT_FALLBACK,
    ECONOMY_FALLBACK,
    HELP_TEXT,
    MISSING_CHAT,
    MISSING_QUESTION,
    MISSING_TRANSLATE,
    TRANSLATE_FALLBACK,
    UNKNOWN_COMMAND,
)
from nuggies.database.engine import run_db
from nuggies.errors import UpstreamUnavailable
from nuggies.services.economy_service import (
    claim_daily,
    get_balance,
    play_slots,
    run_for_user,
)
from nuggies.services.replies import format_balance, format_claim, format_slots

if TYPE_CHECKING:
    import discord

    from nuggies.context import BotContext

logger = logging.getLogger(__name__)

Options = Mapping[str, Any]
Handler = Callable[[Options, int], Awaitable[str]]


class EffectClass(enum.StrEnum):
    AI_CHAT = "ai-chat"
    TRANSLATE = "translate"
    MEDIA_SEARCH = "media-search"
    ECONOMY = "economy"
    STATIC = "static"


# Logical names from the command surface → registered slash-command names
ALIASES: dict[str, str] = {
    "chat": "nuggies",
    "media-search": "fox",
    "balance": "nuggetbox",
}


# ---------------------------------------------------------------------------
# Two-phase reply port
# ---------------------------------------------------------------------------
class DeferredReply(Protocol):
    async def defer(self) -> None: ...

    async def finalize(self, content: str) -> None: ...


class InteractionReply:
    """:class:`DeferredReply` backed by a live ``discord.Interaction``."""

    def __init__(self, interaction: discord.Interaction) -> None:
        self.interaction = interaction

    async def defer(self) -> None:
        await self.interaction.response.defer(thinking=True)

    async def finalize(self, content: str) -> None:
        await self.interaction.edit_original_response(content=content[:2000])


@dataclass(frozen=True, slots=True)
class Route:
    effect: EffectClass
    handler: Handler
    fallback: str
    # Upstream calls get a deadline; DB work does not, because a cancelled
    # await cannot stop a worker thread that is mid-commit.
    timed: bool = True


def _text_option(options: Options, name: str) -> str | None:
    value = options.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------
class CommandRouter:
    def __init__(self, ctx: BotContext) -> None:
        self.ctx = ctx
        self._tasks: set[asyncio.Task] = set()
        self.routes: dict[str, Route] = {
            "ask": Route(EffectClass.AI_CHAT, self._ask, ASK_FALLBACK),
            "nuggies": Route(EffectClass.AI_CHAT, self._chat, CHAT_FALLBACK),
            "translate": Route(EffectClass.TRANSLATE, self._translate, TRANSLATE_FALLBACK),
            "fox": Route(EffectClass.MEDIA_SEARCH, self._fox, ctx.cfg.default_gif_url),
            "daily": Route(EffectClass.ECONOMY, self._daily, ECONOMY_FALLBACK, timed=False),
            "nuggetbox": Route(EffectClass.ECONOMY, self._balance, ECONOMY_FALLBACK, timed=False),
            "slots": Route(EffectClass.ECONOMY, self._slots, ECONOMY_FALLBACK, timed=False),
            "help": Route(EffectClass.STATIC, self._help, HELP_TEXT, timed=False),
        }

    def route_for(self, name: str) -> Route | None:
        return self.routes.get(ALIASES.get(name, name))

    # -------------------------------------------------------------------
    # Phase 0: compute content (no gateway involved)
    # -------------------------------------------------------------------
    async def resolve(self, name: str, options: Options, user_id: int) -> str:
        """Compute the final reply text for one command invocation.

        Never raises: unknown names, upstream failures and timeouts all map
        to fixed strings.
        """
        route = self.route_for(name)
        if route is None:
            logger.info("Unknown command %r from %s", name, user_id)
            return UNKNOWN_COMMAND

        try:
            call = route.handler(options, user_id)
            if route.timed:
                return await asyncio.wait_for(call, timeout=self.ctx.cfg.upstream_timeout)
            return await call
        except UpstreamUnavailable:
            return route.fallback
        except TimeoutError:
            logger.warning("/%s timed out after %.0fs", name, self.ctx.cfg.upstream_timeout)
            return route.fallback
        except Exception:
            logger.exception("/%s failed for user %s", name, user_id)
            return route.fallback

    # -------------------------------------------------------------------
    # Phases 1 + 2: acknowledge, then finalize out-of-band
    # -------------------------------------------------------------------
    async def dispatch(
        self,
        reply: DeferredReply,
        name: str,
        options: Options,
        user_id: int,
    ) -> asyncio.Task[None]:
        """Defer now; schedule the work; return the finalizing task."""
        logger.info("Slash command /%s from %s", name, user_id)
        try:
            await reply.defer()
        except Exception:
            logger.exception("Could not defer /%s", name)

        task = asyncio.create_task(
            self._run_and_finalize(reply, name, options, user_id),
            name=f"cmd:{name}:{user_id}",
        )
        # Keep a strong reference until done; the loop only holds weak ones.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_and_finalize(
        self,
        reply: DeferredReply,
        name: str,
        options: Options,
        user_id: int,
    ) -> None:
        content = await self.resolve(name, options, user_id)
        try:
            await reply.finalize(content)
        except Exception:
            logger.exception("Could not edit interaction response for /%s", name)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every in-flight command (used on shutdown)."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # -------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------
    async def _chat(self, options: Options, user_id: int) -> str:
        message = _text_option(options, "message")
        if message is None:
            return MISSING_CHAT
        prompt = (
            f"{self.ctx.cfg.persona_prompt}\n"
            f"Respond to the following message as {self.ctx.cfg.bot_name}:\n\n{message}"
        )
        response = await self.ctx.ai.complete(prompt)
        return f"<@{user_id}> asked: {message}\n\n{response}"

    async def _ask(self, options: Options, user_id: int) -> str:
        question = _text_option(options, "question")
        if question is None:
            return MISSING_QUESTION
        response = await self.ctx.ai.complete(question)
        return f"<@{user_id}> asked: {question}\n\n{response}"

    async def _translate(self, options: Options, user_id: int) -> str:
        language = _text_option(options, "language")
        text = _text_option(options, "text")
        if language is None or text is None:
            return MISSING_TRANSLATE
        prompt = (
            f"Translate the following text to {language} exactly "
            f"and only output the translated text:\n\n{text}"
        )
        return await self.ctx.ai.complete(prompt)

    async def _fox(self, options: Options, user_id: int) -> str:
        return await self.ctx.media.random_gif(self.ctx.cfg.gif_query, self.ctx.rng)

    async def _daily(self, options: Options, user_id: int) -> str:
        result = await run_for_user(
            user_id, claim_daily, self.ctx.engine, user_id,
            today=self.ctx.today(), rng=self.ctx.rng,
        )
        return format_claim(result)

    async def _balance(self, options: Options, user_id: int) -> str:
        balance = await run_db(get_balance, self.ctx.engine, user_id)
        return format_balance(balance)

    async def _slots(self, options: Options, user_id: int) -> str:
        result = await run_for_user(
            user_id, play_slots, self.ctx.engine, user_id, rng=self.ctx.rng
        )
        return format_slots(result, self.ctx.rng)

    async def _help(self, options: Options, user_id: int) -> str:
        return HELP_TEXT
