"""
nuggies.context — Explicit dependencies for every handler
==========================================================

One :class:`BotContext` is built at startup and handed to the router, the
message triggers and the cogs.  Nothing reads API keys or the DB engine from
module globals.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Protocol

from nuggies.engine.daily import local_today

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from nuggies.config import NuggiesConfig


class TextPort(Protocol):
    async def complete(self, prompt: str) -> str: ...


class MediaPort(Protocol):
    async def random_gif(self, query: str, rng: random.Random | None = None) -> str: ...


@dataclass
class BotContext:
    cfg: NuggiesConfig
    engine: Engine
    ai: TextPort
    media: MediaPort
    rng: random.Random = field(default_factory=random.Random)

    def today(self) -> date:
        """Today's date in the configured reference zone."""
        return local_today(self.cfg.tz)
