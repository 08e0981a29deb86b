"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import random
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from nuggies.config import NuggiesConfig
from nuggies.context import BotContext
from nuggies.database.models import Account, Base

OWNER_ID = 241614046913101825


class RiggedRandom(random.Random):
    """A seeded generator whose slot tier roll (and jackpot symbol) can be pinned.

    ``roll=None`` leaves the tier roll random; ``jackpot_symbol=None`` leaves
    the weighted jackpot pick random.
    """

    roll: int | None = None
    jackpot_symbol: str | None = None

    def randint(self, a: int, b: int) -> int:
        if (a, b) == (1, 100) and self.roll is not None:
            return self.roll
        return super().randint(a, b)

    def choices(self, population, weights=None, *, cum_weights=None, k=1):
        if self.jackpot_symbol is not None:
            return [self.jackpot_symbol] * k
        return super().choices(population, weights, cum_weights=cum_weights, k=k)


def rigged(roll: int | None = None, jackpot_symbol: str | None = None, seed: int = 7) -> RiggedRandom:
    rng = RiggedRandom(seed)
    rng.roll = roll
    rng.jackpot_symbol = jackpot_symbol
    return rng


@pytest.fixture
def db_engine() -> Engine:
    """An in-memory SQLite engine with the ``users`` table.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` inside ``run_db``).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def seed_account(engine: Engine, user_id: int, balance: int, last_claim_date=None) -> None:
    with Session(engine) as session:
        session.add(Account(user_id=user_id, balance=balance, last_claim_date=last_claim_date))
        session.commit()


def read_account(engine: Engine, user_id: int) -> Account | None:
    with Session(engine, expire_on_commit=False) as session:
        return session.get(Account, user_id)


@pytest.fixture
def cfg(tmp_path) -> NuggiesConfig:
    return NuggiesConfig(
        bot_name="Nuggies",
        owner_id=OWNER_ID,
        timezone="Europe/Berlin",
        upstream_timeout=2.0,
        constantinople_image=str(tmp_path / "constantinople.png"),
    )


@pytest.fixture
def ctx(cfg, db_engine) -> BotContext:
    """A BotContext with mocked AI and media ports."""
    ai = AsyncMock()
    ai.complete.return_value = "Skål!"
    media = AsyncMock()
    media.random_gif.return_value = "https://media.tenor.com/abc/fox.gif"
    return BotContext(cfg=cfg, engine=db_engine, ai=ai, media=media, rng=rigged(seed=3))
