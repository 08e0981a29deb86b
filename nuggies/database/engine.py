"""
nuggies.database.engine — Engine, Sessions and the Thread Hop
==============================================================

Nuggies keeps its ledger in one ``users`` table.  The service functions
that read and write it are plain synchronous SQLAlchemy code; handlers
running on the gateway loop reach them through :func:`run_db`, which
executes the call on a worker thread and awaits the result.

A session lives exactly as long as one service call.  It is opened,
commits or rolls back, and is closed before control returns to the loop,
so no connection is ever checked out across an ``await``.  Writes that
change a balance go one level higher, through
:func:`nuggies.services.economy_service.run_for_user`, which adds the
per-user lock around ``run_db``.

Usage::

    from nuggies.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # DATABASE_URL from .env
    init_db(engine)

    balance = await run_db(get_balance, engine, user_id)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from nuggies.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` from the ``DATABASE_URL`` env var.

    The pool is sized for a single small bot, independent of how many
    gateway events are in flight:
    * ``pool_size=5`` — five persistent connections.
    * ``max_overflow=5`` — up to 5 extra connections under load.
    * ``pool_timeout=10`` — fail after 10 s if no connection is available.
    * ``pool_recycle=3600`` — recycle connections after 1 hour.

    Raises
    ------
    RuntimeError
        If neither *url* nor ``DATABASE_URL`` is set.
    """
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and set a valid PostgreSQL URL."
        )

    engine = create_engine(
        url,
        echo=False,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,   # Reconnect stale connections automatically
        pool_timeout=10,
        pool_recycle=3600,
    )
    logger.info("Database engine created → %s", engine.url.host)
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create the ``users`` table if it is absent.

    Safe to call on every startup — ``CREATE TABLE IF NOT EXISTS`` under
    the hood.  Production schemas are also tracked by Alembic
    (``alembic upgrade head``); ``create_all`` covers fresh dev databases.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine) -> Iterator[Session]:
    """One ledger transaction: commit when the block exits cleanly, roll
    back and re-raise when it does not.

    Loaded attributes stay readable after the commit, so services may
    return values taken from ORM rows after the block has closed::

        with get_session(engine) as session:
            account = session.get(Account, user_id)
        return account.balance
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Await ``func(*args, **kwargs)`` evaluated on the loop's default
    executor.

    Used for read-only service calls such as ``get_balance``.  Exceptions
    raised by *func* surface at the ``await``.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
