"""
nuggies.services.economy_service — Nugget Ledger Transitions
=============================================================

Shared service module for every balance-changing operation.  All functions
are **synchronous** and open their own short-lived session; call them from
async code through :func:`run_for_user`.

Two layers keep per-user read-modify-write atomic:

* :func:`run_for_user` holds a per-user :class:`KeyedLock` on the event
  loop before handing the work to a thread, so queued calls for one user
  wait as coroutines and never tie up executor threads that other users
  need;
* the writes themselves are guarded conditional UPDATEs
  (``WHERE balance >= ante`` / ``WHERE last_claim_date <> today``), so the
  database refuses a double-spend or double-claim even if a second bot
  process races this one.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, ParamSpec, TypeVar
from zoneinfo import ZoneInfo

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from nuggies.constants import DEFAULT_TIMEZONE, SLOTS_ANTE
from nuggies.database.engine import get_session, run_db
from nuggies.database.models import Account
from nuggies.engine.daily import ClaimResult, can_claim, draw_daily_reward, local_today
from nuggies.engine.slots import SlotOutcome, spin

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Per-user serialization
# ---------------------------------------------------------------------------
class KeyedLock:
    """One :class:`asyncio.Lock` per key, dropped once nobody holds it.

    Waiters park on the event loop.  Only the holder occupies a ``run_db``
    worker thread, so a burst from one user cannot starve the executor.
    """

    def __init__(self) -> None:
        # key → [lock, number of holders + waiters]
        self._entries: dict[int, list] = {}

    @asynccontextmanager
    async def hold(self, key: int) -> AsyncIterator[None]:
        entry = self._entries.setdefault(key, [asyncio.Lock(), 0])
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


_user_locks = KeyedLock()

P = ParamSpec("P")
T = TypeVar("T")


async def run_for_user(
    user_id: int, func: Callable[P, T], *args: P.args, **kwargs: P.kwargs
) -> T:
    """``run_db(func, ...)`` while holding *user_id*'s lock.

    Every balance-changing call from the bot goes through here.
    """
    async with _user_locks.hold(user_id):
        return await run_db(func, *args, **kwargs)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class SlotsResult:
    """Outcome of one ``/slots`` attempt.

    Exactly one of ``outcome``, ``no_account`` or ``insufficient_funds`` is
    meaningful.  ``balance`` is the balance after the attempt (``None`` only
    when there is no account).
    """

    outcome: SlotOutcome | None = None
    balance: int | None = None
    no_account: bool = False
    insufficient_funds: bool = False

    @property
    def played(self) -> bool:
        return self.outcome is not None


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def get_balance(engine: Engine, user_id: int) -> int | None:
    """Return the user's balance, or ``None`` if they have no account yet.

    ``None`` is deliberately distinct from ``0``.
    """
    with get_session(engine) as session:
        account = session.get(Account, user_id)
        return account.balance if account is not None else None


# ---------------------------------------------------------------------------
# Daily claim
# ---------------------------------------------------------------------------
def _claim_in_session(
    session: Session,
    user_id: int,
    today: date,
    rng: random.Random | None,
) -> ClaimResult:
    account = session.get(Account, user_id)

    if account is None:
        amount = draw_daily_reward(rng)
        session.add(Account(user_id=user_id, balance=amount, last_claim_date=today))
        session.flush()  # IntegrityError here if another process inserted first
        logger.info("Daily: created account %s with first-time bonus %d", user_id, amount)
        return ClaimResult(amount=amount, new_balance=amount, first_time=True)

    if not can_claim(account.last_claim_date, today):
        return ClaimResult(amount=0, new_balance=account.balance, already_claimed=True)

    amount = draw_daily_reward(rng)
    row = session.execute(
        update(Account)
        .where(
            Account.user_id == user_id,
            or_(Account.last_claim_date.is_(None), Account.last_claim_date != today),
        )
        .values(balance=Account.balance + amount, last_claim_date=today)
        .returning(Account.balance)
        .execution_options(synchronize_session=False)
    ).first()
    if row is None:
        # Another writer claimed between our read and the guarded UPDATE.
        session.refresh(account)
        return ClaimResult(amount=0, new_balance=account.balance, already_claimed=True)

    logger.info("Daily: %s claimed %d (balance %d)", user_id, amount, row[0])
    return ClaimResult(amount=amount, new_balance=row[0])


def claim_daily(
    engine: Engine,
    user_id: int,
    *,
    today: date | None = None,
    rng: random.Random | None = None,
) -> ClaimResult:
    """Claim today's nuggets — at most once per reference-zone calendar day.

    *today* is the caller's "now" in the reference zone (see
    :func:`nuggies.engine.daily.local_today`); it defaults to the current
    date in ``DEFAULT_TIMEZONE``.

    * No account → create one with a first-time bonus in ``[1, 15]``.
    * Already claimed today → ``already_claimed=True``; nothing changes.
    * Otherwise → add a reward in ``[1, 15]`` and stamp today's date.
    """
    if today is None:
        today = local_today(ZoneInfo(DEFAULT_TIMEZONE))

    try:
        with get_session(engine) as session:
            return _claim_in_session(session, user_id, today, rng)
    except IntegrityError:
        # Lost a first-claim insert race; the row now exists, so the second
        # pass takes the normal (guarded) path.
        logger.info("Daily: concurrent account creation for %s, retrying", user_id)
        with get_session(engine) as session:
            return _claim_in_session(session, user_id, today, rng)


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------
def play_slots(
    engine: Engine,
    user_id: int,
    *,
    rng: random.Random | None = None,
) -> SlotsResult:
    """Spend the ante on one spin and credit the payout.

    Fails without touching the balance when the user has no account or
    holds fewer than ``SLOTS_ANTE`` nuggets.
    """
    with get_session(engine) as session:
        account = session.get(Account, user_id)
        if account is None:
            return SlotsResult(no_account=True)
        if account.balance < SLOTS_ANTE:
            return SlotsResult(balance=account.balance, insufficient_funds=True)

        outcome = spin(rng)
        row = session.execute(
            update(Account)
            .where(Account.user_id == user_id, Account.balance >= SLOTS_ANTE)
            .values(balance=Account.balance - SLOTS_ANTE + outcome.payout)
            .returning(Account.balance)
            .execution_options(synchronize_session=False)
        ).first()
        if row is None:
            session.refresh(account)
            return SlotsResult(balance=account.balance, insufficient_funds=True)

        logger.info(
            "Slots: %s rolled %s %s → payout %d (balance %d)",
            user_id, outcome.tier, "".join(outcome.reels), outcome.payout, row[0],
        )
        return SlotsResult(outcome=outcome, balance=row[0])
