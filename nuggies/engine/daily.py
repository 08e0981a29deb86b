"""
nuggies.engine.daily — Daily Claim Decisions
=============================================

Pure logic.  No Discord I/O, no DB I/O.

Claims are keyed to *calendar days in the reference zone* (Europe/Berlin by
default), not to rolling 24-hour windows: a claim at 23:59 and another at
00:01 local time are on different days.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from nuggies.constants import DAILY_MAX, DAILY_MIN

_RNG = random.Random()


@dataclass(frozen=True, slots=True)
class ClaimResult:
    """Outcome of one ``/daily`` attempt.

    ``amount`` is 0 and ``new_balance`` is the untouched balance when
    ``already_claimed`` is set.
    """

    amount: int
    new_balance: int
    already_claimed: bool = False
    first_time: bool = False


def local_today(tz: tzinfo, now: datetime | None = None) -> date:
    """Current calendar date in *tz*."""
    now = now or datetime.now(tz)
    return now.astimezone(tz).date()


def draw_daily_reward(rng: random.Random | None = None) -> int:
    """Uniform integer in ``[DAILY_MIN, DAILY_MAX]``, both ends inclusive."""
    return (rng or _RNG).randint(DAILY_MIN, DAILY_MAX)


def can_claim(last_claim_date: date | None, today: date) -> bool:
    return last_claim_date != today
