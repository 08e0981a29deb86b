"""
nuggies.services.replies — User-facing text for economy results
=================================================================

All wording lives here so the router only supplies data.
"""

from __future__ import annotations

import random

from nuggies.constants import (
    ALREADY_CLAIMED,
    INSUFFICIENT_FUNDS,
    NO_ACCOUNT,
    SLOT_QUIPS,
    SLOTS_ANTE,
)
from nuggies.engine.daily import ClaimResult
from nuggies.engine.slots import SlotTier
from nuggies.services.economy_service import SlotsResult


def format_claim(result: ClaimResult) -> str:
    if result.already_claimed:
        return ALREADY_CLAIMED
    if result.first_time:
        return f"Welcome! You received your first {result.amount} nuggets!"
    return (
        f"You received {result.amount} nuggets! "
        f"You now have a total of {result.new_balance} nuggets."
    )


def format_balance(balance: int | None) -> str:
    if balance is None:
        return NO_ACCOUNT
    return f"You have {balance} nuggets in your nuggetbox."


def format_slots(result: SlotsResult, rng: random.Random | None = None) -> str:
    if result.no_account:
        return NO_ACCOUNT
    if result.insufficient_funds or result.outcome is None:
        return INSUFFICIENT_FUNDS

    outcome = result.outcome
    reels = " | ".join(outcome.reels)
    headline = {
        SlotTier.JACKPOT: "JACKPOT!",
        SlotTier.BREAK_EVEN: "So close! You got your nuggets back.",
        SlotTier.LOSS: "No luck this time.",
    }[outcome.tier]
    text = (
        f"[ {reels} ]\n**{headline}**\n"
        f"You spent {SLOTS_ANTE} nuggets and won {outcome.payout} nuggets! "
        f"Your new total is {result.balance}."
    )
    if outcome.payout > 0:
        text += f"\n*{(rng or random).choice(SLOT_QUIPS)}*"
    return text
