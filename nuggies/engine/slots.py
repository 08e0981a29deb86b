"""
nuggies.engine.slots — Slot Machine Outcomes
=============================================

Pure calculation.  No Discord I/O, no DB I/O inside the engine.

Each spin draws an outcome tier from a uniform roll over ``[1, 100]``:

==========  ===========  ==================================================
roll        tier         reels / payout
==========  ===========  ==================================================
1 – 5       jackpot      one weighted symbol on all three reels;
                         payout = that symbol's jackpot value
6 – 20      break-even   two distinct symbols, two-of-one + one-of-other,
                         shuffled; payout = the ante (5)
21 – 100    loss         three independent uniform symbols; payout 0
==========  ===========  ==================================================

The loss tier may, by chance, show three matching reels; it still pays 0.
"""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from fractions import Fraction

from nuggies.constants import (
    BREAK_EVEN_MAX_ROLL,
    JACKPOT_MAX_ROLL,
    JACKPOT_VALUES,
    SLOTS_ANTE,
    SYMBOL_WEIGHTS,
    SYMBOLS,
)

_RNG = random.Random()

__all__ = [
    "SlotOutcome",
    "SlotTier",
    "expected_payout",
    "spin",
    "tier_for_roll",
]


class SlotTier(enum.StrEnum):
    JACKPOT = "jackpot"
    BREAK_EVEN = "break-even"
    LOSS = "loss"


@dataclass(frozen=True, slots=True)
class SlotOutcome:
    """Three reels, the tier that produced them, and the payout."""

    reels: tuple[str, str, str]
    tier: SlotTier
    payout: int

    @property
    def net(self) -> int:
        """Change in balance for this spin (payout minus the ante)."""
        return self.payout - SLOTS_ANTE


def tier_for_roll(roll: int) -> SlotTier:
    """Map a ``[1, 100]`` roll to its tier."""
    if not 1 <= roll <= 100:
        raise ValueError(f"tier roll out of range: {roll}")
    if roll <= JACKPOT_MAX_ROLL:
        return SlotTier.JACKPOT
    if roll <= BREAK_EVEN_MAX_ROLL:
        return SlotTier.BREAK_EVEN
    return SlotTier.LOSS


def _weighted_symbol(rng: random.Random) -> str:
    return rng.choices(SYMBOLS, weights=[SYMBOL_WEIGHTS[s] for s in SYMBOLS], k=1)[0]


def spin(rng: random.Random | None = None) -> SlotOutcome:
    """Play one spin.  *rng* defaults to a shared module-level generator."""
    rng = rng or _RNG
    tier = tier_for_roll(rng.randint(1, 100))

    if tier is SlotTier.JACKPOT:
        symbol = _weighted_symbol(rng)
        return SlotOutcome((symbol, symbol, symbol), tier, JACKPOT_VALUES[symbol])

    if tier is SlotTier.BREAK_EVEN:
        pair, odd = rng.sample(SYMBOLS, 2)
        reels = [pair, pair, odd]
        rng.shuffle(reels)
        return SlotOutcome((reels[0], reels[1], reels[2]), tier, SLOTS_ANTE)

    reels = [rng.choice(SYMBOLS) for _ in range(3)]
    return SlotOutcome((reels[0], reels[1], reels[2]), tier, 0)


def expected_payout() -> Fraction:
    """Exact expected payout of one spin, derived from the constant tables."""
    total_weight = sum(SYMBOL_WEIGHTS.values())
    jackpot_mean = Fraction(
        sum(SYMBOL_WEIGHTS[s] * JACKPOT_VALUES[s] for s in SYMBOLS), total_weight
    )
    p_jackpot = Fraction(JACKPOT_MAX_ROLL, 100)
    p_break_even = Fraction(BREAK_EVEN_MAX_ROLL - JACKPOT_MAX_ROLL, 100)
    return p_jackpot * jackpot_mean + p_break_even * SLOTS_ANTE
