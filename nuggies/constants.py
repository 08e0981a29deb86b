"""
nuggies.constants — Shared Constants
=====================================

Single source of truth for the economy tables and the fixed user-facing
strings.  The slot-machine weights and jackpot values are literal values
carried over from the live bot; do not "rebalance" them here.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Daily claim
# ---------------------------------------------------------------------------
DAILY_MIN = 1
DAILY_MAX = 15

# Claims reset at midnight in this zone, not UTC.
DEFAULT_TIMEZONE = "Europe/Berlin"

# ---------------------------------------------------------------------------
# Slot machine
# ---------------------------------------------------------------------------
SLOTS_ANTE = 5

# Outcome-tier roll is uniform over [1, 100].
JACKPOT_MAX_ROLL = 5       # [1, 5]   → ~5%
BREAK_EVEN_MAX_ROLL = 20   # [6, 20]  → ~15%, [21, 100] → loss

# symbol → weight (30 units total)
SYMBOL_WEIGHTS: dict[str, int] = {
    "\U0001f352": 10,  # 🍒 cherry
    "\U0001f34a": 8,   # 🍊 orange
    "\U0001f514": 6,   # 🔔 bell
    "\U0001f340": 4,   # 🍀 clover
    "\U0001f48e": 2,   # 💎 gem
}

# symbol → payout when all three reels match
JACKPOT_VALUES: dict[str, int] = {
    "\U0001f352": 10,
    "\U0001f34a": 25,
    "\U0001f514": 40,
    "\U0001f340": 75,
    "\U0001f48e": 250,
}

SYMBOLS: tuple[str, ...] = tuple(SYMBOL_WEIGHTS)

SLOT_QUIPS: list[str] = [
    "Don't spend it all in one place... or do, I'm not your mother.",
    "Fortune favors the bold. Or in your case, the lucky.",
    "The gods have smiled upon you. Or perhaps they just sneezed.",
    "Ooh, shiny! A gift from my hoard to yours.",
    "I suppose that's better than a kick in the teeth.",
    "You call that a win? Adorable.",
    "Jackpot! Or, you know, a minor financial gain.",
    "There. Are you happy now?",
]

# ---------------------------------------------------------------------------
# Fixed response strings
# ---------------------------------------------------------------------------
UNKNOWN_COMMAND = "Unknown command."
NO_ACCOUNT = "You don't have a nuggetbox yet! Use `/daily` to get your first nuggets."
ALREADY_CLAIMED = "You have already claimed your daily nuggets. Please try again tomorrow."
INSUFFICIENT_FUNDS = (
    f"You don't have enough nuggets to play the slots! You need at least {SLOTS_ANTE}."
)

AI_APOLOGY = "Sorry, the Endpoint is currently overloaded, please try again."
CHAT_FALLBACK = "Sorry, I couldn't get a response from Nuggies right now."
ASK_FALLBACK = "Sorry, I couldn't get a response right now."
TRANSLATE_FALLBACK = "Sorry, I couldn't translate that."
TRIGGER_FALLBACK = "My circuits are fried."
ECONOMY_FALLBACK = "The nugget vault is jammed right now. Please try again in a moment."

MISSING_CHAT = "Please provide a message for Nuggies."
MISSING_QUESTION = "Please provide a question."
MISSING_TRANSLATE = "Please provide both a language and text."

HELP_TEXT = (
    "**Nuggies commands**\n"
    "`/nuggies <message>` — chat with Nuggies\n"
    "`/ask <question>` — ask the AI a question\n"
    "`/translate <language> <text>` — translate text\n"
    "`/fox` — a random fox GIF\n"
    "`/daily` — claim your daily nuggets\n"
    "`/nuggetbox` — check your nuggets\n"
    f"`/slots` — spend {SLOTS_ANTE} nuggets for a chance to win big"
)
