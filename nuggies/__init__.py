"""
Nuggies — A Discord Companion Bot with a Nugget Economy
========================================================
Chats through a generative-AI persona, translates text, fetches fox GIFs,
hands out reaction roles, and runs a small per-member "nugget" economy
(daily claims and a slot machine) on top of a relational store.

Package layout::

    nuggies/
    ├── config.py          # YAML → typed Python config
    ├── context.py         # BotContext handed to every handler
    ├── constants.py       # Economy tables, fallback strings
    ├── errors.py          # UpstreamUnavailable, ConfigurationMissing
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # Account (the ``users`` table)
    ├── engine/
    │   ├── daily.py       # Daily-claim reward + reference-zone calendar
    │   ├── slots.py       # Weighted slot-machine outcomes
    │   └── roles.py       # Reaction-role bindings and planning
    ├── services/
    │   ├── economy_service.py    # claim_daily / get_balance / play_slots
    │   ├── role_sync_service.py  # Reaction → grant/revoke, admin setup
    │   ├── replies.py            # Economy reply wording
    │   ├── router.py             # Slash-command dispatch (defer → finalize)
    │   ├── triggers.py           # Ordered plain-message triggers
    │   ├── ai_client.py          # Gemini text port
    │   └── media_client.py       # Tenor GIF port
    └── bot/
        ├── core.py        # Bot subclass, cog loader
        └── cogs/
            ├── commands.py   # Slash-command surface → router
            ├── messages.py   # on_message → triggers
            └── reactions.py  # Reaction-role sync
"""

__version__ = "0.1.0"
