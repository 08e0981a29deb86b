"""
nuggies.errors — Exceptions that cross module boundaries
=========================================================

Expected economy outcomes (no account, already claimed, not enough nuggets)
are *result fields*, not exceptions; see :mod:`nuggies.services.economy_service`.
"""

from __future__ import annotations


class UpstreamUnavailable(Exception):
    """An AI or media upstream failed, timed out, or sent garbage.

    Always recovered locally with a fixed fallback string.
    """


class ConfigurationMissing(Exception):
    """A role or custom emoji required by the admin setup flow is absent."""
