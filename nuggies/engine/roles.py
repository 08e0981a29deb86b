"""
nuggies.engine.roles — Reaction-Role Bindings
==============================================

Pure decision logic for the reaction-role flow.  No Discord I/O.

A *binding* ties custom-emoji names to role names, scoped to a trigger
message recognized by a content marker.  Bindings are not stored anywhere;
they are re-derived from the live message every time a reaction arrives.

Decision steps (the platform-facing half lives in
:mod:`nuggies.services.role_sync_service`):

1. Ignore reactions from bot accounts.
2. Ignore messages not authored by this bot (anti-spoofing).
3. Classify the message by marker → pronouns / events / none.
4. Resolve the emoji through the binding's table.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class BindingKind(enum.StrEnum):
    PRONOUNS = "pronouns"
    EVENTS = "events"


class RoleActionType(enum.StrEnum):
    GRANT = "grant"
    REVOKE = "revoke"


@dataclass(frozen=True, slots=True)
class RoleBinding:
    """Emoji → role table scoped to one bot-authored trigger message."""

    kind: BindingKind
    marker: str
    # "prefix": content starts with marker; "contains": marker anywhere
    match: str
    emoji_roles: dict[str, str] = field(default_factory=dict)

    def matches(self, content: str) -> bool:
        if self.match == "prefix":
            return content.startswith(self.marker)
        return self.marker in content

    def role_for(self, emoji_name: str) -> str | None:
        return self.emoji_roles.get(emoji_name)

    @property
    def role_names(self) -> list[str]:
        return list(self.emoji_roles.values())

    @property
    def emoji_names(self) -> list[str]:
        return list(self.emoji_roles)


PRONOUN_BINDING = RoleBinding(
    kind=BindingKind.PRONOUNS,
    marker="Assign yourself Pronouns",
    match="prefix",
    emoji_roles={
        "justaboy": "he/him",
        "justagirl": "she/her",
        "pridejj": "they/them",
    },
)

EVENT_BINDING = RoleBinding(
    kind=BindingKind.EVENTS,
    marker="role for event notifications",
    match="contains",
    emoji_roles={"danseparty": "FC Events"},
)

# Evaluated in order; the pronoun prefix is checked first.
BINDINGS: tuple[RoleBinding, ...] = (PRONOUN_BINDING, EVENT_BINDING)


@dataclass(frozen=True, slots=True)
class ReactionSignal:
    """Everything the planner needs from one reaction add/remove event."""

    emoji_name: str | None
    reactor_is_bot: bool
    message_author_id: int
    message_content: str
    bot_user_id: int
    added: bool


@dataclass(frozen=True, slots=True)
class RoleAction:
    action: RoleActionType
    role_name: str
    binding: BindingKind


def classify_message(content: str) -> RoleBinding | None:
    """Return the binding whose marker *content* carries, if any."""
    for binding in BINDINGS:
        if binding.matches(content):
            return binding
    return None


def plan_reaction(signal: ReactionSignal) -> RoleAction | None:
    """Steps 1–4: decide whether this reaction maps to a role change.

    ``None`` means "no-op", never an error.
    """
    if signal.reactor_is_bot:
        return None
    if signal.message_author_id != signal.bot_user_id:
        return None

    binding = classify_message(signal.message_content)
    if binding is None or not signal.emoji_name:
        return None

    role_name = binding.role_for(signal.emoji_name)
    if role_name is None:
        return None

    return RoleAction(
        action=RoleActionType.GRANT if signal.added else RoleActionType.REVOKE,
        role_name=role_name,
        binding=binding.kind,
    )


def render_binding_message(binding: RoleBinding, emojis: dict[str, str]) -> str:
    """Build the trigger-message text.

    *emojis* maps emoji name → rendered emoji (``<:name:id>``).  The output
    always carries the binding's marker so :func:`classify_message` finds it.
    """
    if binding.kind is BindingKind.PRONOUNS:
        lines = [binding.marker]
        for name, role in binding.emoji_roles.items():
            label = "/".join(part.capitalize() for part in role.split("/"))
            lines.append(f"{emojis[name]} {label}")
        return "\n".join(lines)

    (name, role), = binding.emoji_roles.items()
    return f"React with {emojis[name]} to get the '{role}' {binding.marker}!"
