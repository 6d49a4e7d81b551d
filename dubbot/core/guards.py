"""Shared command guards: role check."""

from __future__ import annotations

from dubbot.models import UserRole


def has_role(user_role: UserRole | None, min_role: UserRole | None) -> bool:
    """Check if a user's role meets the minimum role requirement."""
    if min_role is None or min_role is UserRole.NONE:
        return True

    return (user_role or UserRole.NONE).at_least(min_role)
