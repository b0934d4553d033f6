"""Account-role assignment for decoded instructions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def account_layout(instruction: Any) -> tuple[str, ...]:
    """Return the ordered account roles declared by an instruction variant."""
    return tuple(getattr(instruction, "ACCOUNTS", ()))


def arrange_accounts(instruction: Any, accounts: Sequence[str]) -> dict[str, str] | None:
    """Map raw accounts onto the variant's roles.

    Returns None when the variant declares no roles or when fewer accounts
    than roles were supplied; extra trailing accounts (remaining accounts,
    tick arrays) are ignored.
    """
    roles = account_layout(instruction)
    if not roles or len(accounts) < len(roles):
        return None
    return dict(zip(roles, accounts))
