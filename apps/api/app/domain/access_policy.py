"""Ownership-scoped authorization rules.

Every decision is a pure function of the caller and the resource (or the
lookup key derived for it). Nothing here touches storage.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypeVar

from app.errors import forbidden, not_found_or_forbidden
from app.schemas.auth import AuthPrincipal, Role


class AccessDecision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class OwnedRecord(Protocol):
    created_by: str


OwnedT = TypeVar("OwnedT", bound=OwnedRecord)


@dataclass(frozen=True, slots=True)
class GroupLookup:
    """How to find the group a card is being added to.

    Admins address the group by id; everyone else by name within their own groups.
    """

    group_id: str | None = None
    group_name: str | None = None
    created_by: str | None = None

    @property
    def by_id(self) -> bool:
        return self.group_id is not None


def is_admin(principal: AuthPrincipal) -> bool:
    return principal.role is Role.ADMIN


def decide(principal: AuthPrincipal, owner_id: str) -> AccessDecision:
    if is_admin(principal) or owner_id == principal.id:
        return AccessDecision.ALLOW
    return AccessDecision.DENY


def ensure_access(principal: AuthPrincipal, record: OwnedT | None, *, message: str = "Resource not found") -> OwnedT:
    """Return the record when the caller may act on it, otherwise a no-leak 404."""
    if record is None or decide(principal, record.created_by) is AccessDecision.DENY:
        raise not_found_or_forbidden(message)
    return record


def ensure_admin(principal: AuthPrincipal) -> None:
    if not is_admin(principal):
        raise forbidden("Admin role required")


def group_upsert_key(principal: AuthPrincipal, group_name: str) -> tuple[str, str]:
    return group_name, principal.id


def resolve_group_lookup(principal: AuthPrincipal, *, group_id: str, group_name: str) -> GroupLookup:
    if is_admin(principal):
        return GroupLookup(group_id=group_id)
    return GroupLookup(group_name=group_name, created_by=principal.id)


def ensure_can_broadcast(principal: AuthPrincipal, *, admin_only: bool) -> None:
    if admin_only and not is_admin(principal):
        raise forbidden("Admin role required to broadcast messages")


def can_read_message(principal: AuthPrincipal, recipient_ids: Iterable[str]) -> bool:
    return principal.id in recipient_ids


__all__ = [
    "AccessDecision",
    "GroupLookup",
    "can_read_message",
    "decide",
    "ensure_access",
    "ensure_admin",
    "ensure_can_broadcast",
    "group_upsert_key",
    "is_admin",
    "resolve_group_lookup",
]
