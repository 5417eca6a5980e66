"""Declarative authorization rules.

Every protected action is looked up by ``(resource, action)``. A rule has a
role gate, checked before the target is loaded, and an optional ownership
predicate, checked once it is. Admins pass every ownership predicate.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from eventhub.models import Event, User
from eventhub.models.user import UserRole
from eventhub.services.exceptions import ForbiddenError

ALL_ROLES = frozenset(UserRole)


@dataclass(frozen=True)
class Policy:
    roles: frozenset[UserRole]
    owner: Callable[[User, Any], bool] | None = None
    message: str = ForbiddenError.default_message


def _organizes(user: User, event: Event) -> bool:
    return event.organizer_id == user.id


def _is_self(user: User, target_user_id: int) -> bool:
    return user.id == target_user_id


POLICIES: dict[tuple[str, str], Policy] = {
    ("event", "create"): Policy(roles=frozenset({UserRole.ORGANIZER})),
    ("event", "update"): Policy(
        roles=frozenset({UserRole.ORGANIZER, UserRole.ADMIN}),
        owner=_organizes,
        message="Forbidden: You do not have permission to update this event",
    ),
    ("event", "delete"): Policy(
        roles=frozenset({UserRole.ORGANIZER, UserRole.ADMIN}),
        owner=_organizes,
        message="Forbidden: You do not have permission to delete this event",
    ),
    ("registration", "history"): Policy(roles=frozenset({UserRole.ATTENDEE})),
    ("coupon", "create"): Policy(roles=frozenset({UserRole.ADMIN})),
    ("user", "delete"): Policy(
        roles=ALL_ROLES,
        owner=_is_self,
        message="You do not have permission to delete this user",
    ),
}


def authorize(user: User, resource: str, action: str, target: Any = None) -> None:
    """Raise ``ForbiddenError`` unless ``user`` may perform ``action``.

    Without ``target`` only the role gate is checked. With it, the ownership
    predicate is checked as well.
    """
    policy = POLICIES[(resource, action)]

    if user.role not in policy.roles:
        raise ForbiddenError()

    if target is None or policy.owner is None:
        return
    if user.role == UserRole.ADMIN:
        return
    if not policy.owner(user, target):
        raise ForbiddenError(policy.message)
