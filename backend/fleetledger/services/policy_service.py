# Overview: Role-based rules for who may change which trips.

"""
Trip authorization policy.

Route decorators decide *who* may reach an endpoint (any signed-in user vs.
ADMIN only). This module decides, for a signed-in caller, whether a given
change to a given trip is allowed:

1. Non-admins cannot touch a trip that is COMPLETED or SETTLED, whatever the
   fields.
2. Non-admins cannot send motor_owner_bhada at all, whatever the status.

Both checks run before anything is written, so an update is either applied
whole or rejected whole.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from ..errors import Forbidden
from ..models import Trip, ROLE_ADMIN, LOCKED_STATUSES


@dataclass(frozen=True)
class Identity:
    """Who is calling. Passed explicitly into every policy decision."""
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(id=user.id, role=user.role)


def authorize_trip_update(identity: Identity, trip: Trip, patch: dict) -> dict:
    """
    Check a validated patch against the caller's role and the trip's state.

    Returns the patch to apply. A non-admin payload carrying
    motor_owner_bhada is refused even when the value matches the stored one.

    Raises Forbidden when the update must be rejected.
    """
    if identity.is_admin:
        return patch

    if trip.status in LOCKED_STATUSES:
        _deny(identity, trip, "status")
        raise Forbidden("Managers cannot edit completed or settled trips.")

    if "motor_owner_bhada" in patch:
        _deny(identity, trip, "motor_owner_bhada")
        raise Forbidden("Managers cannot edit Bhada.")

    return patch


def _deny(identity: Identity, trip: Trip, reason: str) -> None:
    current_app.logger.warning(
        "Denied trip update: user_id=%s role=%s trip=%s reason=%s",
        identity.id, identity.role, trip.trip_code, reason,
    )
