from .auth import User, SessionToken, ROLE_ADMIN, ROLE_MANAGER, ROLES
from .trips import (
    Trip,
    TripSequence,
    TRIP_STATUSES,
    VEHICLE_TYPES,
    STATUS_PENDING,
    STATUS_COMPLETED,
    STATUS_SETTLED,
    LOCKED_STATUSES,
    VEHICLE_OWN,
    VEHICLE_MARKET,
)

__all__ = [
    'User', 'SessionToken', 'ROLE_ADMIN', 'ROLE_MANAGER', 'ROLES',
    'Trip', 'TripSequence', 'TRIP_STATUSES', 'VEHICLE_TYPES',
    'STATUS_PENDING', 'STATUS_COMPLETED', 'STATUS_SETTLED', 'LOCKED_STATUSES',
    'VEHICLE_OWN', 'VEHICLE_MARKET',
]
