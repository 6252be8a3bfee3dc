# Overview: Trip code allocation ("{year}_{n}") from an atomic per-year counter.

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Trip, TripSequence
from ..time_utils import utcnow
from .concurrency import run_with_retry


class TripSequenceError(Exception):
    """Raised when trip code allocation fails."""
    pass


def format_trip_code(year: int, number: int) -> str:
    return f"{year}_{number}"


def _highest_existing_number(year: int) -> int:
    codes = (
        db.session.query(Trip.trip_code)
        .filter(Trip.trip_code.like(f"{year}\\_%", escape="\\"))
        .all()
    )
    highest = 0
    for (code,) in codes:
        suffix = code.partition("_")[2]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest


def _bump(year: int) -> int | None:
    stmt = (
        update(TripSequence)
        .where(TripSequence.year == year)
        .values(next_number=TripSequence.next_number + 1)
    )
    result = db.session.execute(stmt)
    if not result.rowcount:
        return None
    db.session.flush()
    current = (
        db.session.query(TripSequence.next_number)
        .filter_by(year=year)
        .scalar()
    )
    return current - 1


def next_trip_code(year: int | None = None) -> str:
    """
    Allocate the next trip code for `year` (default: current year).

    The counter row is incremented in a single UPDATE, so two concurrent
    writers never receive the same number. The first allocation in a year
    seeds the counter past the highest code already stored for that year.
    The bump commits together with the trip, so a rolled-back creation
    releases its number and no two stored trips share a code.

    Must run before the caller adds anything else to the session (a lost
    race on the counter row rolls the session back). The caller commits.
    """
    if year is None:
        year = utcnow().year

    def _allocate() -> str:
        if year < 1:
            raise TripSequenceError("year must be positive")

        number = _bump(year)
        if number is None:
            number = _highest_existing_number(year) + 1
            seq = TripSequence(year=year, next_number=number + 1)
            db.session.add(seq)
            try:
                db.session.flush()
            except IntegrityError:
                # Another writer created the row first; take the next number from it
                db.session.rollback()
                number = _bump(year)
                if number is None:
                    raise

        return format_trip_code(year, number)

    return run_with_retry(_allocate)
