"""Trip code allocation tests."""

from datetime import date

import pytest

from fleetledger.extensions import db
from fleetledger.models import Trip, TripSequence
from fleetledger.services.sequence_service import (
    TripSequenceError,
    format_trip_code,
    next_trip_code,
)


def _stored_trip(code: str) -> Trip:
    trip = Trip(
        trip_code=code,
        vehicle_number="KA01X1",
        vehicle_type="OWN",
        loading_date=date(2024, 6, 1),
        party_name="Seed",
    )
    db.session.add(trip)
    db.session.commit()
    return trip


def test_format():
    assert format_trip_code(2026, 7) == "2026_7"


def test_sequential_codes(db_session):
    codes = []
    for _ in range(3):
        codes.append(next_trip_code(2026))
        db.session.commit()
    assert codes == ["2026_1", "2026_2", "2026_3"]


def test_years_are_independent(db_session):
    assert next_trip_code(2025) == "2025_1"
    db.session.commit()
    assert next_trip_code(2026) == "2026_1"
    db.session.commit()
    assert next_trip_code(2025) == "2025_2"
    db.session.commit()

    rows = {s.year: s.next_number for s in TripSequence.query.all()}
    assert rows == {2025: 3, 2026: 2}


def test_counter_seeds_past_highest_existing_code(db_session):
    _stored_trip("2024_1")
    _stored_trip("2024_7")
    _stored_trip("20245_99")  # different year prefix, not counted

    assert next_trip_code(2024) == "2024_8"


def test_rejects_non_positive_year(db_session):
    with pytest.raises(TripSequenceError):
        next_trip_code(0)



def test_rollback_releases_number(db_session):
    assert next_trip_code(2026) == "2026_1"
    db.session.commit()
    next_trip_code(2026)
    db.session.rollback()
    assert next_trip_code(2026) == "2026_2"
