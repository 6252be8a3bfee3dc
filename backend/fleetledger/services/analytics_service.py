# Overview: Service-layer operations for analytics; read-only rollups over the trip ledger.

from __future__ import annotations

from datetime import date

from sqlalchemy import func

from ..extensions import db
from ..models import Trip, LOCKED_STATUSES, VEHICLE_MARKET
from ..money import format_amount, quantize
from ..time_utils import month_key, utcnow


UNKNOWN_OWNER = "Unknown"
DEFAULT_MONTHS = 6
MAX_MONTHS = 36


class AnalyticsError(Exception):
    """Raised when analytics parameters are invalid."""
    pass


def parse_months(raw: str | None) -> int:
    """Query-string months value; absent or blank means DEFAULT_MONTHS."""
    if raw is None or not raw.strip():
        return DEFAULT_MONTHS
    try:
        return int(raw.strip())
    except ValueError:
        raise AnalyticsError("months must be an integer")


def _month_starts(months: int, today: date) -> list[date]:
    """First day of each of the last `months` months, oldest first."""
    starts = []
    year, month = today.year, today.month
    for _ in range(months):
        starts.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


def _monthly_series(months: int, today: date) -> tuple[list[dict], list[dict]]:
    starts = _month_starts(months, today)
    period = func.strftime("%Y-%m", Trip.loading_date)

    rows = db.session.query(
        period.label("period"),
        func.count(Trip.id).label("trip_count"),
        func.coalesce(func.sum(Trip.party_freight), 0).label("revenue"),
    ).filter(
        Trip.loading_date >= starts[0],
    ).group_by("period").all()

    by_period = {row.period: row for row in rows}
    monthly_trips = []
    revenue_flow = []
    for start in starts:
        key = month_key(start)
        row = by_period.get(key)
        monthly_trips.append({"month": key, "count": int(row.trip_count) if row else 0})
        revenue_flow.append({"month": key, "amount": format_amount(row.revenue if row else None)})
    return monthly_trips, revenue_flow


def dashboard_stats(months: int = DEFAULT_MONTHS, today: date | None = None) -> dict:
    """
    Headline numbers for the admin dashboard.

    active_trips counts everything not yet COMPLETED or SETTLED.
    pending_amount is the sum of outstanding party balances.
    The monthly series cover the last `months` calendar months by loading
    date, including empty months.
    """
    if months < 1 or months > MAX_MONTHS:
        raise AnalyticsError(f"months must be between 1 and {MAX_MONTHS}")
    today = today or utcnow().date()

    totals = db.session.query(
        func.count(Trip.id).label("total_trips"),
        func.coalesce(func.sum(Trip.party_freight), 0).label("party_revenue"),
        func.coalesce(func.sum(Trip.party_balance), 0).label("pending_amount"),
    ).one()

    active_trips = db.session.query(func.count(Trip.id)).filter(
        Trip.status.notin_(sorted(LOCKED_STATUSES))
    ).scalar()

    monthly_trips, revenue_flow = _monthly_series(months, today)

    return {
        "total_trips": int(totals.total_trips or 0),
        "active_trips": int(active_trips or 0),
        "party_revenue": format_amount(totals.party_revenue),
        "pending_amount": format_amount(totals.pending_amount),
        "monthly_trips": monthly_trips,
        "revenue_flow": revenue_flow,
    }


def party_analytics() -> list[dict]:
    """One row per party name: trip count and freight/advance/balance totals."""
    rows = db.session.query(
        Trip.party_name.label("name"),
        func.count(Trip.id).label("total_trips"),
        func.coalesce(func.sum(Trip.party_freight), 0).label("total_freight"),
        func.coalesce(func.sum(Trip.party_advance), 0).label("total_advance"),
        func.coalesce(func.sum(Trip.party_balance), 0).label("outstanding_balance"),
    ).group_by(Trip.party_name).order_by(Trip.party_name.asc()).all()

    return [
        {
            "name": row.name,
            "total_trips": int(row.total_trips),
            "total_freight": format_amount(row.total_freight),
            "total_advance": format_amount(row.total_advance),
            "outstanding_balance": format_amount(row.outstanding_balance),
        }
        for row in rows
    ]


def motor_owner_analytics() -> list[dict]:
    """
    One row per motor owner, MARKET (hired) vehicles only.

    Trips without an owner name are reported together as "Unknown".
    """
    rows = db.session.query(
        Trip.motor_owner_name.label("name"),
        func.count(Trip.id).label("trips_done"),
        func.coalesce(func.sum(Trip.motor_owner_bhada), 0).label("total_bhada"),
        func.coalesce(func.sum(Trip.motor_owner_advance), 0).label("paid"),
        func.coalesce(func.sum(Trip.motor_owner_balance), 0).label("balance"),
    ).filter(
        Trip.vehicle_type == VEHICLE_MARKET,
    ).group_by(Trip.motor_owner_name).all()

    # NULL and "" group separately in SQL; fold both into one "Unknown" row
    merged: dict[str, dict] = {}
    for row in rows:
        name = (row.name or "").strip() or UNKNOWN_OWNER
        acc = merged.setdefault(name, {
            "trips_done": 0,
            "total_bhada": quantize(0),
            "paid": quantize(0),
            "balance": quantize(0),
        })
        acc["trips_done"] += int(row.trips_done)
        acc["total_bhada"] += quantize(row.total_bhada)
        acc["paid"] += quantize(row.paid)
        acc["balance"] += quantize(row.balance)

    return [
        {
            "name": name,
            "trips_done": acc["trips_done"],
            "total_bhada": format_amount(acc["total_bhada"]),
            "paid": format_amount(acc["paid"]),
            "balance": format_amount(acc["balance"]),
        }
        for name, acc in sorted(merged.items())
    ]
