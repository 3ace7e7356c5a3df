"""Shared helper functions used across multiple modules.

Centralises timestamp and identifier generation so the repository,
interchange and session layers agree on formats.
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC ``datetime``."""
    return datetime.now(UTC)


def isoformat_utc(moment: datetime) -> str:
    """Format *moment* as an ISO 8601 string with a ``Z`` suffix.

    Naive datetimes are assumed to already be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_day(moment: datetime | date) -> str:
    """Return the ``YYYY-MM-DD`` calendar day of *moment*."""
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(UTC)
        return moment.date().isoformat()
    return moment.isoformat()


def new_aoi_id() -> str:
    """Return a fresh opaque AOI identifier."""
    return str(uuid.uuid4())
