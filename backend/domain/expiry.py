"""Expiry rules and time helpers shared by every use case."""

import time
from datetime import datetime, timezone

from domain.models import KeyRecord

MS_PER_HOUR = 3_600_000
MS_PER_DAY = 24 * MS_PER_HOUR


def epoch_millis() -> int:
    return int(time.time() * 1000)


def is_expired(record: KeyRecord, now: int) -> bool:
    """Return True if the record is past its expiry at ``now`` (epoch ms).

    Never-activated and lifetime records never expire. A record expiring
    exactly at ``now`` is still valid.
    """
    if not record.activated_at:
        return False
    if record.is_lifetime:
        return False
    return now > record.expires_at


def is_live(record: KeyRecord, now: int) -> bool:
    """Active status and not expired: what clients may use right now."""
    return record.is_active and not is_expired(record, now)


def _civil_from_days(days: int) -> tuple[int, int, int]:
    """Proleptic Gregorian (year, month, day) for days since 1970-01-01, any range."""
    z = days + 719_468
    era = z // 146_097
    doe = z - era * 146_097
    yoe = (doe - doe // 1460 + doe // 36_524 - doe // 146_096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def iso_extended(epoch_ms: int) -> str:
    """ISO-8601 with expanded years (+010000-01-01T00:00:00.000Z) past datetime's range."""
    days, rem = divmod(epoch_ms, MS_PER_DAY)
    hour, rem = divmod(rem, MS_PER_HOUR)
    minute, rem = divmod(rem, 60_000)
    second, millis = divmod(rem, 1000)
    year, month, day = _civil_from_days(days)
    if 0 <= year <= 9999:
        year_text = f"{year:04d}"
    else:
        year_text = f"{'-' if year < 0 else '+'}{abs(year):06d}"
    return f"{year_text}-{month:02d}-{day:02d}T{hour:02d}:{minute:02d}:{second:02d}.{millis:03d}Z"


def iso_millis(epoch_ms: int) -> str:
    """Format epoch milliseconds as ISO-8601 UTC, e.g. 2025-03-15T12:00:00.000Z."""
    try:
        dt = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return iso_extended(epoch_ms)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
