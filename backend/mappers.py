"""Persisted JSON <-> domain mappers.

Converts between the camelCase key objects the dashboard syncs in and the
KeyRecord domain model. Writes go back as patches so fields this service
does not know about survive untouched.
"""

import json
from typing import Any, Optional

from domain.models import KeyRecord

# domain attribute -> persisted field name
FIELD_NAMES = {
    "auth_key": "authKey",
    "status": "status",
    "activated_at": "activatedAt",
    "duration_days": "durationDays",
    "expires_at": "expiresAt",
    "last_seen": "lastSeen",
    "last_ip": "lastIp",
    "discord": "discord",
}


def _as_int(value: Any) -> int:
    """Numbers from the dashboard may be missing, null or strings; treat junk as 0."""
    if isinstance(value, bool):
        return 0
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return 0


def _as_text(value: Any) -> Optional[str]:
    """Scalars become their JSON spelling (12345 -> "12345", True -> "true"); objects and lists are dropped."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


def record_from_dict(product_key: str, raw: Any) -> Optional[KeyRecord]:
    """Build a KeyRecord from a stored entry. Non-object entries map to None."""
    if not isinstance(raw, dict):
        return None
    last_seen = raw.get("lastSeen")
    return KeyRecord(
        product_key=product_key,
        auth_key=_as_text(raw.get("authKey")),
        status=raw.get("status"),
        activated_at=raw.get("activatedAt"),
        duration_days=_as_int(raw.get("durationDays")),
        expires_at=_as_int(raw.get("expiresAt")),
        last_seen=_as_int(last_seen) if last_seen is not None else None,
        last_ip=_as_text(raw.get("lastIp")),
        discord=_as_text(raw.get("discord")) or None,
    )


def record_patch(record: KeyRecord, *attrs: str) -> dict[str, Any]:
    """Persisted-field patch for the given KeyRecord attributes."""
    return {FIELD_NAMES[attr]: getattr(record, attr) for attr in attrs}


def iter_records(store: dict[str, Any]):
    """Yield KeyRecords in store order, skipping entries that are not objects."""
    for product_key, raw in store.items():
        record = record_from_dict(product_key, raw)
        if record is not None:
            yield record
