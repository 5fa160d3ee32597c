"""LifecycleEngine — authenticate and heartbeat for client-held auth keys.

Every call loads the whole store, finds the first active record whose
auth key matches exactly, and writes the whole store back if it changed
anything. Expiry is detected lazily: only authenticate flips a record to
expired. Heartbeat extends whatever active record it finds, even one that
is already past its expiry.
"""

import logging
from typing import Any, Callable, Optional

from domain.errors import InvalidKeyError, KeyExpiredError, KeyNotFoundError, MissingKeyError
from domain.expiry import MS_PER_HOUR, epoch_millis, is_expired, iso_millis
from domain.models import AuthResult, HeartbeatResult, KeyRecord, KeyStatus
from mappers import iter_records, record_patch
from ports.key_store import KeyStorePort

logger = logging.getLogger(__name__)


def mask_key(key: Optional[str], length: int = 12) -> str:
    return f"{(key or '')[:length]}..."


def find_active(store: dict[str, Any], auth_key: str) -> Optional[KeyRecord]:
    """First active record presenting ``auth_key``, in store order."""
    for record in iter_records(store):
        if record.auth_key == auth_key and record.is_active:
            return record
    return None


class LifecycleEngine:
    def __init__(
        self,
        store: KeyStorePort,
        heartbeat_hours: int = 12,
        clock: Callable[[], int] = epoch_millis,
    ):
        self._store = store
        self._heartbeat_hours = heartbeat_hours
        self._clock = clock

    @property
    def heartbeat_hours(self) -> int:
        return self._heartbeat_hours

    def authenticate(self, key: Optional[str]) -> AuthResult:
        if not key:
            raise MissingKeyError("No key provided.")

        with self._store.locked():
            keys = self._store.load()
            record = find_active(keys, key)
            if record is None:
                logger.info(f"[AUTH] DENIED — key not found: {mask_key(key)}")
                raise InvalidKeyError()

            now = self._clock()
            if is_expired(record, now):
                record.status = KeyStatus.EXPIRED.value
                keys[record.product_key].update(record_patch(record, "status"))
                self._store.save(keys)
                logger.info(f"[AUTH] EXPIRED — product key: {record.product_key}")
                raise KeyExpiredError()

        expires_display = "lifetime" if record.is_lifetime else iso_millis(record.expires_at)
        logger.info(
            f"[AUTH] SUCCESS — product key: {record.product_key} | discord: {record.discord or 'none'}"
        )
        return AuthResult(
            product_key=record.product_key,
            expires_display=expires_display,
            duration_days=record.duration_days,
            discord=record.discord,
        )

    def heartbeat(self, key: Optional[str], ip: Optional[str] = None) -> HeartbeatResult:
        if not key:
            raise MissingKeyError("No key.")

        with self._store.locked():
            keys = self._store.load()
            record = find_active(keys, key)
            if record is None:
                raise KeyNotFoundError()

            if record.is_lifetime:
                return HeartbeatResult(
                    product_key=record.product_key,
                    extended=False,
                    extended_by_hours=self._heartbeat_hours,
                )

            now = self._clock()
            base = max(record.expires_at or now, now)
            record.expires_at = base + self._heartbeat_hours * MS_PER_HOUR
            record.last_seen = now
            record.last_ip = ip or "unknown"
            keys[record.product_key].update(
                record_patch(record, "expires_at", "last_seen", "last_ip")
            )
            self._store.save(keys)

        logger.info(
            f"[HEARTBEAT] Extended +{self._heartbeat_hours}h — key: {record.product_key} | ip: {record.last_ip}"
        )
        return HeartbeatResult(
            product_key=record.product_key,
            extended=True,
            extended_by_hours=self._heartbeat_hours,
            expires_at=record.expires_at,
        )
