"""AdminReplicator — secret-gated bulk read/replace of the key store.

The dashboard owns the key set; sync overwrites the store wholesale
(no merge), so keys missing from the payload are gone afterwards.
"""

import hmac
import logging
from typing import Any, Optional

from domain.errors import BadRequestError, UnauthorizedError
from ports.key_store import KeyStorePort

logger = logging.getLogger(__name__)


def secrets_match(presented: Optional[str], expected: str) -> bool:
    """Constant-time comparison. An unset expected secret never matches."""
    if not expected or presented is None:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


class AdminReplicator:
    def __init__(self, store: KeyStorePort, admin_secret: str):
        self._store = store
        self._admin_secret = admin_secret

    def authorize(self, secret: Optional[str], client_ip: str = "unknown") -> None:
        if not secrets_match(secret, self._admin_secret):
            logger.warning(f"[SYNC] Unauthorized attempt from IP: {client_ip}")
            raise UnauthorizedError()

    def replace(self, secret: Optional[str], keys: Any, client_ip: str = "unknown") -> int:
        """Overwrite the store with ``keys``. Returns the number of entries stored."""
        self.authorize(secret, client_ip)
        if not isinstance(keys, dict):
            raise BadRequestError()
        bad = [k for k, v in keys.items() if not isinstance(v, dict)]
        if bad:
            logger.warning(f"[SYNC] Rejected payload: {len(bad)} entries are not objects")
            raise BadRequestError()

        with self._store.locked():
            self._store.save(keys)
        count = len(keys)
        logger.info(f"[SYNC] {count} keys synced from dashboard")
        return count

    def fetch(self, secret: Optional[str], client_ip: str = "unknown") -> dict[str, Any]:
        self.authorize(secret, client_ip)
        with self._store.locked():
            return self._store.load()
