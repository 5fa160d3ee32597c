"""ExpirySweepUseCase — optional maintenance pass that expires stale keys.

Off by default: normally a key only turns expired when someone tries to
authenticate with it. When enabled, this does the same flip for every
stale active record in one locked cycle.
"""

import logging
from typing import Callable

from domain.expiry import epoch_millis, is_expired
from domain.models import KeyStatus
from mappers import iter_records, record_patch
from ports.key_store import KeyStorePort

logger = logging.getLogger(__name__)


class ExpirySweepUseCase:
    def __init__(self, store: KeyStorePort, clock: Callable[[], int] = epoch_millis):
        self._store = store
        self._clock = clock

    def run_once(self) -> list[str]:
        """Flip stale active records to expired. Returns the product keys flipped."""
        with self._store.locked():
            keys = self._store.load()
            now = self._clock()
            flipped: list[str] = []
            for record in iter_records(keys):
                if record.is_active and is_expired(record, now):
                    record.status = KeyStatus.EXPIRED.value
                    keys[record.product_key].update(record_patch(record, "status"))
                    flipped.append(record.product_key)
            if flipped:
                self._store.save(keys)

        if flipped:
            logger.info(f"[SWEEP] Expired {len(flipped)} keys: {', '.join(flipped)}")
        else:
            logger.debug("[SWEEP] Nothing to expire")
        return flipped
