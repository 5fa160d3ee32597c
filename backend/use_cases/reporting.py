"""Reporter — read-only views over the key store."""

from typing import Callable

from domain.expiry import epoch_millis, is_live
from domain.models import KeyCounts
from mappers import iter_records
from ports.key_store import KeyStorePort


class Reporter:
    def __init__(self, store: KeyStorePort, clock: Callable[[], int] = epoch_millis):
        self._store = store
        self._clock = clock

    def raw_whitelist(self) -> list[str]:
        """Auth keys of live records, in store order."""
        now = self._clock()
        return [
            record.auth_key
            for record in iter_records(self._store.load())
            if record.auth_key and is_live(record, now)
        ]

    def raw_whitelist_text(self) -> str:
        return "\n".join(self.raw_whitelist())

    def health(self) -> KeyCounts:
        keys = self._store.load()
        now = self._clock()
        active = sum(1 for record in iter_records(keys) if is_live(record, now))
        return KeyCounts(total=len(keys), active=active)
