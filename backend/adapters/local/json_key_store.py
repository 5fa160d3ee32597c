"""JsonFileKeyStore — keeps the whole key set in one JSON file."""

import json
import logging
import os
import tempfile
import threading
from contextlib import nullcontext
from pathlib import Path
from typing import Any, ContextManager

from ports.key_store import KeyStorePort

logger = logging.getLogger(__name__)


class JsonFileKeyStore(KeyStorePort):
    """Fails open: a missing or unreadable file reads as an empty store.

    With ``serialize_writes`` every ``locked()`` block shares one re-entrant
    lock, so concurrent read-modify-write cycles cannot drop each other's
    updates. Without it, the last full-store write wins.
    """

    def __init__(self, keys_file: str = "data/keys.json", serialize_writes: bool = True):
        self._keys_file = Path(keys_file)
        self._lock = threading.RLock() if serialize_writes else None

    @property
    def path(self) -> Path:
        return self._keys_file

    def locked(self) -> ContextManager:
        return self._lock if self._lock is not None else nullcontext()

    def _ensure_exists(self) -> None:
        if self._keys_file.exists():
            return
        self._keys_file.parent.mkdir(parents=True, exist_ok=True)
        self._keys_file.write_text("{}", encoding="utf-8")
        logger.info(f"Created empty key store at {self._keys_file}")

    def load(self) -> dict[str, Any]:
        try:
            self._ensure_exists()
            with open(self._keys_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Key store read error: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Key store read error: expected a JSON object, got {type(data).__name__}")
            return {}
        return data

    def save(self, keys: dict[str, Any]) -> bool:
        tmp_path = None
        try:
            self._keys_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._keys_file.parent, prefix=".keys-", suffix=".json"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(keys, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._keys_file)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Key store write error: {e}")
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError as cleanup_error:
                    logger.warning(f"Cleanup error: {cleanup_error}")
            return False
