"""KeyStorePort — abstract interface for the product key store."""

from abc import ABC, abstractmethod
from contextlib import nullcontext
from typing import Any, ContextManager


class KeyStorePort(ABC):
    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Return the full mapping of product key -> key object.

        Never raises: unreadable data comes back as an empty mapping.
        """

    @abstractmethod
    def save(self, keys: dict[str, Any]) -> bool:
        """Overwrite the whole store. Returns False if the write failed."""

    def locked(self) -> ContextManager:
        """Guard a load-modify-save cycle. Default: no isolation (last writer wins)."""
        return nullcontext()
