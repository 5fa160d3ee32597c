"""NotifierPort — abstract interface for best-effort outbound notifications."""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    @abstractmethod
    def notify(self, message: str) -> None:
        """Send a message without blocking the caller. Failures are not reported."""

    def close(self) -> None:
        """Release resources; pending notifications may be dropped."""
