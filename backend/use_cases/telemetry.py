"""TelemetryUseCase — session pings from client installs."""

import logging
from typing import Callable, Optional

from domain.errors import InvalidTelemetryError
from domain.expiry import epoch_millis, iso_millis
from ports.notifier import NotifierPort
from use_cases.admin import secrets_match
from use_cases.lifecycle import mask_key

logger = logging.getLogger(__name__)


class TelemetryUseCase:
    def __init__(
        self,
        notifier: NotifierPort,
        telemetry_id: str = "",
        clock: Callable[[], int] = epoch_millis,
    ):
        self._notifier = notifier
        self._telemetry_id = telemetry_id
        self._clock = clock

    def _id_matches(self, telemetry_id: Optional[str]) -> bool:
        if not self._telemetry_id:
            return True
        return secrets_match(telemetry_id, self._telemetry_id)

    def record(self, telemetry_id: Optional[str], macho_key: Optional[str], ip: Optional[str]) -> str:
        """Log a session and notify. Returns the session time (ISO-8601)."""
        if not self._id_matches(telemetry_id):
            raise InvalidTelemetryError()

        time = iso_millis(self._clock())
        logger.info(f"[TELEMETRY] key={mask_key(macho_key)} ip={ip} time={time}")
        self._notifier.notify(
            "📡 **New Session**\n"
            f"> Key: `{mask_key(macho_key or 'unknown', 16)}`\n"
            f"> IP: `{ip or 'unknown'}`\n"
            f"> Time: `{time}`"
        )
        return time
