"""LogNotifier — writes notifications to the log when no webhook is configured."""

import logging

from ports.notifier import NotifierPort

logger = logging.getLogger(__name__)


class LogNotifier(NotifierPort):
    def notify(self, message: str) -> None:
        logger.info(f"[NOTIFY] {message}")
