"""DiscordWebhookNotifier — posts notifications to a Discord webhook.

Sends run on a background worker so request handlers never wait on
Discord. Delivery is best effort: errors are logged and dropped.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import httpx

from ports.notifier import NotifierPort

logger = logging.getLogger(__name__)


class DiscordWebhookNotifier(NotifierPort):
    def __init__(
        self,
        webhook_url: str,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        self._webhook_url = webhook_url
        self._client = client or httpx.Client(timeout=timeout)
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="notify")

    def notify(self, message: str) -> None:
        try:
            self._pool.submit(self._send, message)
        except RuntimeError as e:
            # Executor already shut down
            logger.warning(f"Discord webhook skipped: {e}")

    def _send(self, message: str) -> None:
        try:
            resp = self._client.post(self._webhook_url, json={"content": message})
            if not resp.is_success:
                logger.error(f"Discord webhook error: HTTP {resp.status_code}")
        except Exception as e:
            logger.error(f"Discord webhook error: {e}")

    def close(self) -> None:
        self._pool.shutdown(wait=True)
        self._client.close()
