"""
Unit tests for the Discord webhook notifier.
"""

import json
import logging

import httpx

from adapters.discord.webhook_notifier import DiscordWebhookNotifier
from adapters.local.log_notifier import LogNotifier

WEBHOOK = "https://discord.example/api/webhooks/1/token"


def make_notifier(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return DiscordWebhookNotifier(WEBHOOK, client=client)


def test_posts_content_payload():
    """Test the webhook receives {"content": message}."""
    seen = []

    def handler(request):
        seen.append((str(request.url), json.loads(request.content)))
        return httpx.Response(204)

    notifier = make_notifier(handler)
    notifier.notify("hello")
    notifier.close()

    assert seen == [(WEBHOOK, {"content": "hello"})]


def test_http_error_status_is_logged(caplog):
    """Test non-2xx responses are reported, not raised."""
    notifier = make_notifier(lambda request: httpx.Response(500))

    with caplog.at_level(logging.ERROR):
        notifier.notify("hello")
        notifier.close()

    assert "Discord webhook error: HTTP 500" in caplog.text


def test_transport_error_is_swallowed(caplog):
    """Test connection failures never reach the caller."""
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    notifier = make_notifier(handler)

    with caplog.at_level(logging.ERROR):
        notifier.notify("hello")
        notifier.close()

    assert "Discord webhook error: boom" in caplog.text


def test_notify_after_close_is_dropped(caplog):
    """Test late notifications during shutdown are skipped quietly."""
    notifier = make_notifier(lambda request: httpx.Response(204))
    notifier.close()

    with caplog.at_level(logging.WARNING):
        notifier.notify("late")

    assert "Discord webhook skipped" in caplog.text


def test_log_notifier_logs_message(caplog):
    with caplog.at_level(logging.INFO):
        LogNotifier().notify("New Session")

    assert "[NOTIFY] New Session" in caplog.text


def test_unexpected_error_is_logged(caplog):
    """Test errors outside httpx's hierarchy are logged, not lost in the future."""
    def handler(request):
        raise RuntimeError("kaput")

    notifier = make_notifier(handler)

    with caplog.at_level(logging.ERROR):
        notifier.notify("hello")
        notifier.close()

    assert "Discord webhook error: kaput" in caplog.text


def test_malformed_webhook_url_is_logged(caplog):
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    notifier = DiscordWebhookNotifier("http://[not-a-host", client=client)

    with caplog.at_level(logging.ERROR):
        notifier.notify("hello")
        notifier.close()

    assert "Discord webhook error:" in caplog.text
