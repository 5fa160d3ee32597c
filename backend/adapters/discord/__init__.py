"""Discord webhook adapter for outbound notifications."""

from .webhook_notifier import DiscordWebhookNotifier

__all__ = ["DiscordWebhookNotifier"]
