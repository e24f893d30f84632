"""
Discord bot, webhook and scheduled-job services.
"""

from .signature import verify_signature
from .webhooks import WebhookRelay, WebhookNotConfiguredError, queue_webhook
from .featured import DailyFeaturedNotifier
from .reminders import EventReminderService
from .commands import CommandRegistry
from .interactions import InteractionDispatcher

__all__ = [
    'verify_signature',
    'WebhookRelay',
    'WebhookNotConfiguredError',
    'queue_webhook',
    'DailyFeaturedNotifier',
    'EventReminderService',
    'CommandRegistry',
    'InteractionDispatcher',
]
