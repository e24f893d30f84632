# src/apps/discord/api/urls.py
"""
Discord job triggers, mounted under /api/v1/discord/.

The interactions endpoint itself lives at /discord/interactions/.
"""

from django.urls import path

from .views import (
    RegisterCommandsView,
    RecruitmentRetestRunView,
    EventReminderRunView,
    FeaturedNotifyView,
    WebhookNotifyView,
)

urlpatterns = [
    path('commands/register/', RegisterCommandsView.as_view(), name='discord-register-commands'),
    path('recruitment/retests/run/', RecruitmentRetestRunView.as_view(), name='discord-recruitment-retests'),
    path('events/reminders/run/', EventReminderRunView.as_view(), name='discord-event-reminders'),
    path('featured/notify/', FeaturedNotifyView.as_view(), name='discord-featured-notify'),
    path('notify/', WebhookNotifyView.as_view(), name='discord-notify'),
]
