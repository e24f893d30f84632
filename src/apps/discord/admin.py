from django.contrib import admin

from .models import EventDiscordReminder


@admin.register(EventDiscordReminder)
class EventDiscordReminderAdmin(admin.ModelAdmin):
    list_display = ['event', 'reminder_type', 'thread_id', 'created_at']
