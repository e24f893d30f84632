from django.contrib import admin

from .models import Announcement, Notam, SiteSetting, SidebarLink, Notification
from .services import SiteSettingService


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ['title', 'is_active', 'created_at']


@admin.register(Notam)
class NotamAdmin(admin.ModelAdmin):
    list_display = ['title', 'priority', 'expires_at', 'is_active']
    list_filter = ['priority', 'is_active']


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'value']
    search_fields = ['key']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        SiteSettingService.invalidate(obj.key)

    def delete_model(self, request, obj):
        super().delete_model(request, obj)
        SiteSettingService.invalidate(obj.key)


@admin.register(SidebarLink)
class SidebarLinkAdmin(admin.ModelAdmin):
    list_display = ['label', 'url', 'sort_order', 'is_active']


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['recipient', 'title', 'type', 'is_read', 'created_at']
    list_filter = ['type', 'is_read']
