# src/apps/content/api/serializers/content_serializers.py
from rest_framework import serializers

from ...models import Announcement, Notam, SiteSetting, SidebarLink, Notification


class AnnouncementSerializer(serializers.ModelSerializer):

    class Meta:
        model = Announcement
        fields = ['id', 'title', 'content', 'created_by', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']


class NotamSerializer(serializers.ModelSerializer):

    class Meta:
        model = Notam
        fields = ['id', 'title', 'content', 'priority', 'expires_at', 'is_active', 'created_at']
        read_only_fields = ['id', 'created_at']


class SiteSettingSerializer(serializers.ModelSerializer):

    class Meta:
        model = SiteSetting
        fields = ['key', 'value', 'updated_at']
        read_only_fields = ['updated_at']


class SidebarLinkSerializer(serializers.ModelSerializer):

    class Meta:
        model = SidebarLink
        fields = ['id', 'label', 'url', 'icon', 'sort_order', 'is_active']


class NotificationSerializer(serializers.ModelSerializer):

    class Meta:
        model = Notification
        fields = [
            'id',
            'title',
            'message',
            'type',
            'related_entity',
            'related_id',
            'is_read',
            'read_at',
            'created_at',
        ]
        read_only_fields = fields


class MarkReadSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), required=False)
