"""
Content API serializers.
"""

from .content_serializers import (
    AnnouncementSerializer,
    NotamSerializer,
    SiteSettingSerializer,
    SidebarLinkSerializer,
    NotificationSerializer,
    MarkReadSerializer,
)

__all__ = [
    'AnnouncementSerializer',
    'NotamSerializer',
    'SiteSettingSerializer',
    'SidebarLinkSerializer',
    'NotificationSerializer',
    'MarkReadSerializer',
]
