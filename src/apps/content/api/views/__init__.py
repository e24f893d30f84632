"""
Content API views.
"""

from .content_views import (
    AnnouncementViewSet,
    NotamViewSet,
    SiteSettingViewSet,
    SidebarLinkViewSet,
    NotificationViewSet,
)

__all__ = [
    'AnnouncementViewSet',
    'NotamViewSet',
    'SiteSettingViewSet',
    'SidebarLinkViewSet',
    'NotificationViewSet',
]
