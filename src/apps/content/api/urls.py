# src/apps/content/api/urls.py
"""
Content API URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    AnnouncementViewSet,
    NotamViewSet,
    SiteSettingViewSet,
    SidebarLinkViewSet,
    NotificationViewSet,
)

router = DefaultRouter()
router.register(r'announcements', AnnouncementViewSet, basename='announcement')
router.register(r'notams', NotamViewSet, basename='notam')
router.register(r'settings', SiteSettingViewSet, basename='site-setting')
router.register(r'sidebar-links', SidebarLinkViewSet, basename='sidebar-link')
router.register(r'notifications', NotificationViewSet, basename='notification')

urlpatterns = [
    path('', include(router.urls)),
]

# API URL Patterns Summary:
#
#   GET/POST    /api/v1/announcements/
#   GET/POST    /api/v1/notams/
#   GET         /api/v1/notams/active/
#   GET/POST    /api/v1/settings/
#   GET/PUT/DEL /api/v1/settings/{key}/
#   GET/POST    /api/v1/sidebar-links/
#   GET         /api/v1/notifications/
#   GET         /api/v1/notifications/unread-count/
#   POST        /api/v1/notifications/mark-read/
