"""
Site content: announcements, NOTAMs, settings, sidebar links and in-app
notifications.
"""

from .content import Announcement, Notam, NotamPriority, SiteSetting, SidebarLink
from .notification import Notification

__all__ = [
    'Announcement',
    'Notam',
    'NotamPriority',
    'SiteSetting',
    'SidebarLink',
    'Notification',
]
