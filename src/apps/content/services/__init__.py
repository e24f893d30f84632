"""
Content services.
"""

from .site_settings import SiteSettingService
from .notifications import NotificationService
from .notams import NotamService

__all__ = [
    'SiteSettingService',
    'NotificationService',
    'NotamService',
]
