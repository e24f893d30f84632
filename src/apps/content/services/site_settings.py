# src/apps/content/services/site_settings.py
"""
Site Setting Service

Cached access to the admin-editable key/value settings.
"""

import logging
from typing import Optional

from django.core.cache import cache

from ..models import SiteSetting

logger = logging.getLogger(__name__)

CACHE_PREFIX = 'site_setting:'
CACHE_TIMEOUT = 300
_MISSING = '__missing__'


class SiteSettingService:
    """Read and write ``SiteSetting`` rows."""

    @staticmethod
    def _cache_key(key: str) -> str:
        return f"{CACHE_PREFIX}{key}"

    @staticmethod
    def get(key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Return the setting value, or ``default`` when the row is missing
        or holds an empty value.
        """
        cached = cache.get(SiteSettingService._cache_key(key))
        if cached is None:
            row = SiteSetting.objects.filter(key=key).values_list('value', flat=True).first()
            cached = row if row is not None else _MISSING
            cache.set(SiteSettingService._cache_key(key), cached, CACHE_TIMEOUT)

        if cached == _MISSING or not str(cached).strip():
            return default
        return str(cached).strip()

    @staticmethod
    def get_int(key: str, default: Optional[int] = None) -> Optional[int]:
        value = SiteSettingService.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Site setting {key} is not an integer: {value!r}")
            return default

    @staticmethod
    def require(key: str) -> str:
        """Return the value or raise ``ValueError('Missing site setting: key')``."""
        value = SiteSettingService.get(key)
        if value is None:
            raise ValueError(f"Missing site setting: {key}")
        return value

    @staticmethod
    def set(key: str, value: Optional[str]) -> SiteSetting:
        setting, _ = SiteSetting.objects.update_or_create(key=key, defaults={'value': value})
        SiteSettingService.invalidate(key)
        logger.info(f"Site setting updated: {key}")
        return setting

    @staticmethod
    def invalidate(key: str) -> None:
        cache.delete(SiteSettingService._cache_key(key))
