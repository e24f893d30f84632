# src/apps/content/services/notams.py
from django.db.models import Q
from django.utils import timezone

from ..models import Notam


class NotamService:

    @staticmethod
    def active(now=None, limit: int = None):
        """Active NOTAMs that have not expired, newest first."""
        now = now or timezone.now()
        queryset = Notam.objects.filter(is_active=True).filter(
            Q(expires_at__isnull=True) | Q(expires_at__gte=now)
        ).order_by('-created_at')
        if limit:
            queryset = queryset[:limit]
        return queryset
