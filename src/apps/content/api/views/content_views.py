# src/apps/content/api/views/content_views.py
"""
Content Views
"""

from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.permissions import IsAdminOrReadOnly
from apps.pilots.services import PilotService

from ...models import Announcement, Notam, SiteSetting, SidebarLink, Notification
from ...services import NotamService, NotificationService, SiteSettingService
from ..serializers import (
    AnnouncementSerializer,
    NotamSerializer,
    SiteSettingSerializer,
    SidebarLinkSerializer,
    NotificationSerializer,
    MarkReadSerializer,
)


class AnnouncementViewSet(viewsets.ModelViewSet):
    queryset = Announcement.objects.all()
    serializer_class = AnnouncementSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['is_active']
    ordering = ['-created_at']

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user.id)


class NotamViewSet(viewsets.ModelViewSet):
    queryset = Notam.objects.all()
    serializer_class = NotamSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['priority', 'is_active']
    ordering = ['-created_at']

    @action(detail=False, methods=['get'])
    def active(self, request):
        """Active NOTAMs that have not expired."""
        return Response(NotamSerializer(NotamService.active(), many=True).data)


class SiteSettingViewSet(viewsets.ModelViewSet):
    """
    Key/value site settings, addressed by key.

    Writes go through the settings service so cached values are dropped.
    """

    queryset = SiteSetting.objects.all()
    serializer_class = SiteSettingSerializer
    permission_classes = [IsAdminOrReadOnly]
    lookup_field = 'key'
    lookup_value_regex = '[^/]+'
    pagination_class = None
    ordering = ['key']

    def perform_create(self, serializer):
        serializer.instance = SiteSettingService.set(
            serializer.validated_data['key'],
            serializer.validated_data.get('value'),
        )

    def perform_update(self, serializer):
        serializer.instance = SiteSettingService.set(
            serializer.instance.key,
            serializer.validated_data.get('value', serializer.instance.value),
        )

    def perform_destroy(self, instance):
        key = instance.key
        instance.delete()
        SiteSettingService.invalidate(key)


class SidebarLinkViewSet(viewsets.ModelViewSet):
    queryset = SidebarLink.objects.all()
    serializer_class = SidebarLinkSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None
    ordering = ['sort_order', 'label']


class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """The signed-in pilot's in-app notifications."""

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['is_read', 'type']
    ordering = ['-created_at']

    def get_queryset(self):
        return Notification.objects.filter(recipient__user_id=self.request.user.id)

    @action(detail=False, methods=['get'], url_path='unread-count')
    def unread_count(self, request):
        pilot = PilotService.for_user(request.user.id)
        count = NotificationService.unread_count(pilot) if pilot else 0
        return Response({'count': count})

    @action(detail=False, methods=['post'], url_path='mark-read')
    def mark_read(self, request):
        """Mark the listed notifications, or all of them, as read."""
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        pilot = PilotService.for_user(request.user.id)
        if pilot is None:
            return Response({'updated': 0})

        updated = NotificationService.mark_read(pilot, serializer.validated_data.get('ids'))
        return Response({'updated': updated}, status=status.HTTP_200_OK)
