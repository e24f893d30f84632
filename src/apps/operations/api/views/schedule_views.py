# src/apps/operations/api/views/schedule_views.py
"""
Schedule Views

Routes of the week, daily featured routes, challenges and events.
"""

import logging

from django.utils import timezone
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.exceptions import NotFoundException
from common.permissions import IsAdminOrReadOnly
from apps.pilots.services import PilotService

from ...models import RouteOfWeek, DailyFeaturedRoute, Challenge, Event
from ...services import RouteService, ChallengeService, EventService
from ..serializers import (
    RouteOfWeekSerializer,
    DailyFeaturedRouteSerializer,
    FeatureRoutesSerializer,
    ChallengeSerializer,
    ChallengeCompletionSerializer,
    EventSerializer,
    EventRegistrationSerializer,
)

logger = logging.getLogger(__name__)


def _pilot_or_404(request):
    pilot = PilotService.for_user(request.user.id)
    if pilot is None:
        raise NotFoundException('No pilot profile for this account')
    return pilot


class RouteOfWeekViewSet(viewsets.ModelViewSet):
    queryset = RouteOfWeek.objects.select_related('route')
    serializer_class = RouteOfWeekSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['week_start']
    ordering = ['-week_start', 'day_of_week']

    def create(self, request, *args, **kwargs):
        """Set (or replace) the route for one day of a week."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = RouteService.set_route_of_day(
                serializer.validated_data['week_start'],
                serializer.validated_data['day_of_week'],
                serializer.validated_data['route'],
            )
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(RouteOfWeekSerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def current(self, request):
        entries = RouteService.routes_of_week()
        return Response(RouteOfWeekSerializer(entries, many=True).data)


class DailyFeaturedRouteViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    queryset = DailyFeaturedRoute.objects.select_related('route')
    serializer_class = DailyFeaturedRouteSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['featured_date']
    ordering = ['-featured_date']

    def create(self, request, *args, **kwargs):
        """Feature several routes on one day; new ones are announced on Discord."""
        serializer = FeatureRoutesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        created = RouteService.set_featured(
            serializer.validated_data['featured_date'],
            serializer.validated_data['route_ids'],
        )
        return Response(
            DailyFeaturedRouteSerializer(created, many=True).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['get'])
    def today(self, request):
        entries = RouteService.featured_for(timezone.now().date())
        return Response(DailyFeaturedRouteSerializer(entries, many=True).data)


class ChallengeViewSet(viewsets.ModelViewSet):
    """Destination challenges. Creating one posts it to Discord."""

    queryset = Challenge.objects.all()
    serializer_class = ChallengeSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['is_active']
    search_fields = ['name', 'destination_icao']
    ordering = ['-created_at']

    def perform_create(self, serializer):
        serializer.instance = ChallengeService.create(**serializer.validated_data)

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def accept(self, request, pk=None):
        challenge = self.get_object()
        pilot = _pilot_or_404(request)

        try:
            completion = ChallengeService.accept(challenge, pilot)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ChallengeCompletionSerializer(completion).data)


class EventViewSet(viewsets.ModelViewSet):
    """
    Group flight events.

    Joining assigns the next free departure and arrival gate.
    """

    queryset = Event.objects.all()
    serializer_class = EventSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['is_active', 'server', 'dep_icao', 'arr_icao']
    search_fields = ['name', 'dep_icao', 'arr_icao']
    ordering_fields = ['start_time', 'name']
    ordering = ['start_time']

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def join(self, request, pk=None):
        event = self.get_object()
        pilot = _pilot_or_404(request)

        registration = EventService.join(event, pilot, discord_user_id=pilot.discord_user_id)
        return Response(EventRegistrationSerializer(registration).data)

    @action(detail=False, methods=['get'])
    def upcoming(self, request):
        """Active events starting in the next ``days`` days (default 2)."""
        try:
            days = int(request.query_params.get('days', 2))
            limit = int(request.query_params.get('limit', 5))
        except ValueError:
            return Response({'error': 'days and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)

        events = EventService.upcoming(days=days, limit=limit)
        return Response(EventSerializer(events, many=True).data)

    @action(detail=True, methods=['get'])
    def registrations(self, request, pk=None):
        event = self.get_object()
        registrations = event.registrations.select_related('pilot').order_by('created_at')
        return Response(EventRegistrationSerializer(registrations, many=True).data)
