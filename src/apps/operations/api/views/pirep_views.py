# src/apps/operations/api/views/pirep_views.py
"""
PIREP Views
"""

from django_filters import rest_framework as filters
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.exceptions import NotFoundException
from common.permissions import IsAdmin, Roles
from apps.pilots.services import PilotService

from ...models import Pirep, PirepStatus, PirepSource
from ...services import PirepService
from ..serializers import (
    PirepListSerializer,
    PirepDetailSerializer,
    PirepCreateSerializer,
    PirepReviewSerializer,
)


class PirepFilter(filters.FilterSet):
    status = filters.ChoiceFilter(choices=PirepStatus.choices)
    pilot = filters.UUIDFilter()
    date_from = filters.DateFilter(field_name='flight_date', lookup_expr='gte')
    date_to = filters.DateFilter(field_name='flight_date', lookup_expr='lte')

    class Meta:
        model = Pirep
        fields = ['status', 'pilot', 'flight_type', 'source']


class PirepViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet
):
    """
    Flight reports.

    Pilots file and read their own PIREPs; admins see everything and
    review. Hours are only credited on approval.
    """

    permission_classes = [IsAuthenticated]
    filterset_class = PirepFilter
    search_fields = ['flight_number', 'dep_icao', 'arr_icao', 'pilot__pid']
    ordering_fields = ['flight_date', 'created_at', 'flight_hours']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = Pirep.objects.select_related('pilot')
        if Roles.ADMIN not in getattr(self.request.user, 'roles', []):
            queryset = queryset.filter(pilot__user_id=self.request.user.id)
        return queryset

    def get_serializer_class(self):
        if self.action in ('list', 'mine'):
            return PirepListSerializer
        elif self.action == 'create':
            return PirepCreateSerializer
        return PirepDetailSerializer

    def create(self, request, *args, **kwargs):
        """File a PIREP for the signed-in pilot."""
        pilot = PilotService.for_user(request.user.id)
        if pilot is None:
            raise NotFoundException('No pilot profile for this account')

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            pirep = PirepService.file_pirep(pilot=pilot, source=PirepSource.WEB, **serializer.validated_data)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PirepDetailSerializer(pirep).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def review(self, request, pk=None):
        pirep = self.get_object()
        serializer = PirepReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            pirep = PirepService.review(
                pirep,
                serializer.validated_data['status'],
                reason=serializer.validated_data['reason'],
                reviewed_by=request.user.id,
            )
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PirepDetailSerializer(pirep).data)

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """The signed-in pilot's PIREPs, admins included."""
        queryset = self.filter_queryset(
            Pirep.objects.select_related('pilot').filter(pilot__user_id=request.user.id)
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(PirepListSerializer(page, many=True).data)
        return Response(PirepListSerializer(queryset, many=True).data)
