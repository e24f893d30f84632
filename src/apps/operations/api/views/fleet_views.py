# src/apps/operations/api/views/fleet_views.py
"""
Fleet Views

Aircraft, routes, multipliers and the gate lookup.
"""

import logging

from django_filters import rest_framework as filters
from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.permissions import IsAdminOrReadOnly

from ...models import Aircraft, Route, RouteType, MultiplierConfig
from ...services import GateService
from ..serializers import AircraftSerializer, RouteSerializer, MultiplierConfigSerializer

logger = logging.getLogger(__name__)


class AircraftViewSet(viewsets.ModelViewSet):
    queryset = Aircraft.objects.all()
    serializer_class = AircraftSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['icao_code', 'min_rank']
    search_fields = ['icao_code', 'name', 'livery']
    ordering_fields = ['icao_code', 'name', 'min_hours']
    ordering = ['icao_code', 'name']


class RouteFilter(filters.FilterSet):
    dep_icao = filters.CharFilter(lookup_expr='iexact')
    arr_icao = filters.CharFilter(lookup_expr='iexact')
    aircraft_icao = filters.CharFilter(lookup_expr='iexact')
    route_type = filters.ChoiceFilter(choices=RouteType.choices)
    max_minutes = filters.NumberFilter(field_name='est_flight_time_minutes', lookup_expr='lte')
    is_active = filters.BooleanFilter()

    class Meta:
        model = Route
        fields = ['dep_icao', 'arr_icao', 'aircraft_icao', 'route_type', 'min_rank', 'is_active']


class RouteViewSet(viewsets.ModelViewSet):
    """
    Route network.

    list supports filtering by airport pair, aircraft and type, plus
    ``max_minutes`` for block time.
    """

    queryset = Route.objects.all()
    serializer_class = RouteSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = RouteFilter
    search_fields = ['route_number', 'dep_icao', 'arr_icao', 'aircraft_icao']
    ordering_fields = ['route_number', 'est_flight_time_minutes', 'created_at']
    ordering = ['route_number']


class MultiplierConfigViewSet(viewsets.ModelViewSet):
    queryset = MultiplierConfig.objects.all()
    serializer_class = MultiplierConfigSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['is_active']
    pagination_class = None
    ordering = ['value']


class GateLookupView(APIView):
    """
    GET /api/v1/gates/?icao=UUEE&aircraft_icao=A320

    Gates at an airport, narrowed to those that fit the aircraft.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            result = GateService.fetch_gates(
                request.query_params.get('icao'),
                request.query_params.get('aircraft_icao'),
            )
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        if result.get('error'):
            return Response(result, status=status.HTTP_502_BAD_GATEWAY)
        return Response(result)
