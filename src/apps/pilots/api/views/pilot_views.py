# src/apps/pilots/api/views/pilot_views.py
"""
Pilot Views

Roster, rank ladder and account-linking endpoints.
"""

import logging

from django.utils import timezone
from django_filters import rest_framework as filters
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.exceptions import NotFoundException
from common.permissions import IsAdmin, IsAdminOrReadOnly, Roles

from ...models import Pilot, RankConfig, UserRole, AuthIdentity, BonusTier
from ...services import (
    PilotService,
    ActivityService,
    BonusService,
    AdminSetupService,
)
from ..serializers import (
    PilotListSerializer,
    PilotDetailSerializer,
    PilotProfileUpdateSerializer,
    PilotStreakSerializer,
    RankConfigSerializer,
    UserRoleSerializer,
    AuthIdentitySerializer,
    BonusTierSerializer,
)

logger = logging.getLogger(__name__)


class PilotFilter(filters.FilterSet):
    pid = filters.CharFilter(lookup_expr='icontains')
    full_name = filters.CharFilter(lookup_expr='icontains')
    current_rank = filters.CharFilter()
    discord_user_id = filters.CharFilter()

    class Meta:
        model = Pilot
        fields = ['pid', 'full_name', 'current_rank', 'discord_user_id']


class PilotViewSet(viewsets.ModelViewSet):
    """
    Pilot roster.

    Everyone signed in can browse the roster; only admins edit it. The
    ``me`` action lets a pilot read and update their own profile.
    """

    queryset = Pilot.objects.all()
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = PilotFilter
    search_fields = ['pid', 'full_name', 'discord_username']
    ordering_fields = ['pid', 'total_hours', 'total_pireps', 'created_at']
    ordering = ['pid']
    http_method_names = ['get', 'patch', 'put', 'delete', 'head', 'options']

    def get_serializer_class(self):
        if self.action == 'list':
            return PilotListSerializer
        return PilotDetailSerializer

    def _own_pilot(self, request) -> Pilot:
        pilot = PilotService.for_user(request.user.id)
        if pilot is None:
            raise NotFoundException('No pilot profile for this account')
        return pilot

    @action(detail=False, methods=['get', 'patch'], permission_classes=[IsAuthenticated])
    def me(self, request):
        """Current user's pilot profile."""
        pilot = self._own_pilot(request)

        if request.method == 'PATCH':
            serializer = PilotProfileUpdateSerializer(pilot, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()

        data = PilotDetailSerializer(pilot).data
        data['roles'] = PilotService.roles_for(request.user.id)
        return Response(data)

    @action(detail=False, methods=['get'])
    def leaderboard(self, request):
        """Pilots ranked by credited hours."""
        try:
            limit = min(int(request.query_params.get('limit', 100)), 500)
        except ValueError:
            limit = 100
        pilots = PilotService.leaderboard(limit=limit)
        return Response(PilotListSerializer(pilots, many=True).data)

    @action(detail=True, methods=['get'])
    def activity(self, request, pk=None):
        """Activity-requirement compliance for a pilot."""
        pilot = self.get_object()
        return Response(ActivityService.status(pilot, today=timezone.now().date()))

    @action(detail=True, methods=['get'], url_path='bonus-card')
    def bonus_card(self, request, pk=None):
        pilot = self.get_object()
        try:
            return Response(BonusService.card_for(pilot))
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    @action(detail=True, methods=['get'])
    def streak(self, request, pk=None):
        pilot = self.get_object()
        streak = getattr(pilot, 'streak', None)
        if streak is None:
            return Response({'current_streak': 0, 'longest_streak': 0, 'last_pirep_date': None})
        return Response(PilotStreakSerializer(streak).data)


class RankConfigViewSet(viewsets.ModelViewSet):
    """Rank ladder."""

    queryset = RankConfig.objects.all()
    serializer_class = RankConfigSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None
    ordering = ['order_index']


class BonusTierViewSet(viewsets.ModelViewSet):
    queryset = BonusTier.objects.all()
    serializer_class = BonusTierSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None
    ordering = ['min_hours', 'sort_order']


class UserRoleViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """Role grants. Admin only."""

    queryset = UserRole.objects.all()
    serializer_class = UserRoleSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ['user_id', 'role']


class AuthIdentityViewSet(viewsets.ModelViewSet):
    """
    Linked login identities.

    Admins see every identity; other users only their own and may only
    link identities to their own account.
    """

    serializer_class = AuthIdentitySerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['provider', 'user_id']

    def get_queryset(self):
        queryset = AuthIdentity.objects.all()
        if Roles.ADMIN not in getattr(self.request.user, 'roles', []):
            queryset = queryset.filter(user_id=self.request.user.id)
        return queryset

    def perform_create(self, serializer):
        user_id = self.request.user.id
        if Roles.ADMIN in getattr(self.request.user, 'roles', []):
            user_id = serializer.validated_data.get('user_id') or user_id
        serializer.save(user_id=user_id)


class AdminSetupView(APIView):
    """
    POST /api/v1/admin/setup/

    Grants the admin role to a whitelisted email on first sign-in.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        result = AdminSetupService.setup_admin(request.user.id, request.user.email)
        if not result['setup']:
            return Response(result, status=status.HTTP_403_FORBIDDEN)
        return Response(result)
