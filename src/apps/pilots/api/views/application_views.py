# src/apps/pilots/api/views/application_views.py
"""
Application Views

Pilot applications and leave of absence requests.
"""

from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.exceptions import CallsignTakenException, NotFoundException
from common.permissions import IsAdmin, Roles

from ...models import PilotApplication, LeaveOfAbsence
from ...services import ApplicationService, LeaveService, PilotService, PidTakenError
from ..serializers import (
    PilotApplicationSerializer,
    ApplicationApproveSerializer,
    ApplicationRejectSerializer,
    PilotDetailSerializer,
    LeaveOfAbsenceSerializer,
)


def _is_admin(request) -> bool:
    return Roles.ADMIN in getattr(request.user, 'roles', [])


class PilotApplicationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet
):
    """
    Pilot applications.

    Applicants submit and read their own application; admins review.
    """

    serializer_class = PilotApplicationSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['status']
    search_fields = ['full_name', 'email', 'discord_username']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = PilotApplication.objects.all()
        if not _is_admin(self.request):
            queryset = queryset.filter(user_id=self.request.user.id)
        return queryset

    def perform_create(self, serializer):
        serializer.save(user_id=self.request.user.id)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def approve(self, request, pk=None):
        application = self.get_object()
        serializer = ApplicationApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            pilot = ApplicationService.approve(
                application,
                serializer.validated_data['pid'],
                reviewed_by=request.user.id,
            )
        except PidTakenError as e:
            raise CallsignTakenException(e.message)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PilotDetailSerializer(pilot).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def reject(self, request, pk=None):
        application = self.get_object()
        serializer = ApplicationRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            application = ApplicationService.reject(
                application,
                serializer.validated_data['reason'],
                reviewed_by=request.user.id,
            )
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PilotApplicationSerializer(application).data)

    @action(detail=False, methods=['get'], url_path='next-pid', permission_classes=[IsAdmin])
    def next_pid(self, request):
        """Suggested callsign for the next approval."""
        try:
            return Response({'pid': PilotService.get_next_pid()})
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)


class LeaveOfAbsenceViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet
):
    serializer_class = LeaveOfAbsenceSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['status', 'pilot']
    ordering = ['-start_date']

    def get_queryset(self):
        queryset = LeaveOfAbsence.objects.select_related('pilot')
        if not _is_admin(self.request):
            queryset = queryset.filter(pilot__user_id=self.request.user.id)
        return queryset

    def create(self, request, *args, **kwargs):
        pilot = PilotService.for_user(request.user.id)
        if pilot is None:
            raise NotFoundException('No pilot profile for this account')

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        leave = LeaveService.request(pilot, **serializer.validated_data)
        return Response(LeaveOfAbsenceSerializer(leave).data, status=status.HTTP_201_CREATED)

    def _review(self, request, approve: bool):
        leave = self.get_object()
        try:
            leave = LeaveService.review(leave, approve=approve, reviewed_by=request.user.id)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(LeaveOfAbsenceSerializer(leave).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def approve(self, request, pk=None):
        return self._review(request, approve=True)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def deny(self, request, pk=None):
        return self._review(request, approve=False)
