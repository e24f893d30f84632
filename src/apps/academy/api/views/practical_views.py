# src/apps/academy/api/views/practical_views.py
"""
Practical Views

Check-ride records and the recruitment session log.
"""

from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.permissions import IsAdmin, Roles

from ...models import Practical, RecruitmentExamSession
from ...services import PracticalService, RecruitmentService, RecruitmentError, PracticalNotFoundError
from ..serializers import PracticalSerializer, PracticalResultSerializer, RecruitmentSessionSerializer


class PracticalViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet
):
    """
    Practicals.

    Pilots see their own; admins schedule them and record results.
    """

    serializer_class = PracticalSerializer
    filterset_fields = ['status', 'pilot', 'course']
    ordering = ['-created_at']

    def get_permissions(self):
        if self.action in ('create', 'result'):
            return [IsAdmin()]
        return [IsAuthenticated()]

    def get_queryset(self):
        queryset = Practical.objects.select_related('pilot', 'course')
        if Roles.ADMIN not in getattr(self.request.user, 'roles', []):
            queryset = queryset.filter(pilot__user_id=self.request.user.id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        practical = PracticalService.schedule(
            data['pilot'],
            course=data.get('course'),
            scheduled_at=data.get('scheduled_at'),
            notes=data.get('notes', ''),
            examiner_id=data.get('examiner_id'),
        )
        return Response(PracticalSerializer(practical).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def result(self, request, pk=None):
        """
        Record pass/fail.

        Recruitment practicals also update the recruit's Discord channel
        and roles; a failure schedules the retest.
        """
        serializer = PracticalResultSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            outcome = RecruitmentService.apply_practical_result(
                pk,
                serializer.validated_data['status'],
                remarks=serializer.validated_data['remarks'],
                examiner_id=request.user.id,
            )
        except PracticalNotFoundError as e:
            return Response({'error': e.message}, status=status.HTTP_404_NOT_FOUND)
        except RecruitmentError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'action': outcome['action'],
            'practical': PracticalSerializer(outcome['practical']).data,
            'retest': PracticalSerializer(outcome['retest']).data if outcome['retest'] else None,
        })


class RecruitmentSessionViewSet(viewsets.ReadOnlyModelViewSet):
    """Recruitment exam sessions, newest first. Admin only."""

    queryset = RecruitmentExamSession.objects.select_related('exam')
    serializer_class = RecruitmentSessionSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ['discord_user_id', 'passed']
    ordering = ['-created_at']
