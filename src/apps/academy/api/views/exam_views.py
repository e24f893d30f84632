# src/apps/academy/api/views/exam_views.py
"""
Exam Views

Exams, their questions and attempt submission. A recruit taking the
written test reaches an unpublished recruitment exam through the
``recruitmentToken`` from their Discord channel.
"""

import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.exceptions import ExamAttemptsExhaustedException
from common.permissions import IsAdminOrReadOnly, Roles
from apps.pilots.services import PilotService

from ...models import Exam, ExamQuestion
from ...services import (
    ExamService,
    ExamNotAvailableError,
    ExamAttemptsExhaustedError,
    RecruitmentSessionNotFoundError,
    RecruitmentError,
)
from ..serializers import (
    ExamListSerializer,
    ExamDetailSerializer,
    ExamSubmitSerializer,
    ExamAttemptSerializer,
    ExamQuestionSerializer,
    ExamQuestionPublicSerializer,
)

logger = logging.getLogger(__name__)


def _is_admin(request) -> bool:
    return Roles.ADMIN in getattr(request.user, 'roles', [])


def _visible_exams(request):
    queryset = Exam.objects.all()
    if _is_admin(request):
        return queryset

    token = request.query_params.get('recruitmentToken')
    if not token and request.method == 'POST':
        token = request.data.get('recruitmentToken')
    visible = Q(is_published=True)
    if token:
        visible |= Q(recruitment_sessions__token=token)
    return queryset.filter(visible).distinct()


class ExamViewSet(viewsets.ModelViewSet):
    """
    Exams.

    Custom actions:
    - submit: grade an attempt (optionally for a recruitment session)
    - attempts-remaining: attempts left for the signed-in user
    """

    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['course', 'is_published']
    search_fields = ['title']
    ordering = ['title']

    def get_queryset(self):
        return _visible_exams(self.request)

    def get_serializer_class(self):
        if self.action == 'list':
            return ExamListSerializer
        elif self.action == 'submit':
            return ExamSubmitSerializer
        return ExamDetailSerializer

    def get_permissions(self):
        if self.action == 'submit':
            return [IsAuthenticated()]
        return super().get_permissions()

    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        exam = self.get_object()
        serializer = ExamSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = ExamService.submit_attempt(
                exam,
                request.user.id,
                serializer.validated_data['answers'],
                recruitment_token=serializer.validated_data.get('recruitmentToken') or None,
                pilot=PilotService.for_user(request.user.id),
            )
        except ExamAttemptsExhaustedError as e:
            raise ExamAttemptsExhaustedException(e.message)
        except (ExamNotAvailableError, RecruitmentSessionNotFoundError) as e:
            return Response({'error': e.message}, status=status.HTTP_404_NOT_FOUND)
        except RecruitmentError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

        attempt = result.pop('attempt')
        return Response(
            {'attempt': ExamAttemptSerializer(attempt).data, **result},
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['get'], url_path='attempts-remaining')
    def attempts_remaining(self, request, pk=None):
        exam = self.get_object()
        return Response({
            'max_attempts': exam.max_attempts,
            'used': ExamService.completed_attempts(exam, request.user.id),
            'remaining': ExamService.remaining_attempts(exam, request.user.id),
        })


class ExamQuestionViewSet(viewsets.ModelViewSet):
    """
    Questions of one exam (nested under ``exams/{exam_pk}/``).

    Non-admins get the options as plain text without the answer key.
    """

    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None

    def get_exam(self) -> Exam:
        return get_object_or_404(_visible_exams(self.request), pk=self.kwargs['exam_pk'])

    def get_queryset(self):
        return ExamQuestion.objects.filter(exam=self.get_exam()).order_by('sort_order')

    def get_serializer_class(self):
        if _is_admin(self.request):
            return ExamQuestionSerializer
        return ExamQuestionPublicSerializer

    def perform_create(self, serializer):
        serializer.save(exam=self.get_exam())
