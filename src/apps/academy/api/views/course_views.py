# src/apps/academy/api/views/course_views.py
"""
Course Views

Courses with their nested modules, lessons and enrollments.
"""

from django.shortcuts import get_object_or_404
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.exceptions import NotFoundException
from common.permissions import IsAdminOrReadOnly, Roles
from apps.pilots.services import PilotService

from ...models import Course, CourseModule, Lesson, Enrollment
from ...services import CourseService
from ..serializers import (
    CourseListSerializer,
    CourseDetailSerializer,
    CourseModuleSerializer,
    LessonSerializer,
    EnrollmentSerializer,
    CompleteLessonSerializer,
)


def _is_admin(request) -> bool:
    return Roles.ADMIN in getattr(request.user, 'roles', [])


class CourseViewSet(viewsets.ModelViewSet):
    """
    Training courses.

    Pilots only see published courses.
    """

    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['category', 'is_published', 'is_required']
    search_fields = ['title', 'description']
    ordering = ['sort_order', 'title']

    def get_queryset(self):
        queryset = Course.objects.prefetch_related('modules__lessons')
        if not _is_admin(self.request):
            queryset = queryset.filter(is_published=True)
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return CourseListSerializer
        return CourseDetailSerializer

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def enroll(self, request, pk=None):
        course = self.get_object()
        pilot = PilotService.for_user(request.user.id)
        if pilot is None:
            raise NotFoundException('No pilot profile for this account')

        enrollment = CourseService.enroll(course, pilot)
        return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)


class CourseModuleViewSet(viewsets.ModelViewSet):
    """Modules of one course (nested under ``courses/{course_pk}/``)."""

    serializer_class = CourseModuleSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None

    def get_queryset(self):
        return CourseModule.objects.filter(
            course_id=self.kwargs['course_pk']
        ).prefetch_related('lessons').order_by('sort_order')

    def perform_create(self, serializer):
        course = get_object_or_404(Course, pk=self.kwargs['course_pk'])
        serializer.save(course=course)


class LessonViewSet(viewsets.ModelViewSet):
    queryset = Lesson.objects.select_related('module')
    serializer_class = LessonSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['module']
    ordering = ['module', 'sort_order']


class EnrollmentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    serializer_class = EnrollmentSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['course', 'status']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = Enrollment.objects.select_related('course', 'pilot')
        if not _is_admin(self.request):
            queryset = queryset.filter(pilot__user_id=self.request.user.id)
        return queryset

    @action(detail=True, methods=['post'], url_path='complete-lesson')
    def complete_lesson(self, request, pk=None):
        enrollment = self.get_object()
        serializer = CompleteLessonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            enrollment = CourseService.complete_lesson(enrollment, serializer.validated_data['lesson_id'])
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(EnrollmentSerializer(enrollment).data)
