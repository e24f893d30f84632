"""
Academy API serializers.
"""

from .course_serializers import (
    LessonSerializer,
    CourseModuleSerializer,
    CourseListSerializer,
    CourseDetailSerializer,
    EnrollmentSerializer,
    CompleteLessonSerializer,
)
from .exam_serializers import (
    ExamQuestionSerializer,
    ExamQuestionPublicSerializer,
    ExamListSerializer,
    ExamDetailSerializer,
    ExamSubmitSerializer,
    ExamAttemptSerializer,
    PracticalSerializer,
    PracticalResultSerializer,
    RecruitmentSessionSerializer,
)

__all__ = [
    'LessonSerializer',
    'CourseModuleSerializer',
    'CourseListSerializer',
    'CourseDetailSerializer',
    'EnrollmentSerializer',
    'CompleteLessonSerializer',
    'ExamQuestionSerializer',
    'ExamQuestionPublicSerializer',
    'ExamListSerializer',
    'ExamDetailSerializer',
    'ExamSubmitSerializer',
    'ExamAttemptSerializer',
    'PracticalSerializer',
    'PracticalResultSerializer',
    'RecruitmentSessionSerializer',
]
