"""
Academy API views.
"""

from .course_views import CourseViewSet, CourseModuleViewSet, LessonViewSet, EnrollmentViewSet
from .exam_views import ExamViewSet, ExamQuestionViewSet
from .practical_views import PracticalViewSet, RecruitmentSessionViewSet

__all__ = [
    'CourseViewSet',
    'CourseModuleViewSet',
    'LessonViewSet',
    'EnrollmentViewSet',
    'ExamViewSet',
    'ExamQuestionViewSet',
    'PracticalViewSet',
    'RecruitmentSessionViewSet',
]
