"""
Academy services.
"""

from .exceptions import (
    AcademyError,
    ExamNotAvailableError,
    ExamAttemptsExhaustedError,
    RecruitmentError,
    RecruitmentSessionNotFoundError,
    CallsignTakenError,
    PracticalNotFoundError,
)
from .course_service import CourseService
from .exam_service import ExamService
from .practical_service import PracticalService
from .recruitment_service import RecruitmentService

__all__ = [
    'AcademyError',
    'ExamNotAvailableError',
    'ExamAttemptsExhaustedError',
    'RecruitmentError',
    'RecruitmentSessionNotFoundError',
    'CallsignTakenError',
    'PracticalNotFoundError',
    'CourseService',
    'ExamService',
    'PracticalService',
    'RecruitmentService',
]
