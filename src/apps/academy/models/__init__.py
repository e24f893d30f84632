"""
Academy Models

Courses, exams, practicals and the recruitment exam sessions.
"""

from .course import Course, CourseModule, Lesson, Enrollment, EnrollmentStatus, LessonProgress
from .exam import Exam, ExamQuestion, ExamAttempt
from .practical import Practical, PracticalStatus
from .recruitment import RecruitmentExamSession, RETEST_COOLDOWN

__all__ = [
    # Course
    'Course',
    'CourseModule',
    'Lesson',
    'Enrollment',
    'EnrollmentStatus',
    'LessonProgress',
    # Exam
    'Exam',
    'ExamQuestion',
    'ExamAttempt',
    # Practical
    'Practical',
    'PracticalStatus',
    # Recruitment
    'RecruitmentExamSession',
    'RETEST_COOLDOWN',
]
