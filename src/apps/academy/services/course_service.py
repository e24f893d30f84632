# src/apps/academy/services/course_service.py
"""
Course Service

Enrollment and lesson progress tracking.
"""

import logging

from django.db import transaction
from django.utils import timezone

from ..models import Course, Enrollment, EnrollmentStatus, Lesson, LessonProgress

logger = logging.getLogger(__name__)


def percent(part: int, whole: int) -> int:
    """Whole-number percentage with halves rounded up, e.g. 5 of 8 is 63."""
    if not whole:
        return 0
    return (part * 200 + whole) // (2 * whole)


class CourseService:

    @staticmethod
    def enroll(course: Course, pilot) -> Enrollment:
        """Enroll a pilot; enrolling twice returns the existing enrollment."""
        enrollment, created = Enrollment.objects.get_or_create(course=course, pilot=pilot)
        if created:
            logger.info(f"{pilot.pid} enrolled in {course.title}")
        return enrollment

    @staticmethod
    @transaction.atomic
    def complete_lesson(enrollment: Enrollment, lesson: Lesson) -> Enrollment:
        """
        Mark a lesson done and advance the enrollment status.

        Raises:
            ValueError: lesson belongs to another course
        """
        if lesson.module.course_id != enrollment.course_id:
            raise ValueError('Lesson does not belong to this course')

        LessonProgress.objects.get_or_create(enrollment=enrollment, lesson=lesson)

        total = enrollment.course.lesson_count
        done = enrollment.lesson_progress.count()

        if total and done >= total:
            enrollment.status = EnrollmentStatus.COMPLETED
            enrollment.completed_at = enrollment.completed_at or timezone.now()
        else:
            enrollment.status = EnrollmentStatus.IN_PROGRESS
        enrollment.save(update_fields=['status', 'completed_at', 'updated_at'])
        return enrollment

    @staticmethod
    def progress(enrollment: Enrollment) -> int:
        total = enrollment.course.lesson_count
        if not total:
            return 0
        return percent(enrollment.lesson_progress.count(), total)
