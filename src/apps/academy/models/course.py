# src/apps/academy/models/course.py
"""
Course Models

Training courses, their modules and lessons, plus pilot enrollments.
"""

from django.db import models

from common.mixins import BaseModel
from apps.pilots.models import Pilot


class Course(BaseModel):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    category = models.CharField(max_length=50, blank=True, default='')
    thumbnail_url = models.URLField(blank=True, default='')
    is_published = models.BooleanField(default=False)
    is_required = models.BooleanField(default=False)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'courses'
        ordering = ['sort_order', 'title']

    def __str__(self):
        return self.title

    @property
    def lesson_count(self) -> int:
        return Lesson.objects.filter(module__course=self).count()


class CourseModule(BaseModel):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='modules')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'course_modules'
        ordering = ['course', 'sort_order']

    def __str__(self):
        return f"{self.course.title}: {self.title}"


class Lesson(BaseModel):
    module = models.ForeignKey(CourseModule, on_delete=models.CASCADE, related_name='lessons')
    title = models.CharField(max_length=255)
    content = models.TextField(blank=True, default='')
    video_url = models.URLField(blank=True, default='')
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'course_lessons'
        ordering = ['module', 'sort_order']

    def __str__(self):
        return self.title


class EnrollmentStatus(models.TextChoices):
    ENROLLED = 'enrolled', 'Enrolled'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'


class Enrollment(BaseModel):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='enrollments')
    pilot = models.ForeignKey(Pilot, on_delete=models.CASCADE, related_name='enrollments')
    status = models.CharField(
        max_length=20,
        choices=EnrollmentStatus.choices,
        default=EnrollmentStatus.ENROLLED
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'course_enrollments'
        constraints = [
            models.UniqueConstraint(fields=['course', 'pilot'], name='uniq_course_enrollment'),
        ]

    def __str__(self):
        return f"{self.pilot.pid} - {self.course.title}"


class LessonProgress(BaseModel):
    enrollment = models.ForeignKey(Enrollment, on_delete=models.CASCADE, related_name='lesson_progress')
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='progress')
    completed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'lesson_progress'
        constraints = [
            models.UniqueConstraint(fields=['enrollment', 'lesson'], name='uniq_lesson_progress'),
        ]
