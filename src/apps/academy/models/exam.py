# src/apps/academy/models/exam.py
"""
Exam Models

Multiple-choice exams, their questions and attempts.
"""

from django.db import models

from common.mixins import BaseModel
from apps.pilots.models import Pilot

from .course import Course


class Exam(BaseModel):
    """
    Exam definition.

    Passing requires ``score >= passing_score`` where score is the rounded
    percentage of correct answers.
    """

    course = models.ForeignKey(
        Course,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='exams'
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    passing_score = models.PositiveSmallIntegerField(default=70)
    max_attempts = models.PositiveSmallIntegerField(default=3)
    time_limit_minutes = models.PositiveIntegerField(null=True, blank=True)
    show_explanations = models.BooleanField(default=False)
    is_published = models.BooleanField(default=False)

    class Meta:
        db_table = 'exams'
        ordering = ['title']

    def __str__(self):
        return self.title


class ExamQuestion(BaseModel):
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='questions')
    question = models.TextField()
    # [{"text": "...", "is_correct": true}, ...]
    options = models.JSONField(default=list)
    explanation = models.TextField(blank=True, default='')
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'exam_questions'
        ordering = ['exam', 'sort_order']

    def __str__(self):
        return self.question[:80]

    @property
    def correct_index(self):
        for index, option in enumerate(self.options or []):
            if option.get('is_correct'):
                return index
        return None


class ExamAttempt(BaseModel):
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='attempts')
    user_id = models.UUIDField(null=True, blank=True, db_index=True)
    pilot = models.ForeignKey(
        Pilot,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='exam_attempts'
    )
    recruitment_session = models.ForeignKey(
        'academy.RecruitmentExamSession',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='attempts'
    )
    # question id -> selected option index
    answers = models.JSONField(default=dict, blank=True)
    score = models.PositiveSmallIntegerField(null=True, blank=True)
    passed = models.BooleanField(null=True, blank=True)
    started_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'exam_attempts'
        ordering = ['-started_at']

    def __str__(self):
        return f"{self.exam.title}: {self.score}"
