# src/apps/academy/services/exam_service.py
"""
Exam Service

Scoring and attempt bookkeeping for multiple-choice exams. Recruitment
attempts carry the session token handed out in the recruit's Discord
channel and are not limited by ``max_attempts``; the retest cooldown
governs them instead.
"""

import logging
from typing import Dict, Any, Optional

from django.db import transaction
from django.utils import timezone

from ..models import Exam, ExamAttempt, RecruitmentExamSession
from .course_service import percent
from .exceptions import (
    ExamNotAvailableError,
    ExamAttemptsExhaustedError,
    RecruitmentSessionNotFoundError,
)

logger = logging.getLogger(__name__)


class ExamService:

    @staticmethod
    def score(exam: Exam, answers: Dict[str, Any]) -> Dict[str, Any]:
        """
        Grade ``answers`` (question id -> selected option index).

        Returns:
            Dict with ``score`` (0-100), ``passed``, ``correct``, ``total``
            and ``results`` keyed by question id
        """
        answers = {str(k): v for k, v in (answers or {}).items()}
        questions = list(exam.questions.all())

        results = {}
        correct = 0
        for question in questions:
            selected = answers.get(str(question.id))
            try:
                selected = int(selected) if selected is not None else None
            except (TypeError, ValueError):
                selected = None

            is_correct = selected is not None and selected == question.correct_index
            correct += int(is_correct)
            results[str(question.id)] = {
                'selected': selected,
                'correct_index': question.correct_index,
                'is_correct': is_correct,
                'explanation': question.explanation,
            }

        total = len(questions)
        score = percent(correct, total)
        return {
            'score': score,
            'passed': score >= exam.passing_score,
            'correct': correct,
            'total': total,
            'results': results,
        }

    @staticmethod
    def completed_attempts(exam: Exam, user_id) -> int:
        return ExamAttempt.objects.filter(
            exam=exam,
            user_id=user_id,
            completed_at__isnull=False,
            recruitment_session__isnull=True,
        ).count()

    @staticmethod
    def remaining_attempts(exam: Exam, user_id) -> int:
        return max(0, exam.max_attempts - ExamService.completed_attempts(exam, user_id))

    @staticmethod
    @transaction.atomic
    def submit_attempt(
        exam: Exam,
        user_id,
        answers: Dict[str, Any],
        recruitment_token: Optional[str] = None,
        pilot=None,
    ) -> Dict[str, Any]:
        """
        Grade and store an attempt.

        Raises:
            ExamNotAvailableError: unpublished exam without a recruitment token
            ExamAttemptsExhaustedError: no attempts left
            RecruitmentSessionNotFoundError: token unknown or for another exam
            RecruitmentError: recruitment session already submitted
        """
        from .recruitment_service import RecruitmentService

        session = None
        if recruitment_token:
            session = RecruitmentExamSession.objects.filter(token=recruitment_token, exam=exam).first()
            if session is None:
                raise RecruitmentSessionNotFoundError()
        elif not exam.is_published:
            raise ExamNotAvailableError(exam.id)
        elif ExamService.completed_attempts(exam, user_id) >= exam.max_attempts:
            raise ExamAttemptsExhaustedError(exam.max_attempts)

        graded = ExamService.score(exam, answers)
        now = timezone.now()

        attempt = ExamAttempt.objects.create(
            exam=exam,
            user_id=user_id,
            pilot=pilot,
            recruitment_session=session,
            answers=answers or {},
            score=graded['score'],
            passed=graded['passed'],
            completed_at=now,
        )

        if session is not None:
            RecruitmentService.submit_exam(recruitment_token, graded['passed'], graded['score'], now=now)
            if user_id and not session.auth_user_id:
                RecruitmentExamSession.objects.filter(id=session.id).update(auth_user_id=user_id)

        logger.info(f"Exam attempt {attempt.id} on {exam.title}: {graded['score']}%")

        response = {
            'attempt': attempt,
            'score': graded['score'],
            'passed': graded['passed'],
            'correct': graded['correct'],
            'total': graded['total'],
        }
        if exam.show_explanations:
            response['results'] = graded['results']
        return response
