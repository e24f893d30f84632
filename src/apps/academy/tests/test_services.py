# src/apps/academy/tests/test_services.py
"""
Tests for course, exam and practical services
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.academy.models import (
    Course,
    CourseModule,
    Lesson,
    EnrollmentStatus,
    ExamAttempt,
    PracticalStatus,
)
from apps.academy.services import (
    CourseService,
    ExamService,
    PracticalService,
    ExamNotAvailableError,
    ExamAttemptsExhaustedError,
    RecruitmentSessionNotFoundError,
    RecruitmentError,
)


pytestmark = pytest.mark.django_db


@pytest.fixture
def course():
    course = Course.objects.create(title='Type Rating', is_published=True)
    module = CourseModule.objects.create(course=course, title='Systems')
    Lesson.objects.create(module=module, title='Hydraulics', sort_order=0)
    Lesson.objects.create(module=module, title='Electrics', sort_order=1)
    return course


class TestCourseService:
    """Tests for enrollment and lesson progress."""

    def test_enroll_is_idempotent(self, course, pilot):
        """Test enrolling twice returns the same enrollment."""
        first = CourseService.enroll(course, pilot)
        second = CourseService.enroll(course, pilot)

        assert first.id == second.id
        assert first.status == EnrollmentStatus.ENROLLED

    def test_complete_lessons_advances_status(self, course, pilot):
        """Test progress moves to in_progress then completed."""
        enrollment = CourseService.enroll(course, pilot)
        first, second = Lesson.objects.filter(module__course=course).order_by('sort_order')

        enrollment = CourseService.complete_lesson(enrollment, first)
        assert enrollment.status == EnrollmentStatus.IN_PROGRESS
        assert CourseService.progress(enrollment) == 50

        enrollment = CourseService.complete_lesson(enrollment, second)
        assert enrollment.status == EnrollmentStatus.COMPLETED
        assert enrollment.completed_at is not None
        assert CourseService.progress(enrollment) == 100

    def test_progress_rounds_half_up(self, course, pilot):
        """Test 5 of 8 lessons reports 63 percent."""
        module = course.modules.get()
        for i in range(2, 8):
            Lesson.objects.create(module=module, title=f"Lesson {i}", sort_order=i)
        enrollment = CourseService.enroll(course, pilot)

        for lesson in Lesson.objects.filter(module__course=course).order_by('sort_order')[:5]:
            enrollment = CourseService.complete_lesson(enrollment, lesson)

        assert CourseService.progress(enrollment) == 63

    def test_lesson_from_other_course(self, course, pilot):
        """Test a lesson of another course is rejected."""
        other = Course.objects.create(title='Other')
        module = CourseModule.objects.create(course=other, title='M')
        stray = Lesson.objects.create(module=module, title='Stray')
        enrollment = CourseService.enroll(course, pilot)

        with pytest.raises(ValueError):
            CourseService.complete_lesson(enrollment, stray)


class TestExamScoring:
    """Tests for grading."""

    def test_all_correct(self, create_exam, correct_answers):
        """Test a perfect sheet scores 100 and passes."""
        exam = create_exam(questions=4, passing_score=75)

        result = ExamService.score(exam, correct_answers(exam))

        assert result['score'] == 100
        assert result['passed'] is True
        assert result['correct'] == 4
        assert result['total'] == 4

    def test_threshold_is_inclusive(self, create_exam, correct_answers):
        """Test scoring exactly the passing score passes."""
        exam = create_exam(questions=4, passing_score=75)
        answers = correct_answers(exam)
        answers[next(iter(answers))] = 0

        result = ExamService.score(exam, answers)

        assert result['score'] == 75
        assert result['passed'] is True

    def test_score_is_rounded(self, create_exam, correct_answers):
        """Test percentages are rounded to whole numbers."""
        exam = create_exam(questions=3, passing_score=70)
        answers = correct_answers(exam)
        answers[next(iter(answers))] = 2

        result = ExamService.score(exam, answers)

        assert result['score'] == 67
        assert result['passed'] is False

    def test_half_scores_round_up(self, create_exam, correct_answers):
        """Test 5 of 8 scores 63 and meets a 63 pass mark."""
        exam = create_exam(questions=8, passing_score=63)
        answers = correct_answers(exam)
        for question_id in list(answers)[:3]:
            answers[question_id] = 0

        result = ExamService.score(exam, answers)

        assert result['correct'] == 5
        assert result['score'] == 63
        assert result['passed'] is True

    def test_missing_and_garbage_answers_are_wrong(self, create_exam):
        """Test unanswered and non-numeric answers count as wrong."""
        exam = create_exam(questions=2)
        first = exam.questions.first()

        result = ExamService.score(exam, {str(first.id): 'abc'})

        assert result['correct'] == 0
        assert result['results'][str(first.id)]['selected'] is None

    def test_exam_without_questions(self, create_exam):
        """Test an empty exam scores zero."""
        result = ExamService.score(create_exam(questions=0), {})

        assert result['score'] == 0
        assert result['passed'] is False


class TestSubmitAttempt:
    """Tests for attempt submission."""

    def test_unpublished_exam(self, create_exam, user_id):
        """Test unpublished exams cannot be taken without a token."""
        exam = create_exam(is_published=False)

        with pytest.raises(ExamNotAvailableError):
            ExamService.submit_attempt(exam, user_id, {})

    def test_attempt_limit(self, create_exam, user_id):
        """Test attempts stop at max_attempts."""
        exam = create_exam(is_published=True, max_attempts=2)
        ExamService.submit_attempt(exam, user_id, {})
        ExamService.submit_attempt(exam, user_id, {})

        assert ExamService.remaining_attempts(exam, user_id) == 0
        with pytest.raises(ExamAttemptsExhaustedError):
            ExamService.submit_attempt(exam, user_id, {})

    def test_explanations_only_when_enabled(self, create_exam, user_id, correct_answers):
        """Test per-question results are returned only with show_explanations."""
        hidden = create_exam(is_published=True)
        shown = create_exam(is_published=True, show_explanations=True)

        assert 'results' not in ExamService.submit_attempt(hidden, user_id, correct_answers(hidden))
        assert 'results' in ExamService.submit_attempt(shown, user_id, correct_answers(shown))

    def test_recruitment_token_completes_session(self, recruitment_exam, create_session, user_id, correct_answers):
        """Test a token submission records the result on the session."""
        session = create_session(recruitment_exam)

        result = ExamService.submit_attempt(
            recruitment_exam, user_id, correct_answers(recruitment_exam),
            recruitment_token=session.token,
        )

        session.refresh_from_db()
        assert result['passed'] is True
        assert session.passed is True
        assert session.score == 100
        assert str(session.auth_user_id) == user_id
        assert result['attempt'].recruitment_session == session

    def test_recruitment_attempts_do_not_count(self, recruitment_exam, create_session, user_id):
        """Test recruitment attempts do not use up regular attempts."""
        session = create_session(recruitment_exam)
        ExamService.submit_attempt(recruitment_exam, user_id, {}, recruitment_token=session.token)

        assert ExamService.completed_attempts(recruitment_exam, user_id) == 0

    def test_token_for_other_exam(self, recruitment_exam, create_exam, create_session, user_id):
        """Test a token only unlocks its own exam."""
        session = create_session(recruitment_exam)
        other = create_exam(is_published=True)

        with pytest.raises(RecruitmentSessionNotFoundError):
            ExamService.submit_attempt(other, user_id, {}, recruitment_token=session.token)

    def test_token_reuse_rolls_back_attempt(self, recruitment_exam, create_session, user_id):
        """Test a second submission with the same token stores nothing."""
        session = create_session(recruitment_exam)
        ExamService.submit_attempt(recruitment_exam, user_id, {}, recruitment_token=session.token)

        with pytest.raises(RecruitmentError):
            ExamService.submit_attempt(recruitment_exam, user_id, {}, recruitment_token=session.token)

        assert ExamAttempt.objects.count() == 1


class TestPracticalService:

    def test_complete_requires_verdict(self, pilot):
        """Test only passed/failed complete a practical."""
        practical = PracticalService.schedule(pilot)

        with pytest.raises(ValueError):
            PracticalService.complete(practical, PracticalStatus.SCHEDULED)

    def test_latest_failed(self, pilot):
        """Test the most recent failure is returned."""
        now = timezone.now()
        older = PracticalService.schedule(pilot)
        newer = PracticalService.schedule(pilot)
        PracticalService.complete(older, PracticalStatus.FAILED, now=now - timedelta(days=2))
        PracticalService.complete(newer, PracticalStatus.FAILED, now=now)

        assert PracticalService.latest_failed(pilot) == newer
