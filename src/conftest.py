# src/conftest.py
"""
Pytest Configuration and Fixtures

Shared fixtures for every crew center app.
"""

import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from common.authentication import JWTTokenGenerator


@pytest.fixture(autouse=True)
def clear_cache():
    """Site settings are cached; start every test cold."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client() -> APIClient:
    """Return a DRF API client instance."""
    return APIClient()


# ==================== ACCOUNT FIXTURES ====================

@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def admin_user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def make_token():
    """Factory fixture issuing access tokens."""
    def _make_token(user_id, roles=None, email=None) -> str:
        return JWTTokenGenerator.generate_access_token(
            user_id=str(user_id),
            email=email or f"{str(user_id)[:8]}@aflv.test",
            roles=roles or [],
        )
    return _make_token


@pytest.fixture
def pilot_client(api_client, make_token, pilot):
    """Client signed in as ``pilot``."""
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(pilot.user_id, roles=['pilot'])}")
    return api_client


@pytest.fixture
def admin_client(make_token, admin_user_id):
    """Client signed in as an administrator."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(admin_user_id, roles=['admin'])}")
    return client


@pytest.fixture
def service_client():
    """Client authenticated with the internal service token."""
    client = APIClient()
    client.credentials(HTTP_X_SERVICE_AUTH='test-service-token', HTTP_X_SOURCE_SERVICE='cron')
    return client


# ==================== ROSTER FIXTURES ====================

@pytest.fixture
def create_pilot(db):
    """Factory fixture to create pilots."""
    from apps.pilots.models import Pilot

    counter = {'n': 100}

    def _create_pilot(pid: str = None, user_id=None, **kwargs) -> Pilot:
        counter['n'] += 1
        return Pilot.objects.create(
            pid=pid or f"AFLV{counter['n']}",
            full_name=kwargs.pop('full_name', 'Test Pilot'),
            user_id=user_id or uuid.uuid4(),
            **kwargs
        )

    return _create_pilot


@pytest.fixture
def pilot(create_pilot, user_id):
    return create_pilot(pid='AFLV001', user_id=user_id, discord_user_id='111111111111111111')


@pytest.fixture
def link_discord(db):
    """Link a Discord user to an account through an auth identity."""
    from apps.pilots.models import AuthIdentity, IdentityProvider

    def _link(user_id, discord_user_id, username='recruit'):
        return AuthIdentity.objects.create(
            user_id=user_id,
            provider=IdentityProvider.DISCORD,
            provider_id=str(discord_user_id),
            username=username,
        )

    return _link


# ==================== ACADEMY FIXTURES ====================

@pytest.fixture
def create_exam(db):
    """Factory fixture for an exam with ``questions`` single-answer questions."""
    from apps.academy.models import Exam, ExamQuestion

    def _create_exam(questions: int = 4, **kwargs) -> Exam:
        exam = Exam.objects.create(
            title=kwargs.pop('title', 'Written Test'),
            passing_score=kwargs.pop('passing_score', 75),
            **kwargs
        )
        for i in range(questions):
            ExamQuestion.objects.create(
                exam=exam,
                question=f"Question {i + 1}?",
                options=[
                    {'text': 'Wrong', 'is_correct': False},
                    {'text': 'Right', 'is_correct': True},
                    {'text': 'Also wrong', 'is_correct': False},
                ],
                explanation=f"Because {i + 1}",
                sort_order=i,
            )
        return exam

    return _create_exam


@pytest.fixture
def recruitment_exam(create_exam):
    """Unpublished exam configured as the recruitment written test."""
    from apps.content.services import SiteSettingService

    exam = create_exam(title='Recruitment Written Test', is_published=False)
    SiteSettingService.set('recruitment_exam_id', str(exam.id))
    return exam


@pytest.fixture
def correct_answers():
    """Answer sheet getting every question of an exam right."""
    def _answers(exam):
        return {str(q.id): 1 for q in exam.questions.all()}
    return _answers


@pytest.fixture
def create_session(db):
    """Factory fixture for recruitment exam sessions."""
    from apps.academy.models import RecruitmentExamSession

    def _create_session(exam, discord_user_id='222222222222222222', **kwargs) -> RecruitmentExamSession:
        kwargs.setdefault('recruitment_channel_id', '555000000000000001')
        kwargs.setdefault('exam_message_id', '777000000000000001')
        return RecruitmentExamSession.objects.create(
            exam=exam,
            discord_user_id=discord_user_id,
            **kwargs
        )

    return _create_session


@pytest.fixture
def failed_session(create_session, recruitment_exam):
    """Session whose written test was failed 25 hours ago."""
    completed = timezone.now() - timedelta(hours=25)
    return create_session(
        recruitment_exam,
        completed_at=completed,
        passed=False,
        score=40,
        created_at=completed - timedelta(minutes=30),
    )


# ==================== OPERATIONS FIXTURES ====================

@pytest.fixture
def route(db):
    from apps.operations.models import Route

    return Route.objects.create(
        route_number='SU100',
        dep_icao='UUEE',
        arr_icao='LFPG',
        aircraft_icao='A320',
        est_flight_time_minutes=225,
    )


@pytest.fixture
def multiplier(db):
    from apps.operations.models import MultiplierConfig

    return MultiplierConfig.objects.create(name='Event', value=Decimal('2.0'))


# ==================== DISCORD FIXTURES ====================

@pytest.fixture
def discord_client():
    """Stand-in for ``DiscordClient`` returning Discord-shaped payloads."""
    client = MagicMock()
    client.create_channel.return_value = {'id': '555000000000000099', 'guild_id': '999'}
    client.post_message.return_value = {'id': '777000000000000099'}
    client.get_channel.return_value = {'id': '555000000000000001', 'guild_id': '999'}
    client.get_member.return_value = {'roles': ['1432355201326518373', '42']}
    client.create_thread.return_value = {'id': '888000000000000001'}
    client.delete_message_quietly.return_value = True
    return client
