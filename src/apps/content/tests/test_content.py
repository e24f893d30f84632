# src/apps/content/tests/test_content.py
"""
Tests for site settings, notifications and NOTAMs
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework import status

from apps.content.models import Notam, Notification, SiteSetting
from apps.content.services import NotamService, NotificationService, SiteSettingService


pytestmark = pytest.mark.django_db


class TestSiteSettingService:
    """Tests for cached site settings."""

    def test_missing_returns_default(self):
        """Test unknown keys fall back to the default."""
        assert SiteSettingService.get('nope', 'fallback') == 'fallback'

    def test_blank_counts_as_missing(self):
        """Test blank values behave like missing rows."""
        SiteSettingService.set('blank', '   ')

        assert SiteSettingService.get('blank') is None
        with pytest.raises(ValueError, match='Missing site setting: blank'):
            SiteSettingService.require('blank')

    def test_values_are_cached(self):
        """Test reads are served from cache until the key is invalidated."""
        SiteSettingService.set('motd', 'hello')
        assert SiteSettingService.get('motd') == 'hello'

        SiteSetting.objects.filter(key='motd').update(value='changed')
        assert SiteSettingService.get('motd') == 'hello'

        SiteSettingService.invalidate('motd')
        assert SiteSettingService.get('motd') == 'changed'

    def test_missing_rows_are_cached_too(self):
        """Test a later set is visible despite a cached miss."""
        assert SiteSettingService.get('late') is None

        SiteSettingService.set('late', 'now')

        assert SiteSettingService.get('late') == 'now'

    def test_get_int(self):
        """Test integer parsing with a default for junk."""
        SiteSettingService.set('days', '14')
        SiteSettingService.set('junk', 'fourteen')

        assert SiteSettingService.get_int('days') == 14
        assert SiteSettingService.get_int('junk', 7) == 7


class TestNotificationService:

    def test_unread_and_mark_read(self, pilot):
        """Test marking specific and then all notifications read."""
        first = NotificationService.send(pilot, 'One', 'First')
        NotificationService.send(pilot, 'Two', 'Second')
        assert NotificationService.unread_count(pilot) == 2

        assert NotificationService.mark_read(pilot, [first.id]) == 1
        assert NotificationService.unread_count(pilot) == 1

        assert NotificationService.mark_read(pilot) == 1
        assert NotificationService.unread_count(pilot) == 0

    def test_notify_admins_skips_pilots(self, pilot):
        """Test admin alerts go to admin accounts only."""
        assert NotificationService.notify_admins('Alert', 'Body') == []


class TestNotamService:

    def test_active_excludes_expired(self):
        """Test expired and disabled NOTAMs are hidden."""
        now = timezone.now()
        live = Notam.objects.create(title='Live', content='x')
        future = Notam.objects.create(title='Future', content='x', expires_at=now + timedelta(days=1))
        Notam.objects.create(title='Old', content='x', expires_at=now - timedelta(days=1))
        Notam.objects.create(title='Off', content='x', is_active=False)

        assert set(NotamService.active(now=now)) == {live, future}


class TestContentAPI:
    """Tests for content endpoints."""

    def test_setting_update_invalidates_cache(self, admin_client):
        """Test editing a setting through the API is visible immediately."""
        SiteSettingService.set('recruitment_exam_id', 'old')
        assert SiteSettingService.get('recruitment_exam_id') == 'old'

        response = admin_client.patch(
            '/api/v1/settings/recruitment_exam_id/',
            {'value': 'new'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert SiteSettingService.get('recruitment_exam_id') == 'new'

    def test_setting_delete_invalidates_cache(self, admin_client):
        """Test deleting a setting drops the cached value."""
        SiteSettingService.set('motd', 'hello')
        SiteSettingService.get('motd')

        response = admin_client.delete('/api/v1/settings/motd/')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert SiteSettingService.get('motd') is None

    def test_pilot_cannot_write_settings(self, pilot_client):
        """Test settings are admin-writable only."""
        response = pilot_client.post('/api/v1/settings/', {'key': 'x', 'value': 'y'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_announcement_records_author(self, admin_client, admin_user_id):
        """Test announcements store the creating account."""
        response = admin_client.post(
            '/api/v1/announcements/',
            {'title': 'Welcome', 'content': 'Hello crew'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['created_by'] == admin_user_id

    def test_active_notams(self, pilot_client):
        """Test the active NOTAM list."""
        Notam.objects.create(title='Runway closed', content='27L', priority='urgent')

        response = pilot_client.get('/api/v1/notams/active/')

        assert [n['title'] for n in response.data] == ['Runway closed']

    def test_notifications_are_private(self, pilot_client, pilot, create_pilot):
        """Test pilots only see their own notifications."""
        NotificationService.send(pilot, 'Mine', 'x')
        NotificationService.send(create_pilot(), 'Theirs', 'x')

        response = pilot_client.get('/api/v1/notifications/')

        assert [n['title'] for n in response.data['results']] == ['Mine']

    def test_mark_all_read(self, pilot_client, pilot):
        """Test marking everything read through the API."""
        NotificationService.send(pilot, 'One', 'x')
        NotificationService.send(pilot, 'Two', 'x')

        response = pilot_client.post('/api/v1/notifications/mark-read/', {}, format='json')

        assert response.data == {'updated': 2}
        assert pilot_client.get('/api/v1/notifications/unread-count/').data == {'count': 0}
        assert not Notification.objects.filter(is_read=False).exists()
