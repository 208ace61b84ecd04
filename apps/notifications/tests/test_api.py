import pytest
from django.urls import reverse
from rest_framework import status

from apps.notifications.models import Notification
from apps.notifications.services import notify


@pytest.mark.django_db
class TestNotificationList:
    """Tests for GET /api/notifications/"""

    def test_list_only_own(self, authenticated_client, notification, other_user):
        notify(user=other_user, message='Not yours')
        response = authenticated_client.get(reverse('notifications:notification-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [n['id'] for n in response.data] == [str(notification.id)]

    def test_unread_filter(self, authenticated_client, user, notification):
        Notification.objects.create(user=user, message='Old', is_read=True)
        response = authenticated_client.get(
            reverse('notifications:notification-list'), {'unread': 'true'}
        )

        assert len(response.data) == 1

    def test_requires_auth(self, api_client):
        response = api_client.get(reverse('notifications:notification-list'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestMarkRead:
    """Tests for the read / read-all actions."""

    def test_mark_one_read(self, authenticated_client, notification):
        url = reverse('notifications:notification-read', kwargs={'pk': notification.id})
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        notification.refresh_from_db()
        assert notification.is_read

    def test_cannot_mark_someone_elses(self, authenticated_client, other_user):
        foreign = notify(user=other_user, message='Private')
        url = reverse('notifications:notification-read', kwargs={'pk': foreign.id})
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_mark_all_read(self, authenticated_client, user, notification):
        notify(user=user, message='Second')
        response = authenticated_client.post(reverse('notifications:notification-read-all'))

        assert response.data['updated'] == 2
        assert not Notification.objects.filter(user=user, is_read=False).exists()
