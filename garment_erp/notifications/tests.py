"""
Test suite for the Notifications module
Tests: personal inbox, read flags, admin sends and broadcasts
"""
from django.test import TestCase
from rest_framework import status

from garment_erp.core.models import Role
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.notifications.models import Notification


class NotificationAPITests(TestCase):
    """Test notification endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role=Role.EMPLOYEE)
        self.other = TestDataFactory.create_user(role=Role.EMPLOYEE)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_own_with_unread_count(self):
        """Test users only see their own notifications"""
        TestDataFactory.create_notification(self.user)
        TestDataFactory.create_notification(self.user, is_read=True)
        TestDataFactory.create_notification(self.other)
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 2)
        self.assertEqual(response.data['unread_count'], 1)
        self.assertEqual(response.data['pagination']['limit'], 20)

    def test_filter_unread(self):
        """Test the is_read filter"""
        TestDataFactory.create_notification(self.user)
        TestDataFactory.create_notification(self.user, is_read=True)
        response = self.client.get('/api/v1/notifications/?is_read=false')
        self.assertEqual(len(response.data['data']), 1)
        self.assertFalse(response.data['data'][0]['is_read'])

    def test_mark_read(self):
        """Test marking one notification as read"""
        notification = TestDataFactory.create_notification(self.user)
        response = self.client.post(f'/api/v1/notifications/{notification.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        notification.refresh_from_db()
        self.assertTrue(notification.is_read)

    def test_cannot_touch_others(self):
        """Test other users' notifications are invisible"""
        notification = TestDataFactory.create_notification(self.other)
        response = self.client.post(f'/api/v1/notifications/{notification.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.delete(f'/api/v1/notifications/{notification.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Notification.objects.filter(id=notification.id).exists())

    def test_mark_all_read(self):
        """Test marking everything read only affects the caller"""
        TestDataFactory.create_notification(self.user)
        TestDataFactory.create_notification(self.user)
        TestDataFactory.create_notification(self.other)
        response = self.client.post('/api/v1/notifications/read-all/')
        self.assertEqual(response.data['data']['updated'], 2)
        self.assertEqual(Notification.objects.filter(is_read=False).count(), 1)

    def test_delete_own(self):
        """Test deleting an own notification"""
        notification = TestDataFactory.create_notification(self.user)
        response = self.client.delete(f'/api/v1/notifications/{notification.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Notification.objects.exists())

    def test_create_requires_admin(self):
        """Test only admins send notifications"""
        data = {'user': self.other.id, 'title': 'Shift change', 'message': 'Report at 8'}
        response = self.client.post('/api/v1/notifications/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ADMIN))
        response = self.client.post('/api/v1/notifications/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.other.notifications.count(), 1)

    def test_broadcast_to_roles(self):
        """Test broadcasts reach active users with the given roles"""
        admin = TestDataFactory.create_user(role=Role.ADMIN)
        TestDataFactory.create_user(role=Role.EMPLOYEE, is_active=False)
        self.client.authenticate_user(admin)
        response = self.client.post(
            '/api/v1/notifications/broadcast/',
            {'title': 'Holiday', 'message': 'Factory closed Monday', 'roles': [Role.EMPLOYEE]},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['count'], 2)
        self.assertFalse(admin.notifications.exists())

    def test_broadcast_to_everyone(self):
        """Test a broadcast without roles reaches every active user"""
        admin = TestDataFactory.create_user(role=Role.ADMIN)
        self.client.authenticate_user(admin)
        response = self.client.post(
            '/api/v1/notifications/broadcast/', {'title': 'Audit', 'message': 'Stock count Friday'}, format='json'
        )
        self.assertEqual(response.data['data']['count'], 3)
