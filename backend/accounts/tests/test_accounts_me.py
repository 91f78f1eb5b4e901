"""
Integration tests - GET /api/accounts/me/ (named URL: accounts:me).
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from core.permissions_constants import Roles

User = get_user_model()


class TestMeEndpoint(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.action_taker = User.objects.create_user(
            username="counsellor",
            email="counsellor@school.example",
            password="Str0ng!Pass99",
            name="Sam Okafor",
            role=Roles.ACTION_TAKER,
            department="Pastoral Care",
        )
        cls.superuser = User.objects.create_superuser(
            username="root",
            email="root@school.example",
            password="Str0ng!Pass99",
        )

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("accounts:me")

    def _auth(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def test_requires_authentication(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_returns_profile(self):
        self._auth(self.action_taker)
        resp = self.client.get(self.url)

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["uid"], str(self.action_taker.uid))
        self.assertEqual(resp.data["role"], Roles.ACTION_TAKER)
        self.assertEqual(resp.data["effective_role"], Roles.ACTION_TAKER)
        self.assertEqual(resp.data["department"], "Pastoral Care")
        self.assertNotIn("password", resp.data)

    def test_superuser_without_role_acts_as_developer(self):
        self._auth(self.superuser)
        resp = self.client.get(self.url)

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["role"], "")
        self.assertEqual(resp.data["effective_role"], Roles.DEVELOPER)
