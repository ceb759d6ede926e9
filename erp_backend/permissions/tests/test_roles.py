# permissions/tests/test_roles.py

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase
from rest_framework.test import APIRequestFactory

from permissions.roles import (
    CAP_IMPAIRMENT_MANAGE,
    CAP_IMPAIRMENT_POST,
    CAP_IMPAIRMENT_VIEW,
    HasCapability,
    capabilities_for,
)

User = get_user_model()


class _View:
    def __init__(self, capability=None):
        self.required_capability = capability


class CapabilityTests(TestCase):
    """
    GUARANTEES:
    - Each role gets exactly its impairment capabilities
    - Views without a declared capability deny by default
    - Anonymous users are denied everywhere
    """

    def setUp(self):
        self.factory = APIRequestFactory()

        self.admin = User.objects.create_user(email="admin@example.com", password="pass", role="admin")
        self.accountant = User.objects.create_user(
            email="accountant@example.com", password="pass", role="accountant"
        )
        self.manager = User.objects.create_user(email="manager@example.com", password="pass", role="manager")
        self.clerk = User.objects.create_user(email="clerk@example.com", password="pass", role="clerk")

    def _request_for(self, user):
        request = self.factory.get("/")
        request.user = user
        return request

    def test_role_capability_map(self):
        everything = {CAP_IMPAIRMENT_VIEW, CAP_IMPAIRMENT_POST, CAP_IMPAIRMENT_MANAGE}

        self.assertEqual(capabilities_for(self.admin), everything)
        self.assertEqual(capabilities_for(self.accountant), everything)
        self.assertEqual(capabilities_for(self.manager), {CAP_IMPAIRMENT_VIEW, CAP_IMPAIRMENT_POST})
        self.assertEqual(capabilities_for(self.clerk), {CAP_IMPAIRMENT_VIEW})

    def test_has_capability(self):
        perm = HasCapability()

        self.assertTrue(perm.has_permission(self._request_for(self.clerk), _View(CAP_IMPAIRMENT_VIEW)))
        self.assertFalse(perm.has_permission(self._request_for(self.clerk), _View(CAP_IMPAIRMENT_POST)))
        self.assertTrue(perm.has_permission(self._request_for(self.manager), _View(CAP_IMPAIRMENT_POST)))

    def test_missing_capability_denies(self):
        self.assertFalse(HasCapability().has_permission(self._request_for(self.admin), _View()))

    def test_anonymous_denied(self):
        request = self._request_for(AnonymousUser())

        self.assertFalse(HasCapability().has_permission(request, _View(CAP_IMPAIRMENT_VIEW)))
        self.assertEqual(capabilities_for(AnonymousUser()), set())
