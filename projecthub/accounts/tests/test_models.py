from datetime import timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.db.models import QuerySet
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from projecthub.accounts.exceptions import PersistenceError
from projecthub.accounts.models import Profile
from projecthub.accounts.utils import generate_digit_code, mask_email


class ProfilePersistenceTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username="casey", email="casey@example.com", password="SecurePass123"
        )
        self.earlier = timezone.now() - timedelta(hours=1)
        Profile.objects.filter(user=self.user).update(updated_at=self.earlier)
        self.profile = Profile.objects.get(user=self.user)

    def test_every_user_gets_a_profile(self):
        self.assertFalse(self.profile.two_factor_enabled)
        self.assertIsNone(self.profile.two_factor_code)

    def test_for_user_recreates_a_missing_profile(self):
        Profile.objects.filter(user=self.user).delete()
        user = get_user_model().objects.get(pk=self.user.pk)

        profile = Profile.for_user(user)

        self.assertEqual(profile.user, user)
        self.assertEqual(Profile.objects.filter(user=user).count(), 1)

    def test_save_silent_keeps_updated_at(self):
        self.profile.two_factor_enabled = True
        self.profile.save_silent(["two_factor_enabled"])

        stored = Profile.objects.get(pk=self.profile.pk)
        self.assertTrue(stored.two_factor_enabled)
        self.assertEqual(stored.updated_at, self.earlier)

    def test_save_silent_only_writes_named_fields(self):
        Profile.objects.filter(pk=self.profile.pk).update(two_factor_enabled=True)
        self.profile.two_factor_code = "111111"

        self.profile.save_silent(["two_factor_code"])

        stored = Profile.objects.get(pk=self.profile.pk)
        self.assertTrue(stored.two_factor_enabled)
        self.assertEqual(stored.two_factor_code, "111111")

    def test_save_with_audit_bumps_updated_at(self):
        self.profile.two_factor_enabled = True
        self.profile.save_with_audit(update_fields=["two_factor_enabled"])

        stored = Profile.objects.get(pk=self.profile.pk)
        self.assertTrue(stored.two_factor_enabled)
        self.assertGreater(stored.updated_at, self.earlier)

    def test_database_errors_surface_as_persistence_errors(self):
        with mock.patch.object(QuerySet, "update", side_effect=DatabaseError("gone")):
            with self.assertRaises(PersistenceError):
                self.profile.reset_two_factor_code()

        with mock.patch.object(Profile, "save_base", side_effect=DatabaseError("gone")):
            with self.assertRaises(PersistenceError):
                self.profile.save_with_audit()

    def test_generate_and_reset_code(self):
        code = self.profile.generate_two_factor_code()

        stored = Profile.objects.get(pk=self.profile.pk)
        self.assertEqual(stored.two_factor_code, code)
        self.assertGreater(stored.two_factor_expires_at, timezone.now())
        self.assertEqual(stored.updated_at, self.earlier)

        stored.reset_two_factor_code()
        stored.reset_two_factor_code()

        stored = Profile.objects.get(pk=self.profile.pk)
        self.assertIsNone(stored.two_factor_code)
        self.assertIsNone(stored.two_factor_expires_at)

    def test_lock_clears_pending_code(self):
        self.profile.generate_two_factor_code()
        self.profile.two_factor_attempts = 5

        self.profile.lock()

        stored = Profile.objects.get(pk=self.profile.pk)
        self.assertTrue(stored.is_locked())
        self.assertIsNone(stored.two_factor_code)
        self.assertEqual(stored.two_factor_attempts, 0)


class HelperTests(SimpleTestCase):
    def test_mask_email_hides_the_local_part(self):
        self.assertEqual(mask_email("david.smith@example.com"), "d********@example.com")
        self.assertEqual(mask_email("a@example.com"), "a********@example.com")

    def test_mask_email_leaves_odd_values_alone(self):
        self.assertEqual(mask_email(""), "")
        self.assertEqual(mask_email("not-an-email"), "not-an-email")

    def test_generate_digit_code(self):
        codes = {generate_digit_code() for _ in range(20)}

        for code in codes:
            self.assertRegex(code, r"^\d{6}$")
        self.assertGreater(len(codes), 1)


class FailedAttemptCounterTests(TestCase):
    def setUp(self):
        user = get_user_model().objects.create_user(
            username="robin", email="robin@example.com", password="SecurePass123"
        )
        self.pk = Profile.objects.get(user=user).pk

    def test_failures_from_separate_requests_are_all_counted(self):
        first = Profile.objects.get(pk=self.pk)
        second = Profile.objects.get(pk=self.pk)

        self.assertEqual(first.register_failed_attempt(), 1)
        self.assertEqual(second.register_failed_attempt(), 2)

        stored = Profile.objects.get(pk=self.pk)
        self.assertEqual(stored.two_factor_attempts, 2)
        self.assertIsNotNone(stored.last_attempt_at)

    def test_counter_does_not_touch_updated_at(self):
        earlier = timezone.now() - timedelta(hours=1)
        Profile.objects.filter(pk=self.pk).update(updated_at=earlier)
        profile = Profile.objects.get(pk=self.pk)

        profile.register_failed_attempt()

        self.assertEqual(Profile.objects.get(pk=self.pk).updated_at, earlier)
