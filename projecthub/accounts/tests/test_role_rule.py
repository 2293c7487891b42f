from datetime import timedelta

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.test import TestCase
from django.utils import timezone

from projecthub.accounts.models import Profile
from projecthub.accounts.services import assign_role, sync_roles
from projecthub.accounts.signals import role_updated
from projecthub.core.models import SecurityLog


class RoleEnablementRuleTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username="member",
            email="member@example.com",
            password="SecurePass123",
        )
        self.last_modified = timezone.now() - timedelta(days=3)
        Profile.objects.filter(user=self.user).update(updated_at=self.last_modified)

    def profile(self):
        return Profile.objects.get(user=self.user)

    def test_super_admin_role_enables_two_factor(self):
        assign_role(self.user, "Super Admin")

        self.assertTrue(self.profile().two_factor_enabled)

    def test_admin_role_enables_two_factor(self):
        assign_role(self.user, "Admin")

        self.assertTrue(self.profile().two_factor_enabled)

    def test_manager_and_employee_roles_leave_two_factor_off(self):
        for role in ("Manager", "Employee"):
            assign_role(self.user, role)

        self.assertFalse(self.profile().two_factor_enabled)

    def test_promotion_from_manager_enables_two_factor(self):
        assign_role(self.user, "Manager")

        sync_roles(self.user, ["Super Admin"])

        self.assertTrue(self.user.groups.filter(name="Super Admin").exists())
        self.assertTrue(self.profile().two_factor_enabled)

    def test_demotion_never_disables_two_factor(self):
        assign_role(self.user, "Admin")

        sync_roles(self.user, ["Employee"])
        self.user.groups.clear()

        self.assertFalse(self.user.groups.exists())
        self.assertTrue(self.profile().two_factor_enabled)

    def test_enabling_does_not_touch_updated_at(self):
        assign_role(self.user, "Admin")

        self.assertEqual(self.profile().updated_at, self.last_modified)

    def test_rule_is_idempotent(self):
        assign_role(self.user, "Admin")

        role_updated.send(sender=get_user_model(), user=self.user)
        role_updated.send(sender=get_user_model(), user=self.user)

        profile = self.profile()
        self.assertTrue(profile.two_factor_enabled)
        self.assertEqual(profile.updated_at, self.last_modified)
        self.assertEqual(
            SecurityLog.objects.filter(
                target_user=self.user,
                event_type=SecurityLog.EventType.TWO_FACTOR_ENABLED,
            ).count(),
            1,
        )

    def test_adding_user_from_the_group_side_enables_two_factor(self):
        group, _ = Group.objects.get_or_create(name="Admin")

        group.user_set.add(self.user)

        self.assertTrue(self.profile().two_factor_enabled)

    def test_other_users_are_left_alone(self):
        bystander = get_user_model().objects.create_user(
            username="bystander",
            email="bystander@example.com",
            password="SecurePass123",
        )

        assign_role(self.user, "Admin")

        self.assertFalse(Profile.objects.get(user=bystander).two_factor_enabled)
