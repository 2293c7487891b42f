"""Management command that switches two factor on for every administrator."""

from django.core.management.base import BaseCommand
from django.db import transaction

from projecthub.accounts.models import Profile
from projecthub.accounts.utils import privileged_roles


class Command(BaseCommand):
    help = "Enables 2fa for all admins that have not enabled 2fa yet."

    def handle(self, *args, **options):
        profiles = (
            Profile.objects.filter(
                two_factor_enabled=False,
                user__groups__name__in=privileged_roles(),
            )
            .select_related("user")
            .distinct()
        )

        count = 0
        with transaction.atomic():
            for profile in profiles:
                profile.two_factor_enabled = True
                profile.save_with_audit(update_fields=["two_factor_enabled"])
                count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Two factor authentication has been enabled for {count} accounts"
            )
        )
