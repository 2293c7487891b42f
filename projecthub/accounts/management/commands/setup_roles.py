"""Management command that provisions the default roles."""

from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand
from django.db import transaction

from projecthub.accounts.services import ROLE_NAMES


class Command(BaseCommand):
    help = "Create the default user groups (roles)."

    def handle(self, *args, **options):
        with transaction.atomic():
            for group_name in ROLE_NAMES:
                _, created = Group.objects.get_or_create(name=group_name)
                verb = "Created" if created else "Found"
                self.stdout.write(self.style.SUCCESS(f"{verb} group '{group_name}'."))

        self.stdout.write(self.style.SUCCESS("Role provisioning complete."))
