"""
Management command: create_staff
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Provisions a staff account with a single role.  There is no public
self-registration; every admin, action taker, committee member and
developer is created through this command (or the Django admin).

Usage::

    python manage.py create_staff --username jdoe --email jdoe@school.edu \
        --role action_taker --name "Jane Doe" --department "Student Affairs"

The password is prompted for when ``--password`` is omitted.
"""

import getpass

from django.core.management.base import BaseCommand, CommandError

from accounts.services import StaffProvisioningService
from core.domain.exceptions import DomainError
from core.permissions_constants import Roles


class Command(BaseCommand):
    help = "Create a staff account with one of the fixed roles."

    def add_arguments(self, parser):
        parser.add_argument("--username", required=True)
        parser.add_argument("--email", required=True)
        parser.add_argument("--role", required=True, choices=Roles.ALL)
        parser.add_argument("--name", default="")
        parser.add_argument("--department", default="")
        parser.add_argument(
            "--password",
            help="Account password. Prompted for interactively when omitted.",
        )

    def handle(self, *args, **options):
        password = options["password"]
        if not password:
            password = getpass.getpass("Password: ")
            if password != getpass.getpass("Password (again): "):
                raise CommandError("Passwords do not match.")
        if not password:
            raise CommandError("A password is required.")

        try:
            user = StaffProvisioningService.create_staff(
                username=options["username"],
                email=options["email"],
                password=password,
                role=options["role"],
                name=options["name"],
                department=options["department"],
            )
        except DomainError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(self.style.SUCCESS(
            f"  ✔  Created {user.get_role_display()} account: "
            f"{user.username} (uid={user.uid})"
        ))
