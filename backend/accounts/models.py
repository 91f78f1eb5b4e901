"""
Accounts app models.

Defines the staff ``User`` (the "user profile" of the complaint desk).
Staff accounts are provisioned out of band (the ``create_staff``
management command or the Django admin) and carry exactly one role
from a fixed set.  Complainants never have accounts.
"""

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models

from core.permissions_constants import Roles


class StaffRole(models.TextChoices):
    """Fixed staff roles.  Values double as the JWT ``role`` claim."""

    ADMIN = Roles.ADMIN, "Admin"
    ACTION_TAKER = Roles.ACTION_TAKER, "Action Taker"
    COMMITTEE = Roles.COMMITTEE, "Committee"
    DEVELOPER = Roles.DEVELOPER, "Developer"


class User(AbstractUser):
    """
    Staff member of the complaint desk.

    Login is supported via ``username`` or ``email`` together with the
    password.  ``uid`` is the stable public identifier exposed by the API
    (the integer PK stays internal).
    """

    uid = models.UUIDField(
        default=uuid.uuid4,
        unique=True,
        editable=False,
        verbose_name="Public UID",
    )
    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Display Name",
    )
    role = models.CharField(
        max_length=20,
        choices=StaffRole.choices,
        blank=True,
        default="",
        verbose_name="Role",
        db_index=True,
    )
    department = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Department",
    )

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["name", "username"]

    def __str__(self):
        return f"{self.username} ({self.display_name}) - {self.role or 'No Role'}"

    @property
    def display_name(self) -> str:
        """Name shown on dashboards and exports."""
        return self.name or self.get_full_name() or self.username
