# src/apps/pilots/models/access.py
"""
Account-level access data keyed by the identity-provider user id.
"""

from django.db import models

from common.mixins import BaseModel
from common.permissions import Roles


class RoleName(models.TextChoices):
    ADMIN = Roles.ADMIN, 'Admin'
    PILOT = Roles.PILOT, 'Pilot'


class IdentityProvider(models.TextChoices):
    EMAIL = 'email', 'Email'
    DISCORD = 'discord', 'Discord'


class UserRole(BaseModel):
    """Role granted to an account inside the crew center."""

    user_id = models.UUIDField(db_index=True)
    role = models.CharField(max_length=20, choices=RoleName.choices)

    class Meta:
        db_table = 'user_roles'
        constraints = [
            models.UniqueConstraint(fields=['user_id', 'role'], name='uniq_user_role'),
        ]

    def __str__(self):
        return f"{self.user_id}: {self.role}"


class AuthIdentity(BaseModel):
    """
    Login identity linked to an account.

    Discord identities are how a chat user is mapped back to a crew center
    account; email identities let a recruit be matched by the contact
    address typed into the callsign form.
    """

    user_id = models.UUIDField(db_index=True)
    provider = models.CharField(max_length=20, choices=IdentityProvider.choices)
    provider_id = models.CharField(max_length=255)
    username = models.CharField(max_length=100, blank=True, default='')

    class Meta:
        db_table = 'auth_identities'
        constraints = [
            models.UniqueConstraint(fields=['provider', 'provider_id'], name='uniq_identity_provider_id'),
        ]

    def __str__(self):
        return f"{self.provider}:{self.provider_id}"

    def save(self, *args, **kwargs):
        if self.provider == IdentityProvider.EMAIL:
            self.provider_id = self.provider_id.strip().lower()
        super().save(*args, **kwargs)


class ApprovedAdminEmail(BaseModel):
    email = models.EmailField(unique=True)

    class Meta:
        db_table = 'approved_admin_emails'

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        self.email = self.email.strip().lower()
        super().save(*args, **kwargs)
