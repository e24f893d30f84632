"""
Abstract bases for crew center models.
"""

import uuid

from django.db import models


class BaseModel(models.Model):
    """UUID key with created/updated timestamps."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ActiveMixin(models.Model):
    """Reference data admins switch off instead of deleting."""

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        abstract = True
