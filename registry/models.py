"""
Database models for the patient map registry.

The registry keeps a curated catalog of streets, the addresses built on
top of it (each carrying geocoded coordinates) and the patients living
at those addresses.  Operators authenticate with the custom
:class:`User` model.
"""
from __future__ import annotations

import unicodedata
import re

from django.contrib.auth.models import AbstractUser
from django.db import models


_WHITESPACE_RE = re.compile(r"\s+")


def normalize_street_name(value: str) -> str:
    """Return the lookup key for a free-text street name.

    Lowercases, decomposes to NFD, strips combining marks and collapses
    whitespace so that ``"Rua  São João"`` and ``"rua sao joao"`` share
    the same key.
    """
    decomposed = unicodedata.normalize("NFD", (value or "").lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE_RE.sub(" ", stripped).strip()


class User(AbstractUser):
    """Registry operator.

    ``last_login`` doubles as the last-access timestamp and is refreshed
    on every successful login.
    """
    full_name = models.CharField(max_length=255, blank=True)

    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username

    def __str__(self) -> str:
        return self.username


class Street(models.Model):
    """A street from the externally curated catalog."""
    TYPE_CHOICES = [
        ('avenida', 'Avenida'),
        ('rua', 'Rua'),
        ('travessa', 'Travessa'),
        ('alameda', 'Alameda'),
        ('estrada', 'Estrada'),
        ('praca', 'Praça'),
        ('beco', 'Beco'),
        ('acesso', 'Acesso'),
    ]
    name = models.CharField(max_length=255)
    # lookup key, see normalize_street_name
    normalized_name = models.CharField(max_length=255, db_index=True, editable=False)
    street_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='rua')

    class Meta:
        ordering = ['name']

    def save(self, *args, **kwargs):
        self.normalized_name = normalize_street_name(self.name)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.name


class Address(models.Model):
    """A (street, number) pair with its resolved coordinates.

    Addresses are created lazily the first time a patient references a
    pair that has never been seen, and are never updated afterwards.
    """
    street = models.ForeignKey(Street, on_delete=models.PROTECT, related_name='addresses')
    number = models.CharField(max_length=20)
    complement = models.CharField(max_length=255, blank=True)
    latitude = models.FloatField()
    longitude = models.FloatField()
    coordinates_dms = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['street', 'number'], name='unique_street_number'),
        ]

    def __str__(self) -> str:
        return f"{self.street.name}, {self.number}"


class Patient(models.Model):
    """A registered patient.  Deleting only clears ``active``.

    ``complement`` is the patient's own (apartment, block) and may differ
    from the one stored on the shared address.
    """
    name = models.CharField(max_length=255)
    address = models.ForeignKey(Address, on_delete=models.PROTECT, related_name='patients')
    complement = models.CharField(max_length=255, blank=True)
    last_visit = models.DateField()
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["action", "created_at"], name="audit_action_created_idx"),
            models.Index(fields=["object_type", "object_id", "created_at"], name="audit_object_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.object_type}:{self.object_id}"
