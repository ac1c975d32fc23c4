"""
Database models for the clinic backend.

Clinical records (patients, appointments, invoices, ...) do not live in
relational tables: they are held by the in-process entity store and
mirrored as whole collections into :class:`StoredCollection`.  The
relational models here only cover identity (users and their role),
the durable collection mirror and the audit trail.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    """Closed set of actor roles.

    ``admin`` is distinguished: it satisfies every resource allowlist.
    """
    ADMIN = 'admin', 'Administrator'
    DOCTOR = 'doctor', 'Doctor'
    NURSE = 'nurse', 'Nurse'
    PATIENT = 'patient', 'Patient'
    RECEPTIONIST = 'receptionist', 'Receptionist'
    PHARMACIST = 'pharmacist', 'Pharmacist'
    LAB_TECHNICIAN = 'lab_technician', 'Lab technician'
    FINANCE = 'finance', 'Finance'


class User(AbstractUser):
    """Custom user model carrying exactly one :class:`Role`."""
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.PATIENT, db_index=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class StoredCollection(models.Model):
    """Durable blob for one entity collection (e.g. ``hospital_patients``).

    ``payload`` holds the full collection serialized as a JSON array.  It
    is kept as text rather than a JSONField so that a damaged blob can be
    detected and reported instead of failing inside the ORM.
    """
    key = models.CharField(max_length=64, primary_key=True)
    payload = models.TextField(blank=True, default='')
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.key} @ {self.updated_at:%F %T}" if self.updated_at else self.key


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    # store ids are strings such as 'p1' or 'a<uuid>'
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='clinic_audi_action_5b1f0e_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='clinic_audi_object__a3c9d2_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.object_type}/{self.object_id} by {self.user_id}"
