"""
Database models for the patient tracker.

Every clinical row belongs to exactly one practitioner through its
``user_id`` column.  The practitioner identity lives in the external
identity provider, so ``user_id`` is a plain UUID rather than a foreign
key to a local user table.  Tenant isolation is applied by filtering on
that column (see :mod:`clinic.scope`).
"""
from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone


class OwnedQuerySet(models.QuerySet):
    def owned_by(self, user_id):
        return self.filter(user_id=user_id)


class OwnedModel(models.Model):
    """Abstract base for rows owned by a single practitioner."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = OwnedQuerySet.as_manager()

    class Meta:
        abstract = True


class StatusMachineMixin:
    """Declarative status transitions.

    Subclasses define ``STATUS_TRANSITIONS`` mapping a status to the set
    of statuses it may move to.  Re-applying the current status is always
    allowed, as is leaving an unset status.
    """
    STATUS_TRANSITIONS: dict[str, frozenset[str]] = {}

    def can_transition_to(self, new_status: str) -> bool:
        current = getattr(self, 'status', None)
        if current is None or current == new_status:
            return True
        return new_status in self.STATUS_TRANSITIONS.get(current, frozenset())


class Patient(StatusMachineMixin, OwnedModel):
    """Identity and demographics of a patient.

    ``status`` is the legacy patient-level state from before clinical
    episodes were modelled as :class:`Case`.  It is kept for existing
    clients and no longer drives the dashboard.
    """
    GENDER_MALE = 'Male'
    GENDER_FEMALE = 'Female'
    GENDER_OTHER = 'Other'
    GENDER_UNKNOWN = 'Unknown'
    GENDER_CHOICES = (
        (GENDER_MALE, 'Male'),
        (GENDER_FEMALE, 'Female'),
        (GENDER_OTHER, 'Other'),
        (GENDER_UNKNOWN, 'Unknown'),
    )

    STATUS_ADMITTED = 'Admitted'
    STATUS_STABLE = 'Stable'
    STATUS_CRITICAL = 'Critical'
    STATUS_DISCHARGED = 'Discharged'
    STATUS_CHOICES = (
        (STATUS_ADMITTED, 'Admitted'),
        (STATUS_STABLE, 'Stable'),
        (STATUS_CRITICAL, 'Critical'),
        (STATUS_DISCHARGED, 'Discharged'),
    )
    STATUS_TRANSITIONS = {
        STATUS_ADMITTED: frozenset({STATUS_STABLE, STATUS_CRITICAL, STATUS_DISCHARGED}),
        STATUS_STABLE: frozenset({STATUS_CRITICAL, STATUS_DISCHARGED}),
        STATUS_CRITICAL: frozenset({STATUS_STABLE, STATUS_DISCHARGED}),
        STATUS_DISCHARGED: frozenset({STATUS_ADMITTED}),
    }

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    dob = models.DateField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, default=GENDER_UNKNOWN)
    phone = models.CharField(max_length=32, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    address = models.TextField(blank=True, default='')
    medical_history = models.TextField(blank=True, default='')
    allergies = models.TextField(blank=True, default='')
    attachment_path = models.CharField(max_length=512, blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, blank=True, null=True, db_index=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_id', 'created_at'], name='patient_owner_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.dob})"


class Case(StatusMachineMixin, OwnedModel):
    """One clinical episode (admission) for a patient."""
    STATUS_ACTIVE = 'Active'
    STATUS_UPCOMING = 'Upcoming'
    STATUS_CLOSED = 'Closed'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        (STATUS_UPCOMING, 'Upcoming'),
        (STATUS_CLOSED, 'Closed'),
    )
    # "Open" is accepted by the list filter and means not yet closed.
    OPEN_STATUSES = (STATUS_ACTIVE, STATUS_UPCOMING)
    STATUS_TRANSITIONS = {
        STATUS_UPCOMING: frozenset({STATUS_ACTIVE, STATUS_CLOSED}),
        STATUS_ACTIVE: frozenset({STATUS_CLOSED}),
        STATUS_CLOSED: frozenset({STATUS_ACTIVE}),
    }

    ADMIT_EMERGENCY = 'Emergency'
    ADMIT_ROUTINE = 'Routine'
    ADMIT_TYPE_CHOICES = (
        (ADMIT_EMERGENCY, 'Emergency'),
        (ADMIT_ROUTINE, 'Routine'),
    )

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='cases')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    admit_type = models.CharField(max_length=16, choices=ADMIT_TYPE_CHOICES, default=ADMIT_ROUTINE)
    admit_reason = models.TextField(blank=True, default='')
    diagnosis = models.TextField(blank=True, default='')
    attachment_path = models.CharField(max_length=512, blank=True, null=True)
    started_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-started_at']
        indexes = [
            models.Index(fields=['user_id', 'status'], name='case_owner_status_idx'),
            models.Index(fields=['user_id', 'started_at'], name='case_owner_started_idx'),
        ]

    def __str__(self) -> str:
        return f"Case {self.id} ({self.status}) for {self.patient_id}"


class Appointment(StatusMachineMixin, OwnedModel):
    """A scheduled encounter, optionally tied to a case."""
    STATUS_SCHEDULED = 'Scheduled'
    STATUS_COMPLETED = 'Completed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_CHOICES = (
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    )
    STATUS_TRANSITIONS = {
        STATUS_SCHEDULED: frozenset({STATUS_COMPLETED, STATUS_CANCELLED}),
        STATUS_CANCELLED: frozenset({STATUS_SCHEDULED}),
        STATUS_COMPLETED: frozenset(),
    }

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='appointments')
    # Deleting a case leaves its appointments in place, unlinked.
    case = models.ForeignKey(Case, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    scheduled_at = models.DateTimeField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    reason = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['scheduled_at']
        indexes = [
            models.Index(fields=['user_id', 'scheduled_at'], name='appt_owner_scheduled_idx'),
        ]

    def __str__(self) -> str:
        return f"Appointment {self.id} at {self.scheduled_at:%F %T} ({self.status})"


class VisitNote(OwnedModel):
    """Append-only clinical note."""
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='notes')
    case = models.ForeignKey(Case, null=True, blank=True, on_delete=models.CASCADE, related_name='notes')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='notes'
    )
    note = models.TextField()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_id', 'patient', 'created_at'], name='note_owner_patient_idx'),
        ]

    def __str__(self) -> str:
        return f"note {self.id} patient={self.patient_id}"


class DoctorProfile(models.Model):
    """Practitioner-facing metadata, one row per identity."""
    user_id = models.UUIDField(primary_key=True, editable=False)
    display_name = models.CharField(max_length=255, blank=True, null=True)
    title = models.CharField(max_length=255, blank=True, null=True)
    department = models.CharField(max_length=255, blank=True, null=True)
    avatar_url = models.CharField(max_length=512, blank=True, null=True)
    updated_at = models.DateTimeField(default=timezone.now)

    objects = OwnedQuerySet.as_manager()

    def __str__(self) -> str:
        return self.display_name or str(self.user_id)


class AuditEvent(models.Model):
    user_id = models.UUIDField(blank=True, null=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.object_type}/{self.object_id}@{self.created_at:%F %T}"
