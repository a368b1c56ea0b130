"""
Database models for the dispatch backend.

Two tables make up the store: ``patients`` holds registered patient
records keyed by NHS number and ``dispatches`` holds ambulance requests.
Column names on disk keep the camelCase names used on the wire by the
mobile client; Python attributes are snake_case.
"""
from __future__ import annotations

from django.db import models
from django.db.models import Q
from django.utils import timezone


class DispatchState(models.TextChoices):
    """Lifecycle state of a dispatch, derived from its columns."""
    UNASSIGNED = 'unassigned', 'Unassigned'
    ACCEPTED = 'accepted', 'Accepted'
    COMPLETED = 'completed', 'Completed'


class Patient(models.Model):
    """A registered patient.

    Dispatches copy the patient's fields at request time instead of
    referencing this table, so deleting a patient never touches
    dispatch history.
    """
    nhs_number = models.CharField(max_length=32, primary_key=True, db_column='nhsNumber')
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=512)
    medical_history = models.TextField(blank=True, default='', db_column='medicalHistory')

    class Meta:
        db_table = 'patients'
        ordering = ['name']

    def __str__(self) -> str:
        return f"{self.name} ({self.nhs_number})"


class Dispatch(models.Model):
    """An ambulance request tracked through unassigned/accepted/completed."""
    id = models.AutoField(primary_key=True)
    # Free-text NHS number reference, deliberately not a foreign key
    patient_id = models.CharField(max_length=32, db_column='patientId')
    condition = models.CharField(max_length=255)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    patient_name = models.CharField(max_length=255, db_column='patientName')
    patient_address = models.CharField(max_length=512, db_column='patientAddress')
    medical_history = models.TextField(blank=True, default='', db_column='medicalHistory')
    completed = models.BooleanField(default=False, db_index=True)
    ambulance_id = models.CharField(max_length=64, null=True, blank=True, db_column='ambulanceId')
    completion_time = models.DateTimeField(null=True, blank=True, db_column='completionTime')
    patient_latitude = models.FloatField(null=True, blank=True, db_column='patientLatitude')
    patient_longitude = models.FloatField(null=True, blank=True, db_column='patientLongitude')

    class Meta:
        db_table = 'dispatches'
        constraints = [
            models.CheckConstraint(
                condition=Q(completed=False) | Q(completion_time__isnull=False),
                name='dispatch_completed_has_time',
            ),
            models.CheckConstraint(
                condition=Q(completed=False) | Q(ambulance_id__isnull=False),
                name='dispatch_completed_was_accepted',
            ),
        ]

    @property
    def state(self) -> str:
        if self.completed:
            return DispatchState.COMPLETED
        if self.ambulance_id is not None:
            return DispatchState.ACCEPTED
        return DispatchState.UNASSIGNED

    def __str__(self) -> str:
        return f"Dispatch {self.id} for {self.patient_name} ({self.state})"
