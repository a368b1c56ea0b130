"""
Dispatch lifecycle operations.

Every state change is a single conditional ``UPDATE`` whose WHERE clause
carries the precondition of the transition.  The affected row count is
the only thing that decides success, so two ambulances accepting the
same dispatch at once cannot both win.  When nothing was updated a
read-only probe works out which error to report.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.utils import timezone
from rest_framework.exceptions import ValidationError

from ambulance.exceptions import Conflict, InvalidTransition, NotFound
from ambulance.models import Dispatch, DispatchState

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('nhsNumber', 'condition', 'patientName', 'patientAddress')

TRANSITIONS = {
    DispatchState.UNASSIGNED: [DispatchState.ACCEPTED],
    DispatchState.ACCEPTED: [DispatchState.COMPLETED],
    DispatchState.COMPLETED: [],
}


def can_transition(current: str, new: str) -> bool:
    """Return True if a dispatch may move from ``current`` to ``new``."""
    return new in TRANSITIONS.get(current, [])


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def format_dispatch(d: Dispatch) -> dict:
    return {
        'id': d.id,
        'patientId': d.patient_id,
        'patientName': d.patient_name,
        'patientAddress': d.patient_address,
        'condition': d.condition,
        'timestamp': _iso(d.timestamp),
        'medicalHistory': d.medical_history,
        'completed': int(d.completed),
        'ambulanceId': d.ambulance_id,
        'completionTime': _iso(d.completion_time),
        'patientLatitude': d.patient_latitude,
        'patientLongitude': d.patient_longitude,
        'state': str(d.state),
    }


def format_hospital_dispatch(d: Dispatch) -> dict:
    row = {
        'id': d.id,
        'patientName': d.patient_name,
        'condition': d.condition,
        'timestamp': _iso(d.timestamp),
        'ambulanceId': d.ambulance_id,
        'completed': int(d.completed),
        'state': str(d.state),
    }
    if d.completed:
        row['completionTime'] = _iso(d.completion_time)
    return row


def create_dispatch(data: dict) -> Dispatch:
    """Insert a new UNASSIGNED dispatch stamped with the current time."""
    missing = [k for k in REQUIRED_FIELDS if not (data.get(k) or '').strip()]
    if missing:
        raise ValidationError({k: ['This field is required.'] for k in missing})
    dispatch = Dispatch.objects.create(
        patient_id=data['nhsNumber'],
        condition=data['condition'],
        patient_name=data['patientName'],
        patient_address=data['patientAddress'],
        medical_history=data.get('medicalHistory') or '',
        patient_latitude=data.get('patientLatitude'),
        patient_longitude=data.get('patientLongitude'),
        timestamp=timezone.now(),
    )
    logger.info("Dispatch %s created for patient %s (%s)", dispatch.id, dispatch.patient_id, dispatch.condition)
    return dispatch


def accept_dispatch(dispatch_id: int, ambulance_id: str) -> int:
    """UNASSIGNED -> ACCEPTED, exactly once per dispatch."""
    if not ambulance_id:
        raise ValidationError({'ambulanceId': ['This field is required.']})
    updated = (
        Dispatch.objects
        .filter(pk=dispatch_id, ambulance_id__isnull=True, completed=False)
        .update(ambulance_id=ambulance_id)
    )
    if updated:
        logger.info("Dispatch %s accepted by ambulance %s", dispatch_id, ambulance_id)
        return updated
    if not Dispatch.objects.filter(pk=dispatch_id).exists():
        raise NotFound('Dispatch not found.')
    logger.warning("Ambulance %s lost accept on dispatch %s", ambulance_id, dispatch_id)
    raise Conflict('Dispatch not found or already accepted.')


def complete_dispatch(dispatch_id: int) -> int:
    """ACCEPTED -> COMPLETED; an unassigned dispatch cannot be completed."""
    updated = (
        Dispatch.objects
        .filter(pk=dispatch_id, completed=False, ambulance_id__isnull=False)
        .update(completed=True, completion_time=timezone.now())
    )
    if updated:
        logger.info("Dispatch %s completed", dispatch_id)
        return updated
    current = Dispatch.objects.filter(pk=dispatch_id).first()
    if current is None or current.completed:
        raise NotFound('Dispatch not found or already completed.')
    if not can_transition(current.state, DispatchState.COMPLETED):
        raise InvalidTransition(
            f'Dispatch {dispatch_id} is {str(current.state)} and must be accepted before it can be completed.'
        )
    # accepted concurrently after our UPDATE ran; nothing was written, caller may retry
    raise InvalidTransition(f'Dispatch {dispatch_id} was accepted while completing; retry.')


def get_dispatch(dispatch_id: int) -> Dispatch:
    dispatch = Dispatch.objects.filter(pk=dispatch_id).first()
    if dispatch is None:
        raise NotFound('Dispatch not found.')
    return dispatch


def list_dispatches() -> list[Dispatch]:
    return list(Dispatch.objects.order_by('-timestamp', '-id'))


def hospital_dispatches() -> dict:
    active = Dispatch.objects.filter(completed=False).order_by('-timestamp', '-id')
    done = Dispatch.objects.filter(completed=True).order_by('-completion_time', '-id')
    return {
        'activeDispatches': [format_hospital_dispatch(d) for d in active],
        'completedDispatches': [format_hospital_dispatch(d) for d in done],
    }
