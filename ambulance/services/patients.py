import logging

from django.db import IntegrityError, transaction

from ambulance.exceptions import DuplicateKey, NotFound
from ambulance.models import Patient

logger = logging.getLogger(__name__)


def format_patient(p: Patient) -> dict:
    return {
        'nhsNumber': p.nhs_number,
        'name': p.name,
        'address': p.address,
        'medicalHistory': p.medical_history,
    }


def get_patient(nhs_number: str) -> Patient:
    patient = Patient.objects.filter(pk=nhs_number).first()
    if patient is None:
        raise NotFound('Patient not found.')
    return patient


def list_patients() -> list[Patient]:
    return list(Patient.objects.order_by('name', 'nhs_number'))


def add_patient(*, nhs_number, name, address, medical_history='') -> Patient:
    try:
        # savepoint so the surrounding transaction survives a duplicate insert
        with transaction.atomic():
            patient = Patient.objects.create(
                nhs_number=nhs_number, name=name, address=address,
                medical_history=medical_history or '',
            )
    except IntegrityError:
        logger.warning("Duplicate NHS number %s rejected", nhs_number)
        raise DuplicateKey('NHS Number must be unique.')
    logger.info("Patient %s added", nhs_number)
    return patient


def update_patient(nhs_number, *, name, address, medical_history='') -> int:
    updated = Patient.objects.filter(pk=nhs_number).update(
        name=name, address=address, medical_history=medical_history or '',
    )
    if not updated:
        logger.warning("No patient found with NHS number %s", nhs_number)
        raise NotFound('Patient not found.')
    logger.info("Patient %s updated", nhs_number)
    return updated


def delete_patient(nhs_number) -> int:
    deleted, _ = Patient.objects.filter(pk=nhs_number).delete()
    if not deleted:
        logger.warning("No patient found with NHS number %s", nhs_number)
        raise NotFound('Patient not found.')
    logger.info("Patient %s deleted", nhs_number)
    return deleted
