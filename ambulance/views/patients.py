"""
Patient record endpoints.

Patients are keyed by NHS number.  Registration rejects an NHS number
that already exists; update and delete report 404 when no row matched.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers.patient import PatientCreateSerializer, PatientUpdateSerializer
from ..services import patients as svc


@api_view(['GET'])
def patient_detail(request, nhs_number: str):
    """Return a single patient by NHS number."""
    return Response(svc.format_patient(svc.get_patient(nhs_number)))


@api_view(['GET', 'POST'])
def patients_collection(request):
    """List patients sorted by name, or register a new one."""
    if request.method == 'GET':
        return Response([svc.format_patient(p) for p in svc.list_patients()])
    data = PatientCreateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    svc.add_patient(
        nhs_number=data.validated_data['nhsNumber'],
        name=data.validated_data['name'],
        address=data.validated_data['address'],
        medical_history=data.validated_data.get('medicalHistory') or '',
    )
    return Response({'ok': True, 'message': 'Patient added successfully.', 'updated': 1})


@api_view(['PUT', 'DELETE'])
def patient_item(request, nhs_number: str):
    """Update or delete the patient with the given NHS number."""
    if request.method == 'DELETE':
        deleted = svc.delete_patient(nhs_number)
        return Response({'ok': True, 'message': 'Patient deleted successfully.', 'updated': deleted})
    data = PatientUpdateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    updated = svc.update_patient(
        nhs_number,
        name=data.validated_data['name'],
        address=data.validated_data['address'],
        medical_history=data.validated_data.get('medicalHistory') or '',
    )
    return Response({'ok': True, 'message': 'Patient details updated successfully.', 'updated': updated})
