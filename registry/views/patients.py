"""
Patient management views.

A single ``/api/patients`` resource lists, creates, updates and soft
deletes patients.  Writes resolve the street/number pair to a stored or
freshly geocoded address before the patient row is touched.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated, SAFE_METHODS
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.exceptions import ValidationError

from registry.serializers.patient import (
    PatientUpdateSerializer,
    PatientWriteSerializer,
    patient_feature,
    serialize_patient,
)
from registry.services import patients as patient_service


class PatientWriteThrottle(UserRateThrottle):
    """Per-user limit on patient writes; reads are not counted."""

    scope = 'patient_write'

    def allow_request(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().allow_request(request, view)


@api_view(['GET', 'POST', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
@throttle_classes([UserRateThrottle, PatientWriteThrottle])
def patients(request):
    """List, create, update or soft-delete patients.

    ``GET`` returns the active patients ordered by name.  ``POST`` creates
    a patient, ``PUT`` updates the one named by ``id`` in the body and
    ``DELETE`` marks the patient given by the ``id`` query parameter as
    inactive.
    """
    if request.method == 'GET':
        data = [serialize_patient(p) for p in patient_service.list_active_patients()]
        return Response({'success': True, 'data': data})

    if request.method == 'POST':
        s = PatientWriteSerializer.from_request(request.data)
        s.is_valid(raise_exception=True)
        patient = patient_service.create_patient(request.user, **s.validated_data)
        return Response({
            'success': True,
            'message': 'Paciente cadastrado com sucesso',
            'id': patient.id,
            'data': serialize_patient(patient),
        }, status=201)

    if request.method == 'PUT':
        s = PatientUpdateSerializer.from_request(request.data)
        s.is_valid(raise_exception=True)
        vd = dict(s.validated_data)
        patient_id = vd.pop('id')
        patient = patient_service.update_patient(request.user, patient_id, **vd)
        return Response({
            'success': True,
            'message': 'Paciente atualizado com sucesso',
            'data': serialize_patient(patient),
        })

    pid = request.query_params.get('id')
    if not pid and isinstance(request.data, dict):
        pid = request.data.get('id')
    if not pid:
        raise ValidationError({'id': ['ID do paciente é obrigatório']})
    try:
        pid = int(pid)
    except (TypeError, ValueError):
        raise ValidationError({'id': ['ID do paciente inválido']})
    patient_service.deactivate_patient(request.user, pid)
    return Response({'success': True, 'message': 'Paciente removido com sucesso'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    patient = patient_service.get_active_patient(pk)
    return Response({'success': True, 'data': serialize_patient(patient)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_markers(request):
    """Active patients as a GeoJSON FeatureCollection for the map."""
    features = [patient_feature(p) for p in patient_service.list_active_patients()]
    return Response({'type': 'FeatureCollection', 'features': features})
