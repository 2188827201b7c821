import logging

from django.db import transaction

from registry.exceptions import PatientNotFound
from registry.models import Patient
from registry.services.addresses import resolve_address
from registry.services.audit import log_action

logger = logging.getLogger(__name__)


def list_active_patients():
    return (
        Patient.objects.filter(active=True)
        .select_related('address', 'address__street')
        .order_by('name', 'id')
    )


def get_active_patient(patient_id) -> Patient:
    patient = list_active_patients().filter(id=patient_id).first()
    if patient is None:
        raise PatientNotFound()
    return patient


def create_patient(current_user, *, name, street, number, last_visit, complement=''):
    # address and patient rows commit together or not at all
    with transaction.atomic():
        address = resolve_address(street, number, complement)
        patient = Patient.objects.create(name=name, address=address, complement=complement,
                                         last_visit=last_visit)
        log_action(user=current_user, action='patient_create', object_type='patient', object_id=patient.id,
                   detail={'address_id': address.id})
    logger.info('patient %s created at address %s', patient.id, address.id)
    return patient


def update_patient(current_user, patient_id, *, name, street, number, last_visit, complement=''):
    with transaction.atomic():
        patient = Patient.objects.select_for_update().filter(id=patient_id, active=True).first()
        if patient is None:
            raise PatientNotFound()
        address = resolve_address(street, number, complement)
        patient.name = name
        patient.address = address
        patient.complement = complement
        patient.last_visit = last_visit
        patient.save(update_fields=['name', 'address', 'complement', 'last_visit', 'updated_at'])
        log_action(user=current_user, action='patient_update', object_type='patient', object_id=patient.id,
                   detail={'address_id': address.id})
    logger.info('patient %s updated', patient.id)
    return patient


def deactivate_patient(current_user, patient_id) -> Patient:
    with transaction.atomic():
        patient = Patient.objects.filter(id=patient_id, active=True).first()
        if patient is None:
            raise PatientNotFound()
        patient.active = False
        patient.save(update_fields=['active', 'updated_at'])
        log_action(user=current_user, action='patient_delete', object_type='patient', object_id=patient.id)
    logger.info('patient %s deactivated', patient.id)
    return patient
