import bleach
from rest_framework import serializers

from registry.serializers.auth import with_aliases

DATE_INPUT_FORMATS = ['%d/%m/%Y', '%Y-%m-%d']
DISPLAY_DATE_FORMAT = '%d/%m/%Y'

# Keys posted by the original front-end form
LEGACY_ALIASES = {
    'nomes': 'name',
    'endereços': 'street',
    'enderecos': 'street',
    'número': 'number',
    'numero': 'number',
    'complemento': 'complement',
    'ultima_consulta': 'last_visit',
    'lastVisit': 'last_visit',
}

REQUIRED_MESSAGE = 'Todos os campos são obrigatórios'


class PatientWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    street = serializers.CharField(max_length=255)
    number = serializers.CharField(max_length=20)
    complement = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')
    last_visit = serializers.DateField(input_formats=DATE_INPUT_FORMATS)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name in ('name', 'street', 'number', 'last_visit'):
            self.fields[name].error_messages['required'] = REQUIRED_MESSAGE
            self.fields[name].error_messages['blank'] = REQUIRED_MESSAGE
            self.fields[name].error_messages['null'] = REQUIRED_MESSAGE
        self.fields['last_visit'].error_messages['invalid'] = 'Data inválida, use o formato dd/mm/aaaa'

    @classmethod
    def from_request(cls, data):
        return cls(data=with_aliases(data, LEGACY_ALIASES))

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        if not v:
            raise serializers.ValidationError(REQUIRED_MESSAGE)
        return v

    def validate_number(self, v):
        return bleach.clean((v or '').strip(), strip=True)

    def validate_complement(self, v):
        return bleach.clean((v or '').strip(), strip=True)


class PatientUpdateSerializer(PatientWriteSerializer):
    id = serializers.IntegerField(error_messages={'required': 'ID do paciente é obrigatório'})


def serialize_patient(patient) -> dict:
    address = patient.address
    return {
        'id': patient.id,
        'name': patient.name,
        'street': address.street.name,
        'number': address.number,
        'complement': patient.complement,
        'last_visit': patient.last_visit.strftime(DISPLAY_DATE_FORMAT),
        'lat': address.latitude,
        'lng': address.longitude,
        'coordinates_dms': address.coordinates_dms,
    }


def patient_feature(patient) -> dict:
    """GeoJSON point feature used by the map view."""
    address = patient.address
    return {
        'type': 'Feature',
        'geometry': {'type': 'Point', 'coordinates': [address.longitude, address.latitude]},
        'properties': {
            'id': patient.id,
            'name': patient.name,
            'address': f'{address.street.name}, {address.number}',
            'last_visit': patient.last_visit.strftime(DISPLAY_DATE_FORMAT),
        },
    }
