"""
Error taxonomy and the unified API exception handler.

Every failure reaching the request boundary is rendered as
``{'success': False, 'message': ...}`` with the status code of the
originating exception.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = 'Erro interno do servidor'


class AuthError(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Usuário ou senha inválidos'
    default_code = 'auth_error'


class StreetNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Rua não encontrada no cadastro'
    default_code = 'street_not_found'


class PatientNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Paciente não encontrado'
    default_code = 'patient_not_found'


class GeocodingFailure(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Não foi possível encontrar as coordenadas do endereço'
    default_code = 'geocoding_failure'


class GeocoderNotConfigured(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Serviço de geocodificação não configurado'
    default_code = 'geocoder_not_configured'


class UserAlreadyExists(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Este usuário já existe'
    default_code = 'user_exists'


def _first_message(detail) -> str:
    """Flatten DRF error detail (dict/list/str) to one readable message."""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _first_message(detail['detail'])
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.error('unhandled error in %s', context.get('view').__class__.__name__, exc_info=exc)
        return Response({'success': False, 'message': INTERNAL_ERROR_MESSAGE}, status=500)
    body = {'success': False, 'message': _first_message(resp.data)}
    if isinstance(resp.data, dict) and 'detail' not in resp.data:
        body['errors'] = resp.data
    resp.data = body
    return resp
