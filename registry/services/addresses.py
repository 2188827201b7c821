"""
Street lookup and address resolution.

Turns a free-text street name plus house number into a persisted
:class:`~registry.models.Address`, geocoding only pairs that have never
been seen before.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from registry.exceptions import GeocodingFailure, StreetNotFound
from registry.models import Address, Street, normalize_street_name
from registry.services import geocoding

logger = logging.getLogger(__name__)

__all__ = ['normalize_street_name', 'find_street', 'resolve_address']


def find_street(name: str) -> Street:
    """Match a street by normalized key or exact display name.

    When several streets match, the one with the lowest id wins.
    """
    key = normalize_street_name(name)
    street = (
        Street.objects.filter(Q(normalized_name=key) | Q(name=name))
        .order_by('id')
        .first()
    )
    if street is None:
        logger.info('street not found: %r', name)
        raise StreetNotFound()
    return street


def resolve_address(street_name: str, number: str, complement: str = '') -> Address:
    street = find_street(street_name)
    number = str(number).strip()

    existing = Address.objects.filter(street=street, number=number).first()
    if existing is not None:
        logger.info('reusing address %s (%s, %s)', existing.id, street.name, number)
        return existing

    logger.info('new address %s, %s: geocoding', street.name, number)
    result = geocoding.geocode_address(street.name, number)
    if result is None or not geocoding.is_valid_coordinate(result.latitude, result.longitude):
        logger.warning('no usable coordinates for %s, %s: %s', street.name, number, result)
        raise GeocodingFailure(
            f'Não foi possível encontrar as coordenadas do endereço "{street.name}, {number}". '
            'Verifique se o endereço está correto ou escolha um endereço já cadastrado.'
        )

    try:
        with transaction.atomic():
            address = Address.objects.create(
                street=street,
                number=number,
                complement=complement or '',
                latitude=result.latitude,
                longitude=result.longitude,
                coordinates_dms=geocoding.decimal_to_dms(result.latitude, result.longitude),
            )
    except IntegrityError:
        # another request stored the same (street, number) first
        address = Address.objects.get(street=street, number=number)
    logger.info('address %s created at %s', address.id, address.coordinates_dms)
    return address
