import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

import requests
from django.conf import settings

from registry.exceptions import GeocoderNotConfigured

logger = logging.getLogger(__name__)


@dataclass
class GeocodeResult:
    latitude: float
    longitude: float
    display_name: Optional[str] = None


def _search(text: str) -> Optional[GeocodeResult]:
    """Run one Geoapify free-text search and return the first feature.

    Raises ``requests.RequestException`` on transport errors or a non-2xx
    status; returns ``None`` when the provider has no candidate.
    """
    if not settings.GEOAPIFY_API_KEY:
        raise GeocoderNotConfigured()
    params = {
        'text': text,
        'apiKey': settings.GEOAPIFY_API_KEY,
        'limit': 1,
    }
    r = requests.get(settings.GEOAPIFY_URL, params=params, timeout=settings.GEOCODING_TIMEOUT)
    r.raise_for_status()
    data = r.json()
    features = data.get('features') or []
    if not features:
        return None
    feature = features[0]
    lng, lat = feature['geometry']['coordinates'][:2]
    props = feature.get('properties') or {}
    return GeocodeResult(latitude=float(lat), longitude=float(lng), display_name=props.get('formatted'))


def geocode_address(street: str, number: str, neighborhood: Optional[str] = None,
                    city: Optional[str] = None, state: Optional[str] = None,
                    country: Optional[str] = None) -> Optional[GeocodeResult]:
    """Geocode ``street, number`` inside the serviced neighborhood.

    When the full address has no match, a single broader query without
    the house number is tried.  Returns ``None`` when nothing is found or
    the provider cannot be reached.
    """
    ctx = settings.GEOCODING_CONTEXT
    neighborhood = neighborhood or ctx['neighborhood']
    city = city or ctx['city']
    state = state or ctx['state']
    country = country or ctx['country']

    full_text = f"{street}, {number}, {neighborhood}, {city} - {state}, {country}"
    logger.info('geocoding %s', full_text)
    try:
        result = _search(full_text)
    except requests.RequestException as e:
        logger.error('geocoding request failed for %s: %s', full_text, e)
        return None
    if result is not None:
        logger.info('coordinates found: %s, %s', result.latitude, result.longitude)
        return result

    logger.warning('no result for %s, trying street-level search', full_text)
    broad_text = f"{street}, {neighborhood}, {city}, {state}, {country}"
    try:
        result = _search(broad_text)
    except requests.RequestException as e:
        logger.error('street-level geocoding failed for %s: %s', broad_text, e)
        return None
    if result is not None:
        logger.info('approximate coordinates: %s, %s', result.latitude, result.longitude)
    return result


def is_valid_coordinate(lat: float, lng: float) -> bool:
    min_lat, max_lat, min_lng, max_lng = settings.SERVICE_AREA_BOUNDS
    return min_lat <= lat <= max_lat and min_lng <= lng <= max_lng


def _split_dms(value: float) -> Tuple[int, int, str]:
    # round to tenths of a second first so 59.95s carries into the minute
    tenths = round(abs(value) * 36000)
    degrees, rest = divmod(tenths, 36000)
    minutes, rest = divmod(rest, 600)
    return degrees, minutes, f"{rest / 10:.1f}"


def decimal_to_dms(lat: float, lng: float) -> str:
    """Format a coordinate pair as ``30°01'23.4"S 51°09'12.3"W``."""
    lat_deg, lat_min, lat_sec = _split_dms(lat)
    lng_deg, lng_min, lng_sec = _split_dms(lng)
    lat_dir = 'N' if lat >= 0 else 'S'
    lng_dir = 'E' if lng >= 0 else 'W'
    return (
        f"{lat_deg}°{lat_min:02d}'{lat_sec}\"{lat_dir} "
        f"{lng_deg}°{lng_min:02d}'{lng_sec}\"{lng_dir}"
    )


_DMS_RE = re.compile(r"""(\d+)°(\d+)'(\d+(?:\.\d+)?)"([NSEW])""")


def dms_to_decimal(text: str) -> Tuple[float, float]:
    """Parse the output of :func:`decimal_to_dms` back to ``(lat, lng)``."""
    parts = _DMS_RE.findall(text or '')
    if len(parts) != 2:
        raise ValueError(f'invalid DMS coordinates: {text!r}')
    values = []
    for deg, minutes, seconds, hemisphere in parts:
        value = int(deg) + int(minutes) / 60 + float(seconds) / 3600
        values.append(-value if hemisphere in ('S', 'W') else value)
    return values[0], values[1]
