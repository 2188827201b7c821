import pytest
import requests

from registry.exceptions import GeocoderNotConfigured
from registry.services import geocoding
from registry.tests.helpers import FakeResponse, feature_collection


def test_geocode_returns_first_feature_with_swapped_axes(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(params)
        return FakeResponse(feature_collection(-30.0234, -51.1535, 'Rua A, 100'))

    monkeypatch.setattr(geocoding.requests, 'get', fake_get)
    result = geocoding.geocode_address('Rua A', '100')
    assert result.latitude == pytest.approx(-30.0234)
    assert result.longitude == pytest.approx(-51.1535)
    assert result.display_name == 'Rua A, 100'
    assert len(calls) == 1
    assert calls[0]['text'] == 'Rua A, 100, Passo das Pedras, Porto Alegre - RS, Brasil'
    assert calls[0]['apiKey'] == 'test-key'
    assert calls[0]['limit'] == 1


def test_empty_result_falls_back_to_street_level_query(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(params['text'])
        if len(calls) == 1:
            return FakeResponse({'features': []})
        return FakeResponse(feature_collection(-30.03, -51.15))

    monkeypatch.setattr(geocoding.requests, 'get', fake_get)
    result = geocoding.geocode_address('Rua A', '100')
    assert result is not None
    assert calls == [
        'Rua A, 100, Passo das Pedras, Porto Alegre - RS, Brasil',
        'Rua A, Passo das Pedras, Porto Alegre, RS, Brasil',
    ]


def test_fallback_without_result_returns_none(monkeypatch):
    monkeypatch.setattr(geocoding.requests, 'get', lambda *a, **kw: FakeResponse({'features': []}))
    assert geocoding.geocode_address('Rua A', '100') is None


def test_http_error_returns_none_without_fallback(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(params)
        return FakeResponse(status_code=502)

    monkeypatch.setattr(geocoding.requests, 'get', fake_get)
    assert geocoding.geocode_address('Rua A', '100') is None
    assert len(calls) == 1


def test_transport_error_returns_none(monkeypatch):
    def fake_get(url, params=None, timeout=None):
        raise requests.ConnectionError('unreachable')

    monkeypatch.setattr(geocoding.requests, 'get', fake_get)
    assert geocoding.geocode_address('Rua A', '100') is None


def test_missing_api_key_is_reported(monkeypatch, settings):
    settings.GEOAPIFY_API_KEY = ''
    monkeypatch.setattr(geocoding.requests, 'get', lambda *a, **kw: pytest.fail('no request expected'))
    with pytest.raises(GeocoderNotConfigured):
        geocoding.geocode_address('Rua A', '100')


@pytest.mark.parametrize('lat,lng,expected', [
    (-30.03, -51.15, True),
    (-30.2, -51.3, True),
    (-29.9, -51.0, True),
    (-30.21, -51.15, False),
    (-29.89, -51.15, False),
    (-30.03, -51.31, False),
    (-30.03, -50.99, False),
    (0.0, 0.0, False),
])
def test_service_area_bounds(lat, lng, expected):
    assert geocoding.is_valid_coordinate(lat, lng) is expected


def test_decimal_to_dms_southern_western():
    assert geocoding.decimal_to_dms(-30.0234, -51.1535) == '30°01\'24.2"S 51°09\'12.6"W'


def test_decimal_to_dms_northern_eastern():
    assert geocoding.decimal_to_dms(1.5, 2.25) == '1°30\'0.0"N 2°15\'0.0"E'


@pytest.mark.parametrize('lat,lng,expected', [
    (-30.0166666, -51.1, '30°01\'0.0"S 51°06\'0.0"W'),
    (-29.9999999, -51.0, '30°00\'0.0"S 51°00\'0.0"W'),
])
def test_seconds_rounding_carries_into_minutes(lat, lng, expected):
    text = geocoding.decimal_to_dms(lat, lng)
    assert text == expected
    assert '60.0' not in text


@pytest.mark.parametrize('lat,lng', [
    (-30.0234, -51.1535),
    (-29.95871, -51.12345),
    (-30.1999, -51.0001),
    (12.3456, 98.7654),
])
def test_dms_text_parses_back_within_a_tenth_of_a_second(lat, lng):
    parsed_lat, parsed_lng = geocoding.dms_to_decimal(geocoding.decimal_to_dms(lat, lng))
    assert abs(parsed_lat - lat) * 3600 <= 0.051
    assert abs(parsed_lng - lng) * 3600 <= 0.051


def test_dms_parse_rejects_garbage():
    with pytest.raises(ValueError):
        geocoding.dms_to_decimal('not a coordinate')
