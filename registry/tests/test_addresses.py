import pytest

from registry.exceptions import GeocodingFailure, StreetNotFound
from registry.models import Address, Street
from registry.services import geocoding
from registry.services.addresses import find_street, normalize_street_name, resolve_address
from registry.services.geocoding import GeocodeResult


@pytest.mark.parametrize('raw', [
    'Rua São João',
    'rua sao joao',
    'RUA SÃO JOÃO',
    '  Rua   São\tJoão  ',
    'Rua Sao João',
])
def test_street_name_variants_share_one_key(raw):
    assert normalize_street_name(raw) == 'rua sao joao'


def test_normalization_strips_cedilla_and_keeps_digits():
    assert normalize_street_name('Praça  Conceição 25') == 'praca conceicao 25'


@pytest.mark.django_db
def test_street_save_stores_normalized_name():
    street = Street.objects.create(name='Avenida Baltazar de Oliveira Garcia', street_type='avenida')
    assert street.normalized_name == 'avenida baltazar de oliveira garcia'


@pytest.mark.django_db
def test_find_street_by_normalized_or_exact_name():
    street = Street.objects.create(name='Rua São João')
    assert find_street('rua sao joao') == street
    assert find_street('RUA  SÃO JOÃO') == street
    assert find_street('Rua São João') == street


@pytest.mark.django_db
def test_find_street_prefers_lowest_id_on_ambiguous_match():
    first = Street.objects.create(name='Rua São João')
    Street.objects.create(name='Rua Sao Joao')
    assert find_street('rua sao joao') == first


@pytest.mark.django_db
def test_find_street_unknown_name():
    with pytest.raises(StreetNotFound):
        find_street('Rua Inexistente')


@pytest.fixture
def street(db):
    return Street.objects.create(name='Rua São João')


@pytest.fixture
def geocode_calls(monkeypatch):
    calls = []

    def install(result):
        def fake(street_name, number, *args, **kwargs):
            calls.append((street_name, number))
            return result
        monkeypatch.setattr(geocoding, 'geocode_address', fake)
        return calls

    return install


def test_existing_address_is_reused_without_geocoding(street, geocode_calls):
    stored = Address.objects.create(street=street, number='100', latitude=-30.03, longitude=-51.15,
                                    coordinates_dms='x')
    calls = geocode_calls(GeocodeResult(-30.0, -51.1))
    assert resolve_address('rua sao joao', '100') == stored
    assert calls == []


def test_new_address_triggers_exactly_one_geocoding_call(street, geocode_calls):
    calls = geocode_calls(GeocodeResult(-30.0234, -51.1535, 'Rua São João, 100'))
    address = resolve_address('Rua São João', '100', 'apto 2')
    assert calls == [('Rua São João', '100')]
    assert address.street == street
    assert address.complement == 'apto 2'
    assert address.latitude == pytest.approx(-30.0234)
    assert address.longitude == pytest.approx(-51.1535)
    assert address.coordinates_dms == '30°01\'24.2"S 51°09\'12.6"W'
    # second resolution hits the stored row
    assert resolve_address('rua sao joao', ' 100 ') == address
    assert len(calls) == 1


def test_out_of_bounds_coordinates_are_rejected(street, geocode_calls):
    geocode_calls(GeocodeResult(-23.55, -46.63))
    with pytest.raises(GeocodingFailure):
        resolve_address('Rua São João', '100')
    assert Address.objects.count() == 0


def test_missing_geocode_result_is_rejected(street, geocode_calls):
    geocode_calls(None)
    with pytest.raises(GeocodingFailure):
        resolve_address('Rua São João', '100')
    assert Address.objects.count() == 0


def test_unknown_street_never_geocodes(db, geocode_calls):
    calls = geocode_calls(GeocodeResult(-30.0, -51.1))
    with pytest.raises(StreetNotFound):
        resolve_address('Rua Nenhuma', '1')
    assert calls == []


def test_concurrent_insert_is_absorbed(street, monkeypatch):
    winner = {}

    def fake(street_name, number, *args, **kwargs):
        # simulate a parallel request storing the same pair after our lookup
        winner['row'] = Address.objects.create(street=street, number=number, latitude=-30.0, longitude=-51.1)
        return GeocodeResult(-30.01, -51.11)

    monkeypatch.setattr(geocoding, 'geocode_address', fake)
    address = resolve_address('Rua São João', '7')
    assert address == winner['row']
    assert Address.objects.filter(street=street, number='7').count() == 1
