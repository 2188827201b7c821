import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from registry.models import Street

pytestmark = pytest.mark.django_db


def write_csv(tmp_path, text):
    path = tmp_path / 'ruas.csv'
    path.write_text(text, encoding='utf-8')
    return str(path)


def test_load_streets_creates_catalog(tmp_path):
    path = write_csv(tmp_path, 'name,type\nRua São João,rua\nAvenida Baltazar de Oliveira Garcia,Avenida\n,rua\n')
    call_command('load_streets', path)
    assert Street.objects.count() == 2
    avenue = Street.objects.get(normalized_name='avenida baltazar de oliveira garcia')
    assert avenue.street_type == 'avenida'


def test_load_streets_is_idempotent_and_updates_names(tmp_path):
    Street.objects.create(name='Rua Sao Joao', street_type='rua')
    path = write_csv(tmp_path, 'nome,tipo_logradouro\nRua São João,Travessa\n')
    call_command('load_streets', path)
    call_command('load_streets', path)
    street = Street.objects.get()
    assert street.name == 'Rua São João'
    assert street.street_type == 'travessa'


def test_unknown_type_falls_back_to_rua(tmp_path):
    path = write_csv(tmp_path, 'name;type\nBeco do Oitavo;viela\n')
    call_command('load_streets', path, delimiter=';')
    assert Street.objects.get().street_type == 'rua'


def test_missing_file_is_a_command_error(tmp_path):
    with pytest.raises(CommandError):
        call_command('load_streets', str(tmp_path / 'nope.csv'))
