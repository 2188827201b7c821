"""
Management command to load the street catalog from a CSV file.

The file needs a ``name`` column and may carry a ``type`` column
(``avenida``, ``rua``, ...).  Rows whose normalized name already exists
are updated in place, so the command can be re-run safely.
"""
import csv

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from registry.models import Street, normalize_street_name

VALID_TYPES = {code for code, _ in Street.TYPE_CHOICES}


class Command(BaseCommand):
    help = 'Load or update the street catalog from a CSV file'

    def add_arguments(self, parser):
        parser.add_argument('csv_path')
        parser.add_argument('--delimiter', default=',')

    def handle(self, *args, **options):
        path = options['csv_path']
        try:
            with open(path, newline='', encoding='utf-8') as fh:
                rows = list(csv.DictReader(fh, delimiter=options['delimiter']))
        except OSError as e:
            raise CommandError(f'cannot read {path}: {e}')

        created = updated = skipped = 0
        with transaction.atomic():
            for row in rows:
                name = (row.get('name') or row.get('nome') or '').strip()
                if not name:
                    skipped += 1
                    continue
                street_type = normalize_street_name(row.get('type') or row.get('tipo_logradouro') or 'rua')
                if street_type not in VALID_TYPES:
                    self.stdout.write(self.style.WARNING(f'unknown type {street_type!r} for {name}, using rua'))
                    street_type = 'rua'
                street = Street.objects.filter(normalized_name=normalize_street_name(name)).order_by('id').first()
                if street is None:
                    Street.objects.create(name=name, street_type=street_type)
                    created += 1
                else:
                    street.name = name
                    street.street_type = street_type
                    street.save()
                    updated += 1

        self.stdout.write(self.style.SUCCESS(
            f'Streets loaded: {created} created, {updated} updated, {skipped} skipped.'
        ))
