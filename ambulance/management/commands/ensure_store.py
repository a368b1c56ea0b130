"""
Bring the dispatch store up to date and verify its shape.

Safe to run on every start: migrations are additive, and the column
check only reads the schema.
"""
import logging

from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError
from django.db import connection

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    'patients': ['nhsNumber', 'name', 'address', 'medicalHistory'],
    'dispatches': [
        'id', 'patientId', 'condition', 'timestamp', 'patientName', 'patientAddress',
        'medicalHistory', 'completed', 'ambulanceId', 'completionTime',
    ],
}


class Command(BaseCommand):
    help = "Apply pending migrations and verify the patients/dispatches tables (idempotent)."

    def handle(self, *args, **options):
        call_command('migrate', interactive=False, verbosity=0)
        with connection.cursor() as cursor:
            tables = set(connection.introspection.table_names(cursor))
            for table, columns in REQUIRED_COLUMNS.items():
                if table not in tables:
                    raise CommandError(f"table {table} is missing after migrate")
                present = {c.name for c in connection.introspection.get_table_description(cursor, table)}
                missing = [c for c in columns if c not in present]
                if missing:
                    raise CommandError(f"table {table} is missing columns: {', '.join(missing)}")
                logger.info("Store table %s verified (%d columns)", table, len(present))
                self.stdout.write(self.style.SUCCESS(f"ok: {table} ({len(present)} columns)"))
        self.stdout.write(self.style.SUCCESS("Dispatch store ready."))
