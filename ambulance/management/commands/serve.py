import os

from django.conf import settings
from django.core.management import call_command
from django.core.management.commands.runserver import Command as RunserverCommand


class Command(RunserverCommand):
    help = "Ensure the dispatch store, then run the development server on DISPATCH_HOST:DISPATCH_PORT."

    default_addr = settings.DISPATCH_HOST
    default_port = str(settings.DISPATCH_PORT)

    def handle(self, *args, **options):
        # the autoreloader re-runs handle() in its child process
        if os.environ.get('RUN_MAIN') != 'true':
            call_command('ensure_store')
        super().handle(*args, **options)
