from django.core.management.base import BaseCommand, CommandError

from ambulance.services.client import DispatchClient, DispatchClientError

ACTION_LABELS = {
    'accept': 'Accept',
    'complete': 'Mark as Completed',
    None: 'Dispatch Completed',
}


class Command(BaseCommand):
    help = "Show dispatches as an ambulance crew sees them; optionally accept or complete one."

    def add_arguments(self, parser):
        parser.add_argument('--url', help='Dispatch API base URL (default: DISPATCH_API_URL)')
        parser.add_argument('--ambulance', help='Ambulance id used when accepting (default: AMBULANCE_ID)')
        group = parser.add_mutually_exclusive_group()
        group.add_argument('--accept', type=int, metavar='ID', help='Accept the dispatch with this id')
        group.add_argument('--complete', type=int, metavar='ID', help='Complete the dispatch with this id')

    def handle(self, *args, **opts):
        client = DispatchClient(base_url=opts.get('url'), ambulance_id=opts.get('ambulance'))
        try:
            if opts.get('accept') is not None:
                client.accept(opts['accept'])
                self.stdout.write(self.style.SUCCESS(
                    f"Dispatch {opts['accept']} accepted by ambulance {client.ambulance_id}"
                ))
            elif opts.get('complete') is not None:
                client.complete(opts['complete'])
                self.stdout.write(self.style.SUCCESS(f"Dispatch {opts['complete']} completed"))
            dispatches = client.list_dispatches()
        except DispatchClientError as e:
            raise CommandError(str(e))

        if not dispatches:
            self.stdout.write("No active dispatches at the moment.")
            return
        for d in dispatches:
            line = f"#{d.id} {d.patient_name} - {d.condition} [{ACTION_LABELS[d.action]}]"
            if d.ambulance_id is not None:
                line += f" (ambulance {d.ambulance_id})"
            self.stdout.write(line)
