from django.core.management.base import BaseCommand, CommandError

from accounts.exceptions import BatchEnvelopeError
from accounts.services import provisioning


class Command(BaseCommand):
    help = 'Create student accounts from a JSON array of {email, password, name, roll, department}'

    def add_arguments(self, parser):
        parser.add_argument('--file', '-f', dest='file', help='JSON file path', required=True)

    def handle(self, *args, **options):
        path = options['file']

        try:
            with open(path, 'rb') as fh:
                raw = fh.read()
        except FileNotFoundError:
            raise CommandError(f'File not found: {path}')

        try:
            items = provisioning.parse_batch(raw)
        except BatchEnvelopeError as exc:
            raise CommandError(str(exc))

        logs = provisioning.provision_students(items)

        created = 0
        for line in logs:
            if line.startswith('Created: '):
                created += 1
                self.stdout.write(self.style.SUCCESS(line))
            else:
                self.stdout.write(self.style.ERROR(line))

        self.stdout.write(self.style.SUCCESS(f'Provisioning finished. Created: {created}, Errors: {len(logs) - created}'))
