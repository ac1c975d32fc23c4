"""
Management command to hydrate the entity store, seeding missing collections.
"""
from django.core.management.base import BaseCommand, CommandError

from clinic.exceptions import UnknownEntityKind
from clinic.services.entities import KINDS, resolve_kind_name
from clinic.services.runtime import get_store


class Command(BaseCommand):
    help = 'Seed absent entity collections; --reset overwrites them with seed data'

    def add_arguments(self, parser):
        parser.add_argument('--reset', action='store_true',
                            help='overwrite the selected collections with seed data')
        parser.add_argument('--kind', action='append', dest='kinds', default=[],
                            help=f"collection to reset, repeatable ({', '.join(KINDS)})")

    def handle(self, *args, **options):
        try:
            kinds = [resolve_kind_name(k) for k in options['kinds']]
        except UnknownEntityKind as exc:
            raise CommandError(str(exc))
        if kinds and not options['reset']:
            raise CommandError('--kind only applies together with --reset')

        store = get_store()
        if options['reset']:
            names = store.reset(kinds or None)
            self.stdout.write(self.style.WARNING(f"reset: {', '.join(names)}"))

        for collection in store:
            self.stdout.write(f"{collection.kind.storage_key}: {len(collection)} records")
        self.stdout.write(self.style.SUCCESS('Entity store ready.'))
