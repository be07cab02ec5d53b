from django.core.management.base import BaseCommand, CommandError
from academics.models import Term
from academics.services import sync_enrollment_counts
import logging

logger = logging.getLogger(__name__)

class Command(BaseCommand):
    help = "Recomputes every course group's cached enrollment counter from live enrollments."

    def add_arguments(self, parser):
        parser.add_argument("--term", help="Term code to limit the sync to (defaults to all terms)")

    def handle(self, *args, **options):
        term = None
        if options.get("term"):
            term = Term.objects.filter(code=options["term"]).first()
            if not term:
                raise CommandError(f"Unknown term {options['term']}")

        self.stdout.write("Starting enrollment counter sync...")
        healed = sync_enrollment_counts(term)
        for group in healed:
            self.stdout.write(f"  {group}: {group.current_enrollment_count}")
        self.stdout.write(self.style.SUCCESS(f"Healed {len(healed)} stale group counters."))
