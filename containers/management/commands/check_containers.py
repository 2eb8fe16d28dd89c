from django.core.management.base import BaseCommand

from containers.services.integrity import find_violations
from containers.services.repository import DjangoContainerRepository


class Command(BaseCommand):
    help = "Verify container status/contents invariants"

    def handle(self, *args, **options):
        rows = DjangoContainerRepository().list_all()
        violations = find_violations(rows)
        if not violations:
            self.stdout.write(self.style.SUCCESS(f"OK: {len(rows)} containers verified"))
            return
        for violation in violations:
            self.stdout.write(self.style.ERROR(f"FAIL: {violation}"))
        raise SystemExit(1)
