# containers/management/commands/seed_locations.py
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from containers.models import Location

# --- Вспомогалки -------------------------------------------------------------

def build_code(aisle: int, rack: int, level: int, fmt: str) -> str:
    """
    Собирает код ячейки по формату. По умолчанию: A-{rack:02}-{level:02}
    (буква ряда, номер стойки, номер полки), например A-01-01.
    """
    return fmt.format(aisle=chr(ord('A') + aisle - 1), rack=rack, level=level).upper()


def service_locations():
    """Служебные локации, на которые ссылается движок: док приёмки и сборочная линия."""
    options = getattr(settings, "CONTAINER_FLOW", {})
    return [
        {
            'code': options.get("RECEIVING_LOCATION", "RECEIVING"),
            'name': 'Receiving dock',
            'location_type': Location.LocationType.DOCK,
        },
        {
            'code': options.get("ASSEMBLY_LOCATION", "ASSEMBLY-LINE-1"),
            'name': 'Assembly line 1',
            'location_type': Location.LocationType.LINE,
        },
    ]

# --- Команда -----------------------------------------------------------------

class Command(BaseCommand):
    help = (
        "Provision warehouse locations: receiving dock, assembly line and a shelf grid.\n"
        "Idempotent: existing codes are skipped."
    )

    def add_arguments(self, parser):
        parser.add_argument('--aisles', type=int, default=1, help="Количество рядов (A, B, ...).")
        parser.add_argument('--racks', type=int, default=5, help="Стоек в ряду.")
        parser.add_argument('--levels', type=int, default=3, help="Полок в стойке.")
        parser.add_argument('--code-format', default='{aisle}-{rack:02}-{level:02}',
                            help="Шаблон кода ячейки (используются aisle/rack/level).")
        parser.add_argument('--no-shelves', action='store_true', help="Создать только служебные локации.")

    @transaction.atomic
    def handle(self, *args, **opts):
        aisles, racks, levels = opts['aisles'], opts['racks'], opts['levels']
        if aisles > 26:
            raise CommandError("Рядов не может быть больше 26 (A..Z).")
        if min(aisles, racks, levels) < 0:
            raise CommandError("Размеры сетки не могут быть отрицательными.")

        payload = service_locations()
        if not opts['no_shelves']:
            for a in range(1, aisles + 1):
                for r in range(1, racks + 1):
                    for lv in range(1, levels + 1):
                        payload.append({
                            'code': build_code(a, r, lv, opts['code_format']),
                            'location_type': Location.LocationType.SHELF,
                        })

        created = 0
        for row in payload:
            _, was_created = Location.objects.get_or_create(code=row['code'], defaults=row)
            if was_created:
                created += 1

        self.stdout.write(self.style.SUCCESS(
            f"Done. Created {created} locations, skipped {len(payload) - created} existing."
        ))
