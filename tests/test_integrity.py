import logging

import pytest
from django.core.management import call_command

from containers.celery_tasks import check_container_integrity_tick
from containers.domain import ContainerRow
from containers.models import Container
from containers.services.integrity import find_violations


def row(code, status, sku="SKU-1", quantity=1):
    return ContainerRow(code=code, sku=sku, quantity=quantity, status=status, location_code="A-01-01")


def test_consistent_rows_have_no_violations():
    rows = [
        row("C-1", "Stored"),
        row("C-2", "Idle", sku=None, quantity=None),
        row("C-3", "Empty", sku=None, quantity=None),
        row("C-4", "In_Transit", quantity=0),
    ]

    assert find_violations(rows) == []


def test_violations_are_reported_per_container():
    violations = find_violations([
        row("C-1", None),
        row("C-2", "Lost"),
        row("C-3", "Idle"),
        row("C-4", "Stored", sku=None),
        row("C-5", "Pending_QC", quantity=-2),
    ])

    assert [v.code for v in violations] == ["C-1", "C-2", "C-3", "C-4", "C-5"]
    assert str(violations[1]) == "C-2: неизвестный статус 'Lost'"


# === Фоновая проверка и команда ===

@pytest.mark.django_db
def test_integrity_tick_counts_violations(seeded_locations, caplog):
    shelf = seeded_locations["A-01-01"]
    Container.objects.create(code="C-1", sku="SKU-1", quantity=1, status="Stored", location=shelf)
    Container.objects.create(code="C-2", sku=None, quantity=None, status="Empty", location=shelf)
    Container.objects.create(code="C-3", sku="SKU-1", quantity=1, status=None, location=shelf)

    with caplog.at_level(logging.INFO):
        assert check_container_integrity_tick() == 1

    assert "VIOLATIONS x1" in caplog.text
    assert "containers=3" in caplog.text
    assert "empty=1" in caplog.text


@pytest.mark.django_db
def test_integrity_tick_on_clean_store(caplog):
    with caplog.at_level(logging.INFO):
        assert check_container_integrity_tick() == 0

    assert "OK" in caplog.text


@pytest.mark.django_db
def test_check_containers_command(seeded_locations, capsys):
    shelf = seeded_locations["A-01-01"]
    Container.objects.create(code="C-1", sku="SKU-1", quantity=1, status="Stored", location=shelf)

    call_command("check_containers")
    assert "OK: 1 containers verified" in capsys.readouterr().out

    Container.objects.create(code="C-2", sku="SKU-1", quantity=1, status="Lost", location=shelf)
    with pytest.raises(SystemExit) as excinfo:
        call_command("check_containers")

    assert excinfo.value.code == 1
    assert "FAIL: C-2" in capsys.readouterr().out
