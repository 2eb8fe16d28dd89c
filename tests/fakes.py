from __future__ import annotations

import copy
from contextlib import contextmanager, nullcontext
from dataclasses import replace
from typing import Optional

from containers.domain import ContainerRecord, ContainerRow
from containers.exceptions import BackendError, Conflict, NotFound
from containers.services.repository import UPDATABLE_FIELDS


class InMemoryLocationDirectory:
    def __init__(self, codes=("RECEIVING", "ASSEMBLY-LINE-1", "A-01-01", "A-01-02")):
        self.ids = {code: index for index, code in enumerate(codes, start=1)}

    def resolve(self, code: str) -> int:
        try:
            return self.ids[code]
        except KeyError:
            raise NotFound(f"Локация '{code}' не найдена")

    def code_for(self, location_id: int) -> Optional[str]:
        for code, known_id in self.ids.items():
            if known_id == location_id:
                return code
        return None


class InMemoryContainerRepository:
    """Хранилище без БД; atomic() откатывает словарь к снимку при исключении."""

    def __init__(self, locations: InMemoryLocationDirectory):
        self.locations = locations
        self.records: dict[str, ContainerRecord] = {}
        self.calls: list[str] = []
        self.fail_on_create: Optional[Exception] = None
        self.fail_on_update: Optional[Exception] = None

    def find(self, code: str) -> Optional[ContainerRecord]:
        record = self.records.get(code)
        return replace(record) if record else None

    def create(self, record: ContainerRecord) -> None:
        self.calls.append(f"create:{record.code}")
        if self.fail_on_create is not None:
            raise self.fail_on_create
        if record.code in self.records:
            raise Conflict(f"Тара '{record.code}' уже существует")
        self.records[record.code] = replace(record)

    def update_fields(self, code: str, **fields) -> None:
        self.calls.append(f"update:{code}")
        if self.fail_on_update is not None:
            raise self.fail_on_update
        assert set(fields) <= UPDATABLE_FIELDS, fields
        if code not in self.records:
            raise NotFound(f"Тара '{code}' не найдена")
        self.records[code] = replace(self.records[code], **fields)

    def list_all(self) -> list[ContainerRow]:
        return [
            ContainerRow(
                code=record.code,
                sku=record.sku,
                quantity=record.quantity,
                status=record.status,
                location_code=self.locations.code_for(record.location_id),
            )
            for code, record in sorted(self.records.items())
        ]

    @contextmanager
    def atomic(self):
        snapshot = copy.deepcopy(self.records)
        try:
            yield
        except Exception:
            self.records = snapshot
            raise

    def location_code(self, code: str) -> Optional[str]:
        return self.locations.code_for(self.records[code].location_id)


class NonTransactionalRepository(InMemoryContainerRepository):
    """Хранилище без транзакций: то, что записано, остаётся записанным."""

    def atomic(self):
        return nullcontext()


class BrokenCompensationRepository(NonTransactionalRepository):
    """Первая запись проходит, всё остальное падает, компенсация невозможна."""

    def update_fields(self, code: str, **fields) -> None:
        if any(call.startswith("update:") for call in self.calls):
            self.calls.append(f"update:{code}")
            raise BackendError("Хранилище недоступно")
        super().update_fields(code, **fields)
