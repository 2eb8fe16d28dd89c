from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Optional, Protocol

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import OuterRef, Subquery
from django.utils.timezone import now

from containers.domain import ContainerRecord, ContainerRow
from containers.exceptions import BackendError, Conflict, NotFound
from containers.models import Container, Item


__all__ = ["ContainerRepository", "DjangoContainerRepository", "UPDATABLE_FIELDS"]


# Поля, которые движок вправе менять; code неизменяем
UPDATABLE_FIELDS = frozenset({"sku", "quantity", "status", "location_id"})


class ContainerRepository(Protocol):
    def find(self, code: str) -> Optional[ContainerRecord]: ...

    def create(self, record: ContainerRecord) -> None: ...

    def update_fields(self, code: str, **fields) -> None: ...

    def list_all(self) -> list[ContainerRow]: ...

    def atomic(self) -> AbstractContextManager: ...


def _check_fields(fields: dict) -> None:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise TypeError(f"Недопустимые поля для обновления: {sorted(unknown)}")


class DjangoContainerRepository:
    """
    Хранилище тары поверх Django ORM.
    Ошибки БД заворачиваются в BackendError, нарушение уникальности кода в Conflict.
    """

    def find(self, code: str) -> Optional[ContainerRecord]:
        try:
            row = (
                Container.objects
                .filter(code=code)
                .values("code", "sku", "quantity", "status", "location_id")
                .first()
            )
        except DatabaseError as exc:
            raise BackendError(f"Не удалось загрузить тару '{code}': {exc}") from exc
        return ContainerRecord(**row) if row else None

    def create(self, record: ContainerRecord) -> None:
        try:
            # отдельная точка сохранения: после IntegrityError внешняя транзакция остаётся рабочей
            with transaction.atomic():
                Container.objects.create(
                    code=record.code,
                    sku=record.sku,
                    quantity=record.quantity,
                    status=record.status,
                    location_id=record.location_id,
                )
        except IntegrityError as exc:
            raise Conflict(f"Тара '{record.code}' уже существует") from exc
        except DatabaseError as exc:
            raise BackendError(f"Не удалось создать тару '{record.code}': {exc}") from exc

    def update_fields(self, code: str, **fields) -> None:
        _check_fields(fields)
        try:
            updated = (
                Container.objects
                .filter(code=code)
                .update(**fields, updated_at=now())
            )
        except DatabaseError as exc:
            raise BackendError(f"Не удалось обновить тару '{code}': {exc}") from exc
        if not updated:
            raise NotFound(f"Тара '{code}' не найдена")

    def list_all(self) -> list[ContainerRow]:
        item_name = Item.objects.filter(sku=OuterRef("sku")).values("name")[:1]
        try:
            rows = list(
                Container.objects
                .order_by("code")
                .annotate(item_name=Subquery(item_name))
                .values("code", "sku", "quantity", "status", "location__code", "item_name")
            )
        except DatabaseError as exc:
            raise BackendError(f"Не удалось загрузить список тары: {exc}") from exc
        return [
            ContainerRow(
                code=row["code"],
                sku=row["sku"],
                quantity=row["quantity"],
                status=row["status"],
                location_code=row["location__code"],
                item_name=row["item_name"],
            )
            for row in rows
        ]

    def atomic(self) -> AbstractContextManager:
        return transaction.atomic()
