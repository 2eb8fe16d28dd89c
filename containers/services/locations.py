from __future__ import annotations

from typing import Protocol

from django.db import DatabaseError

from containers.exceptions import BackendError, NotFound
from containers.models import Location


__all__ = ["LocationDirectory", "DjangoLocationDirectory"]


class LocationDirectory(Protocol):
    def resolve(self, code: str) -> int: ...


class DjangoLocationDirectory:
    """Справочник локаций поверх ORM. Только чтение."""

    def resolve(self, code: str) -> int:
        try:
            return Location.objects.only("id").get(code=code).id
        except Location.DoesNotExist:
            raise NotFound(f"Локация '{code}' не найдена")
        except DatabaseError as exc:
            raise BackendError(f"Не удалось загрузить локацию '{code}': {exc}") from exc
