from __future__ import annotations

from enum import Enum

from rest_framework import status
from rest_framework.exceptions import APIException


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BACKEND = "backend"
    PARTIAL_APPLICATION = "partial_application"


class OperationError(APIException):
    """
    Базовая ошибка доменной операции над тарой.
    Наследуется от APIException, чтобы DRF сам отдавал корректный HTTP-код,
    если исключение всё-таки долетит до view.
    """
    kind: ErrorKind = ErrorKind.BACKEND
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Ошибка операции"

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationFailed(OperationError):
    kind = ErrorKind.VALIDATION
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Некорректные входные данные"


class NotFound(OperationError):
    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Не найдено"


class Conflict(OperationError):
    kind = ErrorKind.CONFLICT
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Тара с таким кодом уже существует"


class BackendError(OperationError):
    kind = ErrorKind.BACKEND
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Хранилище недоступно"


class PartialApplication(OperationError):
    """Сборка применена наполовину: материал опустошён, продукт не создан."""
    kind = ErrorKind.PARTIAL_APPLICATION
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Операция применена частично"


STATUS_BY_KIND = {
    error_class.kind: error_class.status_code
    for error_class in (ValidationFailed, NotFound, Conflict, BackendError, PartialApplication)
}
