# containers/services/lifecycle.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from django.conf import settings

from containers.domain import (
    AssembleInput,
    ContainerRecord,
    InspectInput,
    OperationResult,
    PickInput,
    PutawayInput,
    ReceiveInput,
    ReturnInput,
)
from containers.exceptions import (
    Conflict,
    ErrorKind,
    NotFound,
    OperationError,
    PartialApplication,
    ValidationFailed,
)
from containers.models import Container
from containers.serializers import (
    AssembleSerializer,
    InspectSerializer,
    PickSerializer,
    PutawaySerializer,
    ReceiveSerializer,
    ReturnSerializer,
    parse_input,
)
from containers.services.locations import DjangoLocationDirectory, LocationDirectory
from containers.services.notifications import broadcast_on_commit
from containers.services.repository import ContainerRepository, DjangoContainerRepository


__all__ = ["LifecycleEngine", "build_engine", "OPERATIONS", "OPERATION_ALIASES"]

logger = logging.getLogger(__name__)

Status = Container.Status

RECEIVING_LOCATION = "RECEIVING"
ASSEMBLY_LOCATION = "ASSEMBLY-LINE-1"

# операция -> (сериализатор входа, метод движка)
OPERATIONS = {
    "receive": (ReceiveSerializer, "receive"),
    "inspect": (InspectSerializer, "inspect"),
    "putaway": (PutawaySerializer, "putaway"),
    "pick": (PickSerializer, "pick"),
    "assemble": (AssembleSerializer, "assemble"),
    "return": (ReturnSerializer, "return_container"),
}

# названия действий PDA-формы
OPERATION_ALIASES = {
    "receiving": "receive",
    "qc": "inspect",
    "picking": "pick",
    "assembly": "assemble",
}


class LifecycleEngine:
    """
    Машина состояний тары.

    Каждая операция: валидация -> разрешение ссылок (локации, существование тары)
    -> одна-две записи в хранилище. Типизированные методы бросают OperationError;
    execute() является границей движка, за неё исключения не выходят.
    """

    def __init__(
        self,
        repository: ContainerRepository,
        locations: LocationDirectory,
        notify: Optional[Callable[[str, list[str]], None]] = None,
        receiving_location: str = RECEIVING_LOCATION,
        assembly_location: str = ASSEMBLY_LOCATION,
    ):
        self.repository = repository
        self.locations = locations
        self.notify = notify
        self.receiving_location = receiving_location
        self.assembly_location = assembly_location

    # =================
    # ГРАНИЦА ДВИЖКА
    # =================

    def execute(self, operation: str, data=None) -> OperationResult:
        name = OPERATION_ALIASES.get(operation, operation)
        try:
            if name not in OPERATIONS:
                raise ValidationFailed(f"Неизвестная операция '{operation}'")
            serializer_class, method_name = OPERATIONS[name]
            payload = parse_input(serializer_class, data)
            codes = getattr(self, method_name)(payload)
        except OperationError as exc:
            self._log_failure(name, exc)
            return OperationResult.failed(exc)

        logger.info("Операция %s выполнена: %s", name, ", ".join(codes))
        if self.notify is not None:
            self.notify(name, codes)
        return OperationResult.ok(*codes)

    # =================
    # ДОМЕННЫЕ ОПЕРАЦИИ
    # =================

    def receive(self, payload: ReceiveInput) -> list[str]:
        """Приёмка: новая тара на доке приёмки, статус Pending_QC."""
        self._require_absent(payload.container_code)
        location_id = self.locations.resolve(self.receiving_location)
        self._create(ContainerRecord(
            code=payload.container_code,
            sku=payload.sku,
            quantity=payload.quantity,
            status=Status.PENDING_QC,
            location_id=location_id,
        ))
        return [payload.container_code]

    def inspect(self, payload: InspectInput) -> list[str]:
        """QC: pass -> Stored, fail -> QC_Hold. Локация не меняется."""
        container = self._require(payload.container_code)
        self._require_contents(container, "контроль качества")
        new_status = Status.STORED if payload.decision == "pass" else Status.QC_HOLD
        self._update(container.code, status=new_status)
        return [container.code]

    def putaway(self, payload: PutawayInput) -> list[str]:
        """Размещение: меняется только локация, статус и содержимое не трогаем."""
        container = self._require(payload.container_code)
        location_id = self.locations.resolve(payload.location_code)
        self._update(container.code, location_id=location_id)
        return [container.code]

    def pick(self, payload: PickInput) -> list[str]:
        """Отбор: статус In_Transit из любого статуса с содержимым; пустую тару (Idle/Empty) не отбираем."""
        container = self._require(payload.container_code)
        self._require_contents(container, "отбор")
        self._update(container.code, status=Status.IN_TRANSIT)
        return [container.code]

    def return_container(self, payload: ReturnInput) -> list[str]:
        """Возврат: тара очищается и становится Idle. Повторный вызов ничего не меняет."""
        container = self._require(payload.container_code)
        self._update(container.code, status=Status.IDLE, sku=None, quantity=None)
        return [container.code]

    def assemble(self, payload: AssembleInput) -> list[str]:
        """
        Сборка: материал опустошается (Empty), продукт создаётся на сборочной линии.
        Требования (проверяются до любых записей):
          - тара материала существует;
          - кода продукта ещё нет;
          - сборочная линия разрешается в локацию.
        Обе записи идут в одной транзакции хранилища. Если хранилище транзакций
        не умеет, материал восстанавливается компенсирующей записью; если не
        удалась и она, будет PartialApplication.
        """
        material = self._require(payload.material_container)
        self._require_absent(payload.product_container)
        line_id = self.locations.resolve(self.assembly_location)
        product = ContainerRecord(
            code=payload.product_container,
            sku=payload.product_sku,
            quantity=payload.product_qty,
            status=Status.PENDING_QC,
            location_id=line_id,
        )

        try:
            with self.repository.atomic():
                self._update(material.code, status=Status.EMPTY, sku=None, quantity=None)
                self._create(product)
        except OperationError as exc:
            self._restore_material(material, product.code, exc)
            raise
        return [material.code, product.code]

    # ========================
    # ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
    # ========================

    def _require(self, code: str) -> ContainerRecord:
        container = self.repository.find(code)
        if container is None:
            raise NotFound(f"Тара '{code}' не найдена")
        return container

    def _require_absent(self, code: str) -> None:
        if self.repository.find(code) is not None:
            raise Conflict(f"Тара '{code}' уже существует")

    @staticmethod
    def _require_contents(container: ContainerRecord, action: str) -> None:
        # Idle/Empty без sku: запись статуса с содержимым нарушила бы инвариант
        if container.sku is None or container.quantity is None:
            raise ValidationFailed(
                f"Тара '{container.code}' пуста (статус {container.status or '-'}): {action} невозможен"
            )

    @staticmethod
    def _checked_status(status) -> str:
        if status not in Status.values:
            raise ValidationFailed(f"Недопустимый статус '{status}'")
        return Status(status).value

    def _create(self, record: ContainerRecord) -> None:
        record.status = self._checked_status(record.status)
        self.repository.create(record)

    def _update(self, code: str, **fields) -> None:
        if "status" in fields:
            fields["status"] = self._checked_status(fields["status"])
        self.repository.update_fields(code, **fields)

    def _restore_material(self, before: ContainerRecord, product_code: str, error: OperationError) -> None:
        try:
            current = self.repository.find(before.code)
            if current is None or current == before:
                # транзакция откатилась (или запись материала не дошла до хранилища)
                return
            self.repository.update_fields(
                before.code,
                status=before.status,
                sku=before.sku,
                quantity=before.quantity,
            )
        except OperationError as exc:
            logger.error(
                "Сборка %s -> %s применена частично, компенсация не удалась: %s",
                before.code, product_code, exc.message,
            )
            raise PartialApplication(
                f"Тара '{before.code}' опустошена, но продукт '{product_code}' не создан: "
                f"{error.message}"
            ) from exc
        logger.error(
            "Сборка %s -> %s не удалась (%s), материал восстановлен компенсацией",
            before.code, product_code, error.message,
        )

    @staticmethod
    def _log_failure(operation: str, exc: OperationError) -> None:
        level = logging.WARNING
        if exc.kind in (ErrorKind.BACKEND, ErrorKind.PARTIAL_APPLICATION):
            level = logging.ERROR
        logger.log(level, "Операция %s отклонена [%s]: %s", operation, exc.kind.value, exc.message)


def build_engine() -> LifecycleEngine:
    """Движок поверх Django ORM с рассылкой изменений в websocket-группу."""
    options = getattr(settings, "CONTAINER_FLOW", {})
    return LifecycleEngine(
        repository=DjangoContainerRepository(),
        locations=DjangoLocationDirectory(),
        notify=broadcast_on_commit,
        receiving_location=options.get("RECEIVING_LOCATION", RECEIVING_LOCATION),
        assembly_location=options.get("ASSEMBLY_LOCATION", ASSEMBLY_LOCATION),
    )
