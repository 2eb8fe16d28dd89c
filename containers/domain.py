from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from containers.exceptions import ErrorKind, OperationError


# === Записи хранилища ===

@dataclass
class ContainerRecord:
    code: str
    sku: Optional[str]
    quantity: Optional[int]
    status: Optional[str]
    location_id: int


@dataclass
class ContainerRow:
    """Строка дашборда: запись тары с расшифрованными локацией и материалом."""
    code: str
    sku: Optional[str]
    quantity: Optional[int]
    status: Optional[str]
    location_code: Optional[str]
    item_name: Optional[str] = None


# === Входы операций (уже провалидированные) ===

@dataclass(frozen=True)
class ReceiveInput:
    container_code: str
    sku: str
    quantity: int


@dataclass(frozen=True)
class InspectInput:
    container_code: str
    decision: str  # "pass" | "fail"


@dataclass(frozen=True)
class PutawayInput:
    container_code: str
    location_code: str


@dataclass(frozen=True)
class PickInput:
    container_code: str


@dataclass(frozen=True)
class AssembleInput:
    material_container: str
    product_container: str
    product_sku: str
    product_qty: int


@dataclass(frozen=True)
class ReturnInput:
    container_code: str


# === Результат операции на границе движка ===

@dataclass
class OperationResult:
    success: bool
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None
    containers: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, *codes: str) -> "OperationResult":
        return cls(success=True, containers=list(codes))

    @classmethod
    def failed(cls, exc: OperationError) -> "OperationResult":
        return cls(success=False, error=exc.message, kind=exc.kind)

    def as_dict(self) -> dict:
        if self.success:
            return {"success": True}
        return {"success": False, "error": self.error, "kind": self.kind.value}
