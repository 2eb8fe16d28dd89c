from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from containers.domain import ContainerRow
from containers.models import Container


__all__ = ["Violation", "find_violations"]


@dataclass(frozen=True)
class Violation:
    code: str
    problem: str

    def __str__(self) -> str:
        return f"{self.code}: {self.problem}"


def find_violations(rows: Iterable[ContainerRow]) -> list[Violation]:
    """
    Проверка инвариантов тары по полному списку:
      - Idle/Empty без sku и количества, остальные статусы с ними;
      - статус из закрытого перечня.
    """
    violations: list[Violation] = []
    for row in rows:
        if row.status is None:
            violations.append(Violation(row.code, "статус не задан"))
            continue
        if row.status not in Container.Status.values:
            violations.append(Violation(row.code, f"неизвестный статус '{row.status}'"))
            continue

        has_contents = row.sku is not None and row.quantity is not None
        if row.status in Container.CONTENTLESS:
            if row.sku is not None or row.quantity is not None:
                violations.append(Violation(row.code, f"статус {row.status}, но есть содержимое"))
        elif not has_contents:
            violations.append(Violation(row.code, f"статус {row.status}, но нет sku/количества"))
        elif row.quantity < 0:
            violations.append(Violation(row.code, "отрицательное количество"))
    return violations
