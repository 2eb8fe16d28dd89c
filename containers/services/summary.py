from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from containers.domain import ContainerRow
from containers.models import Container


__all__ = ["UNKNOWN_STATUS", "StatusSummary", "Dashboard", "summarize", "build_dashboard", "status_label"]


UNKNOWN_STATUS = "unknown"

# Плитки обзора на дашборде: ключ -> статус
OVERVIEW_STATUSES = {
    "pending_qc": Container.Status.PENDING_QC,
    "stored": Container.Status.STORED,
    "in_transit": Container.Status.IN_TRANSIT,
}


@dataclass
class StatusSummary:
    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)

    def count(self, status: str) -> int:
        return self.by_status.get(status, 0)

    def overview(self) -> dict[str, int]:
        figures = {"total": self.total}
        for key, status in OVERVIEW_STATUSES.items():
            figures[key] = self.count(status.value)
        return figures


@dataclass
class Dashboard:
    containers: list[ContainerRow]
    summary: StatusSummary


def summarize(rows: Iterable[ContainerRow]) -> StatusSummary:
    """
    Свёртка списка тары в счётчики по статусам.
    Тара без статуса попадает в корзину "unknown"; неизвестные статусы
    считаются под своим сырым значением.
    """
    summary = StatusSummary()
    for row in rows:
        key = row.status or UNKNOWN_STATUS
        summary.by_status[key] = summary.by_status.get(key, 0) + 1
        summary.total += 1
    return summary


def build_dashboard(repository) -> Dashboard:
    # без кэша: каждый вызов читает хранилище заново
    rows = repository.list_all()
    return Dashboard(containers=rows, summary=summarize(rows))


def status_label(status: Optional[str]) -> str:
    if not status:
        return "-"
    if status in Container.Status.values:
        return str(Container.Status(status).label)
    return status
