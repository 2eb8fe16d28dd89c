from __future__ import annotations

from time import perf_counter

from celery import shared_task
from celery.utils.log import get_task_logger
from django.utils.timezone import now

from containers.services.integrity import find_violations
from containers.services.repository import DjangoContainerRepository
from containers.services.summary import summarize

# Фиксированное имя логгера (под него настроен LOGGING в settings.py)
logger = get_task_logger("containers.celery_tasks")

# сколько нарушений перечислять в сводке
SAMPLE_SIZE = 5


def _summary_line(task_id, total: int, violations: list, empty: int, dur_ms: float, ts_iso: str) -> str:
    head = f"⚠️ VIOLATIONS x{len(violations)}" if violations else "✅ OK"
    parts = [
        head,
        f"tick={task_id}",
        f"containers={total}",
        f"empty={empty}",
        f"dur={dur_ms:.1f}ms",
        f"ts={ts_iso}",
    ]
    if violations:
        parts.append(f"sample={[str(v) for v in violations[:SAMPLE_SIZE]]}")
    return " | ".join(parts)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_backoff_max=60,
    retry_jitter=True,
    max_retries=5,
)
def check_container_integrity_tick(self) -> int:
    """
    Один «тик» проверки: читает всю тару и сверяет инварианты содержимого/статуса.
    Empty-тара (после сборки, до возврата) не нарушение, но выводится в сводку.
    Возвращает число нарушений.
    """
    started = perf_counter()
    ts = now()

    rows = DjangoContainerRepository().list_all()
    violations = find_violations(rows)
    summary = summarize(rows)

    dur_ms = (perf_counter() - started) * 1000.0
    line = _summary_line(
        getattr(self.request, "id", None),
        summary.total,
        violations,
        summary.count("Empty"),
        dur_ms,
        ts.isoformat(),
    )
    if violations:
        logger.warning(line)
    else:
        logger.info(line)
    return len(violations)
