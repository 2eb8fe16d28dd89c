from __future__ import annotations

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction


__all__ = ["CONTAINER_UPDATES_GROUP", "broadcast_container_change", "broadcast_on_commit"]


CONTAINER_UPDATES_GROUP = "container_updates"


def broadcast_container_change(operation: str, codes: list[str]) -> None:
    """Сообщает подписанным дашбордам, что тара изменилась и сводку пора перечитать."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(
        CONTAINER_UPDATES_GROUP,
        {
            "type": "container_changed",
            "message": {"operation": operation, "containers": list(codes)},
        },
    )


def broadcast_on_commit(operation: str, codes: list[str]) -> None:
    # отправляем только после коммита; сбой канала не откатывает операцию
    transaction.on_commit(
        lambda op=operation, c=list(codes): broadcast_container_change(op, c),
        robust=True,
    )
