import json

from channels.generic.websocket import AsyncWebsocketConsumer

from containers.services.notifications import CONTAINER_UPDATES_GROUP


class ContainerStatusConsumer(AsyncWebsocketConsumer):
    """Живой дашборд: получает сигнал, что тара изменилась и сводку пора перечитать."""

    async def connect(self):
        await self.channel_layer.group_add(CONTAINER_UPDATES_GROUP, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(CONTAINER_UPDATES_GROUP, self.channel_name)

    async def container_changed(self, event):
        await self.send(text_data=json.dumps(event["message"]))
