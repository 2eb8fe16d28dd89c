from django.urls import re_path
from containers.consumers import ContainerStatusConsumer

websocket_urlpatterns = [
    re_path(r"ws/containers/$", ContainerStatusConsumer.as_asgi()),
]
