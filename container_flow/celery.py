import os

from celery import Celery


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "container_flow.settings")

app = Celery("container_flow")
app.config_from_object("django.conf:settings", namespace="CELERY")
# задачи лежат в <app>/celery_tasks.py
app.autodiscover_tasks(related_name="celery_tasks")
