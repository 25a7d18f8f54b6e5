"""
Celery application for Stayhub.

Background work is limited to side effects that must never hold up a
request: booking confirmation and cancellation e-mails. The broker and
result backend are Redis (``CELERY_BROKER_URL``), and every setting is read
from Django settings under the ``CELERY_`` prefix.

Start a worker with:

    celery -A config worker -l info
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("stayhub")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up tasks.py from every installed app (bookings.tasks, ...)
app.autodiscover_tasks()
