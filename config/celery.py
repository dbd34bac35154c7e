import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("field_reservation")

# Configuration lives in Django settings under the CELERY_ namespace,
# including the beat schedule for the expiry sweep.
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
