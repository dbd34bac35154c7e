"""Django project configuration for the field reservation backend.

The Celery application is imported here so shared tasks are registered
as soon as Django starts.
"""

from .celery import app as celery_app  # noqa: F401
