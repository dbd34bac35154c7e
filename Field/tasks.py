# field/tasks.py
import logging

from celery import shared_task

from .service import ReservationStore

logger = logging.getLogger(__name__)


@shared_task
def expire_pending_reservations():
    """Persist the expired status for pending reservations past their payment window"""
    count = ReservationStore.expire_stale()
    logger.info("Expiry sweep finished: %s reservations expired", count)
    return count
