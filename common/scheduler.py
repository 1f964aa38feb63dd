"""
Background task scheduler for the daily overdue sweep.
Uses APScheduler to run tasks in the background without requiring external services.
"""
import logging
import atexit
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = None


def overdue_sweep_job():
    """
    Flip past-due pending payments to overdue and, when enabled, add the
    default late fee. Runs once a day at OVERDUE_SWEEP_HOUR.
    """
    from payments.services import BillingService

    try:
        logger.info("Starting scheduled overdue sweep...")
        service = BillingService()
        if settings.BILLING_LATE_FEE_ENABLED:
            result = service.apply_late_fees(settings.BILLING_DEFAULT_LATE_FEE)
        else:
            result = service.update_overdue_payments()
        logger.info(f"Scheduled overdue sweep completed: {result}")
    except Exception as e:
        # The next daily run retries
        logger.error(f"Error in scheduled overdue sweep: {str(e)}", exc_info=True)


def build_scheduler() -> BackgroundScheduler:
    """Create a scheduler with the billing jobs registered (not started)"""
    new_scheduler = BackgroundScheduler()
    tz = timezone.get_current_timezone()

    new_scheduler.add_job(
        overdue_sweep_job,
        trigger=CronTrigger(
            hour=settings.OVERDUE_SWEEP_HOUR,
            minute=5,
            timezone=tz
        ),
        id='overdue_sweep',
        name='Mark Overdue Payments',
        replace_existing=True,
        max_instances=1,  # Prevent overlapping runs
        coalesce=True  # Combine multiple pending executions into one
    )
    return new_scheduler


def start_scheduler():
    """
    Initialize and start the background scheduler.
    This should be called once when Django starts.
    """
    global scheduler

    if scheduler is not None and scheduler.running:
        logger.warning("Scheduler is already running")
        return

    scheduler = build_scheduler()
    scheduler.start()
    logger.info(
        f"Background scheduler started; overdue sweep daily at "
        f"{settings.OVERDUE_SWEEP_HOUR:02d}:05 ({timezone.get_current_timezone()})"
    )

    # Register shutdown handler
    atexit.register(stop_scheduler)


def stop_scheduler():
    """
    Stop the background scheduler.
    Should be called when Django shuts down.
    """
    global scheduler

    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Background scheduler stopped")
    scheduler = None
