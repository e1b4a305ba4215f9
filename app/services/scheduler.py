"""
APScheduler Service
Optional in-process trigger for the reminder scan. Production deployments
usually call POST /api/reminders/process from an external scheduler instead.
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import settings
from app.database import SessionLocal
from app.services.reminder_service import process_reminders

logger = logging.getLogger(__name__)


class SchedulerService:
    """Service to manage background scheduler tasks"""

    def __init__(self, interval_minutes: int | None = None):
        self.interval_minutes = interval_minutes or settings.reminder_interval_minutes
        self.scheduler = BackgroundScheduler()
        self._setup_jobs()

    def _setup_jobs(self):
        """Setup all background jobs"""
        self.scheduler.add_job(
            self._send_booking_reminders,
            IntervalTrigger(minutes=self.interval_minutes),
            id="booking_reminders",
            name="Send 7-day and 24-hour booking reminders",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    def _send_booking_reminders(self):
        """Run one reminder scan in its own session"""
        db = SessionLocal()
        try:
            result = process_reminders(db)
            logger.info(f"Scheduled reminder run finished: {result['totals']}")
        except Exception:
            logger.exception("Error in booking reminders job")
        finally:
            db.close()

    def start(self):
        """Start the scheduler"""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info(f"Scheduler started (every {self.interval_minutes} minutes)")

    def stop(self):
        """Stop the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")


# Global scheduler instance
_scheduler_service = None


def get_scheduler() -> SchedulerService:
    """Get or create scheduler instance"""
    global _scheduler_service
    if _scheduler_service is None:
        _scheduler_service = SchedulerService()
    return _scheduler_service


def start_scheduler():
    """Start the background scheduler if enabled"""
    if not settings.scheduler_enabled:
        logger.info("Reminder scheduler disabled (SCHEDULER_ENABLED=false)")
        return
    get_scheduler().start()


def stop_scheduler():
    """Stop the background scheduler"""
    if _scheduler_service is not None:
        _scheduler_service.stop()
