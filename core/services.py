"""
Service base class.
Services hold the business rules and the transaction boundaries; they use
repositories for data access and raise core.exceptions on failure.
"""
from django.utils import timezone
import logging


class BaseService:
    """
    Shared helpers for the engine services.

    Each service logs under its own class name (OccupancyService,
    BillingService, ...), configured in settings.LOGGING.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def now(now=None):
        """Current time, or the supplied one (used by scheduled jobs and tests)"""
        return now or timezone.now()

    def log_info(self, message: str, **context):
        self.logger.info(f"{message} | Context: {context}")

    def log_warning(self, message: str, **context):
        self.logger.warning(f"{message} | Context: {context}")

    def log_error(self, message: str, error: Exception = None, **context):
        """Log an error; the traceback is attached when an exception is given"""
        if error:
            self.logger.error(f"{message} | Context: {context}", exc_info=error)
        else:
            self.logger.error(f"{message} | Context: {context}")
