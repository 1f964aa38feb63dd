from django.apps import AppConfig
import logging
import os
import sys

logger = logging.getLogger(__name__)

SKIP_COMMANDS = ['migrate', 'makemigrations', 'test', 'collectstatic', 'shell',
                 'update_overdue_payments', 'apply_late_fees', 'reconcile_room_assignments']


class CommonConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'common'

    def ready(self):
        """
        Initialize background scheduler when Django app is ready.
        Only start scheduler in the serving process (not in migrations, tests,
        management commands, or the autoreloader's parent process).
        """
        from django.conf import settings

        if not settings.ENABLE_BACKGROUND_SCHEDULER:
            return

        # runserver spawns a child with RUN_MAIN=true; gunicorn/uwsgi have no argv command
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_COMMANDS:
            return
        if len(sys.argv) > 1 and sys.argv[1] == 'runserver' and os.environ.get('RUN_MAIN') != 'true':
            return
        if 'pytest' in sys.modules:
            return

        from .scheduler import start_scheduler
        start_scheduler()
        logger.info("Background task scheduler initialized")
