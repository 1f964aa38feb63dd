"""
Health endpoints for load balancers and monitoring.

    /health/          process is up
    /health/ready/    database and cache answer
    /health/billing/  overdue sweep is scheduled; open payment counts
"""

import time
import logging
from django.http import JsonResponse
from django.db import connection, DatabaseError
from django.core.cache import cache
from django.db.models import Count, Q
from django.views.decorators.http import require_GET
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)

CACHE_PROBE_KEY = 'boarding_house:health_probe'


def _timed(check):
    """Run a check, returning (ok, latency in ms, error message)"""
    started = time.monotonic()
    error = check()
    latency_ms = round((time.monotonic() - started) * 1000, 2)
    return error is None, latency_ms, error


def _probe_database():
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except DatabaseError as e:
        logger.error(f'Readiness check - database error: {e}')
        return f'Database: {e}'
    return None


def _probe_cache():
    cache.set(CACHE_PROBE_KEY, 'ok', 10)
    if cache.get(CACHE_PROBE_KEY) != 'ok':
        logger.error('Readiness check - cache read/write failed')
        return 'Cache: Failed to read/write'
    cache.delete(CACHE_PROBE_KEY)
    return None


@csrf_exempt
@require_GET
def health_check(request):
    """Liveness: answers as long as the process serves requests"""
    return JsonResponse({'status': 'healthy', 'timestamp': time.time()})


@csrf_exempt
@require_GET
def readiness_check(request):
    """Readiness: 503 until both the database and the cache respond"""
    checks = {}
    errors = []
    for name, probe in (('database', _probe_database), ('cache', _probe_cache)):
        ok, latency_ms, error = _timed(probe)
        checks[name] = {'ok': ok, 'latency_ms': latency_ms}
        if error:
            errors.append(error)

    ready = not errors
    return JsonResponse({
        'status': 'ready' if ready else 'not_ready',
        'timestamp': time.time(),
        'checks': checks,
        'errors': errors or None,
    }, status=200 if ready else 503)


def _sweep_schedule():
    from . import scheduler as scheduler_module

    active = scheduler_module.scheduler
    if active is None or not active.running:
        return False, None
    job = active.get_job('overdue_sweep')
    if job is None or job.next_run_time is None:
        return True, None
    return True, job.next_run_time.isoformat()


@csrf_exempt
@require_GET
def billing_health(request):
    """Whether the daily overdue sweep is scheduled and how many payments are open"""
    from core.constants import PaymentStatus
    from payments.models import Payment

    running, next_run = _sweep_schedule()
    counts = Payment.objects.aggregate(
        pending=Count('id', filter=Q(status=PaymentStatus.PENDING)),
        overdue=Count('id', filter=Q(status=PaymentStatus.OVERDUE)),
    )
    return JsonResponse({
        'scheduler_running': running,
        'next_overdue_sweep': next_run,
        'pending_payments': counts['pending'],
        'overdue_payments': counts['overdue'],
        'timestamp': time.time(),
    })


def get_health_urls():
    """URL patterns for the health endpoints, appended in boarding_house/urls.py"""
    from django.urls import path

    return [
        path('health/', health_check, name='health_check'),
        path('health/ready/', readiness_check, name='readiness_check'),
        path('health/billing/', billing_health, name='billing_health'),
    ]
