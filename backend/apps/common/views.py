import time
import uuid

from django.core.cache import cache
from django.core.exceptions import ImproperlyConfigured
from django.http import JsonResponse

from apps.commerce.config import StorefrontConfig
from .logger import get_logger

logger = get_logger(__name__).bind(component='common', layer='health')


def _cache_check():
    started = time.time()
    key = f'health:ready:{uuid.uuid4().hex}'
    try:
        cache.set(key, 'ok', timeout=5)
        value = cache.get(key)
        cache.delete(key)
    except Exception as e:  # broaden for backend-specific connection errors
        logger.error('Cache health check failed', error=str(e), exception=e.__class__.__name__)
        return {'status': 'fail', 'error': str(e), 'exception': e.__class__.__name__}
    latency = round((time.time() - started) * 1000, 2)
    if value != 'ok':
        logger.warning('Cache health check returned unexpected value', latency_ms=latency)
        return {'status': 'fail', 'error': 'cache round trip mismatch'}
    logger.debug('Cache health check succeeded', latency_ms=latency)
    return {'status': 'ok', 'latency_ms': latency}


def _storefront_check():
    try:
        config = StorefrontConfig.from_settings()
    except ImproperlyConfigured as e:
        logger.warning('Storefront configuration incomplete', error=str(e))
        return {'status': 'fail', 'error': str(e)}
    return {'status': 'ok', 'store': config.store_domain, 'api_version': config.api_version}


def live_health(request):
    """Liveness probe: process is up and can service requests."""
    logger.debug('Liveness probe served')
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """Readiness probe: verifies the cache backend and storefront configuration."""
    checks = {
        'cache': _cache_check(),
        'storefront': _storefront_check(),
    }
    failing = [name for name, r in checks.items() if r.get('status') == 'fail']
    overall_status = 'ok' if not failing else 'degraded'
    http_status = 200 if not failing else 503
    payload = {
        'status': overall_status,
        'checks': checks,
    }
    logger.info('Readiness probe evaluated', status=overall_status, failing_components=failing)
    return JsonResponse(payload, status=http_status)
