import os
import sys
from pathlib import Path
from dotenv import load_dotenv
from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent
# Try root project .env (one directory up from BASE_DIR) first, then local
root_env = (BASE_DIR.parent / '.env')
local_env = (BASE_DIR / '.env')
if root_env.exists():
    load_dotenv(root_env)
elif local_env.exists():
    load_dotenv(local_env)


def _env_bool(name, default=None):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name, default):
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# ---------------------------------------------------------------------------
# SECRET KEY HANDLING
# Prefer DJANGO_SECRET_KEY, fall back to SECRET_KEY for broader compatibility.
# In production (DEBUG=False) we require a non-default, non-empty key. The key
# also signs the cart cookie.
# ---------------------------------------------------------------------------
_candidate_key = (
    os.getenv('DJANGO_SECRET_KEY')
    or os.getenv('SECRET_KEY')
    or ''
)

SECRET_KEY = _candidate_key if _candidate_key else 'dev-secret-key'
DEBUG = os.getenv('DEBUG', 'True') == 'True'
ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', '*').split(',')

if (not SECRET_KEY or SECRET_KEY == 'dev-secret-key') and not DEBUG:
    raise ImproperlyConfigured(
        'SECRET_KEY is missing or using insecure default. Set DJANGO_SECRET_KEY or SECRET_KEY env var.'
    )

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.staticfiles',
    'rest_framework',
    'drf_spectacular',
    'apps.common',
    'apps.commerce',
    'apps.catalog',
    'apps.carts',
]

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    # Cart identity travels in its own signed cookie; there are no user accounts.
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'EXCEPTION_HANDLER': 'apps.api.exceptions.global_exception_handler',
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'Storefront API',
    'DESCRIPTION': 'Storefront backend proxying the commerce GraphQL API: catalog reads and a cookie-bound cart.',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
    'COMPONENT_SPLIT_REQUEST': True,
    'SERVE_PERMISSIONS': [],
}

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'storefront.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'storefront.wsgi.application'

# No models of our own; contrib.auth/contenttypes only need a database to exist.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

# ---------------------------------------------------------------------------
# Storefront (upstream commerce GraphQL API)
# ---------------------------------------------------------------------------
STOREFRONT_STORE_DOMAIN = os.getenv('STOREFRONT_STORE_DOMAIN', '')
STOREFRONT_API_VERSION = os.getenv('STOREFRONT_API_VERSION', '')
STOREFRONT_PUBLIC_TOKEN = os.getenv('STOREFRONT_PUBLIC_TOKEN', '')
STOREFRONT_PRIVATE_TOKEN = os.getenv('STOREFRONT_PRIVATE_TOKEN', '')
STOREFRONT_TIMEOUT_SECONDS = float(os.getenv('STOREFRONT_TIMEOUT_SECONDS', '10'))
STOREFRONT_DEBUG_ENDPOINT = _env_bool('STOREFRONT_DEBUG_ENDPOINT', False)

# ---------------------------------------------------------------------------
# Cart session
# ---------------------------------------------------------------------------
DAYS_TO_SECONDS = 24 * 60 * 60
CART_COOKIE_NAME = (os.getenv('CART_COOKIE_NAME') or '').strip() or 'cart_id'
CART_COOKIE_MAX_AGE_DAYS = _env_int('CART_COOKIE_MAX_AGE_DAYS', 30)
if CART_COOKIE_MAX_AGE_DAYS <= 0:
    CART_COOKIE_MAX_AGE_DAYS = 30
CART_COOKIE_MAX_AGE_SECONDS = CART_COOKIE_MAX_AGE_DAYS * DAYS_TO_SECONDS
# None: Secure everywhere except localhost requests.
CART_COOKIE_SECURE = _env_bool('CART_COOKIE_SECURE', None)
CART_REPLAY_TTL_MS = _env_int('CART_REPLAY_TTL_MS', 5000)

# Caching (Redis when REDIS_URL is set)
"""Caching configuration.
Catalog reads are served read-through from the default cache. With REDIS_URL
set the cache is shared across workers via django-redis; cache exceptions are
ignored so Redis outages degrade to upstream reads instead of failing
requests. The cart replay cache is process-local and never lives here."""
REDIS_URL = os.getenv('REDIS_URL', '')
CACHE_TTL = _env_int('CACHE_TTL', 300)  # seconds
CATALOG_CACHE_TTL = _env_int('CATALOG_CACHE_TTL', CACHE_TTL)

if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': REDIS_URL,
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
                # Fail open: if Redis is down, treat cache operations as no-ops.
                'IGNORE_EXCEPTIONS': True,
            },
            'KEY_PREFIX': os.getenv('CACHE_KEY_PREFIX', 'storefront'),
            'TIMEOUT': CACHE_TTL,
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'storefront-cache',
            'TIMEOUT': CACHE_TTL,
        }
    }

USING_PYTEST = (
    os.getenv('PYTEST_CURRENT_TEST') is not None
    or any(os.path.basename(arg).startswith('pytest') for arg in sys.argv)
)

if 'test' in sys.argv or USING_PYTEST:
    # Use local in-memory cache during tests
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'storefront-test-cache',
            'TIMEOUT': 60,
        }
    }

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'console': {
            'format': '%(asctime)s %(levelname)s %(name)s %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'console',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': True,
        },
        'django': {
            'handlers': ['console'],
            'level': os.getenv('DJANGO_LOG_LEVEL', 'WARNING').upper(),
        },
        # Per-request lines from the HTTP client are noise; the commerce client logs its own.
        'httpx': {'level': 'WARNING'},
        'httpcore': {'level': 'WARNING'},
    },
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = os.getenv('STATIC_ROOT', str(BASE_DIR / 'staticfiles'))
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
