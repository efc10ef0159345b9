import os
import sys

# Ensure backend package is importable when running `pytest` from repo root
BASE_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.join(BASE_DIR, 'backend')
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# Tests never reach a real store; the client is always faked or mocked.
os.environ.setdefault('STOREFRONT_STORE_DOMAIN', 'test-shop.example.com')
os.environ.setdefault('STOREFRONT_API_VERSION', '2025-01')
os.environ.setdefault('STOREFRONT_PRIVATE_TOKEN', 'test-private-token')
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'storefront.settings')
