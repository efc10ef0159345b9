from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

_API_VERSION_RE = re.compile(r"^\d{4}-\d{2}$")

PUBLIC_TOKEN_HEADER = "X-Shopify-Storefront-Access-Token"
PRIVATE_TOKEN_HEADER = "Shopify-Storefront-Private-Token"


@dataclass(frozen=True)
class StorefrontConfig:
    store_domain: str
    api_version: str
    token: str
    token_mode: str
    timeout_seconds: float = 10.0

    @property
    def endpoint(self) -> str:
        return f"https://{self.store_domain}/api/{self.api_version}/graphql.json"

    @property
    def token_header(self) -> str:
        return PRIVATE_TOKEN_HEADER if self.token_mode == "private" else PUBLIC_TOKEN_HEADER

    @classmethod
    def from_settings(cls) -> "StorefrontConfig":
        """
        Build and validate the storefront configuration from Django settings.

        Raises ImproperlyConfigured when the domain or version is missing or
        malformed, or when not exactly one access token is configured.
        """
        domain = _clean(getattr(settings, "STOREFRONT_STORE_DOMAIN", None))
        if not domain:
            raise ImproperlyConfigured("Missing required setting: STOREFRONT_STORE_DOMAIN")
        domain = re.sub(r"^https?://", "", domain).rstrip("/")

        version = _clean(getattr(settings, "STOREFRONT_API_VERSION", None))
        if not version:
            raise ImproperlyConfigured("Missing required setting: STOREFRONT_API_VERSION")
        if version != "unstable" and not _API_VERSION_RE.match(version):
            raise ImproperlyConfigured(
                'STOREFRONT_API_VERSION must be "unstable" or a date in YYYY-MM format '
                f"(e.g. 2026-01). Got: {version!r}"
            )

        public_token = _clean(getattr(settings, "STOREFRONT_PUBLIC_TOKEN", None))
        private_token = _clean(getattr(settings, "STOREFRONT_PRIVATE_TOKEN", None))
        if bool(public_token) == bool(private_token):
            detail = (
                "Both are set; use only one."
                if public_token
                else "Neither is set. Set STOREFRONT_PRIVATE_TOKEN for server-side calls."
            )
            raise ImproperlyConfigured(
                "Exactly one of STOREFRONT_PUBLIC_TOKEN or STOREFRONT_PRIVATE_TOKEN must be set. "
                + detail
            )

        timeout = float(getattr(settings, "STOREFRONT_TIMEOUT_SECONDS", 10.0) or 10.0)
        return cls(
            store_domain=domain,
            api_version=version,
            token=private_token or public_token,
            token_mode="private" if private_token else "public",
            timeout_seconds=timeout,
        )


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def is_configured() -> bool:
    try:
        StorefrontConfig.from_settings()
    except ImproperlyConfigured:
        return False
    return True
