"""Service modules"""

from oidc_provider.services.credential_store import credential_store
from oidc_provider.services.discovery_service import discovery_service
from oidc_provider.services.jwks_service import jwks_service

__all__ = [
    "credential_store",
    "discovery_service",
    "jwks_service",
]
