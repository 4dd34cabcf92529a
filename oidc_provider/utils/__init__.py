"""Utility modules"""

from oidc_provider.utils.validators import validate_issuer_url

__all__ = ["validate_issuer_url"]
