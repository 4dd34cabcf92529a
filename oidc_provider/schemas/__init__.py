"""Pydantic schemas"""

from oidc_provider.schemas.admin import CheckKind, IssuerCheckResult
from oidc_provider.schemas.credential import Credential, ExecutionContext
from oidc_provider.schemas.keys import EncryptedKeyRecord
from oidc_provider.schemas.token import IdTokenPayload

__all__ = [
    # Admin
    "CheckKind",
    "IssuerCheckResult",
    # Credential
    "Credential",
    "ExecutionContext",
    # Keys
    "EncryptedKeyRecord",
    # Token
    "IdTokenPayload",
]
