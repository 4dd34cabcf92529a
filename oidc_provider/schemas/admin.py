"""Admin screen schemas"""

from enum import Enum

from pydantic import BaseModel, Field


class CheckKind(str, Enum):
    """Severity of validation feedback"""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class IssuerCheckResult(BaseModel):
    """Feedback for an issuer URL entered on a credential"""

    kind: CheckKind
    message: str
    well_known_url: str | None = Field(None, description="Where to fetch the discovery document to serve")
    jwks_url: str | None = Field(None, description="Where to fetch the JWKS to serve")

    @classmethod
    def ok(cls, message: str, **kwargs) -> "IssuerCheckResult":
        return cls(kind=CheckKind.OK, message=message, **kwargs)

    @classmethod
    def warning(cls, message: str) -> "IssuerCheckResult":
        return cls(kind=CheckKind.WARNING, message=message)

    @classmethod
    def error(cls, message: str) -> "IssuerCheckResult":
        return cls(kind=CheckKind.ERROR, message=message)
