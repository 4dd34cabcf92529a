"""Credential and execution context schemas"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oidc_provider.core.algorithms import KeyAlgorithm
from oidc_provider.schemas.keys import EncryptedKeyRecord


class Credential(BaseModel):
    """An ID token signing identity"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Credential ID, used as JWT kid")
    description: str | None = Field(None, description="Human readable description")
    issuer: str | None = Field(None, description="Explicit issuer URL override")
    audience: str | None = Field(None, description="Audience override")
    secret_key_pair: EncryptedKeyRecord = Field(..., alias="secretKeyPair")

    @field_validator("description", "issuer", "audience", mode="before")
    @classmethod
    def fix_empty(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def algorithm(self) -> KeyAlgorithm:
        return self.secret_key_pair.algorithm

    @property
    def uses_default_issuer(self) -> bool:
        """Whether tokens are issued under the URL of the owning issuer"""
        return self.issuer is None


class ExecutionContext(BaseModel):
    """The running build a token is requested from"""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(..., description="Absolute URL of the job")
    build_number: int = Field(..., description="Build number")
