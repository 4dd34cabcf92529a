"""Token schemas (JWT payload)"""

from pydantic import BaseModel, Field


class IdTokenPayload(BaseModel):
    """ID token claims"""

    iss: str = Field(..., description="Issuer")
    aud: str | None = Field(None, description="Audience")
    sub: str = Field(..., description="Subject (job URL or root URL)")
    build_number: int | None = Field(None, description="Build number")
    iat: int = Field(..., description="Issued at (Unix timestamp)")
    exp: int = Field(..., description="Expiration time (Unix timestamp)")

    def claims(self) -> dict:
        """Claims to sign; unset optional claims are left out"""
        return self.model_dump(exclude_none=True)
