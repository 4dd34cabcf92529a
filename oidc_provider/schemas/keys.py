"""Persisted key material schemas"""

from pydantic import BaseModel, ConfigDict, Field

from oidc_provider.core.algorithms import KeyAlgorithm


class EncryptedKeyRecord(BaseModel):
    """
    Encrypted-at-rest form of a key pair

    Both key fields hold encrypt(base64(DER)): the private key as PKCS#8,
    the public key as X.509 SubjectPublicKeyInfo.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    algorithm: KeyAlgorithm = Field(..., description="Signing algorithm")
    private_key: str = Field(..., alias="privateKey", description="Encrypted PKCS#8 private key")
    public_key: str = Field(..., alias="publicKey", description="Encrypted X.509 public key")
