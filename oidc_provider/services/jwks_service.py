"""JWKS (JSON Web Key Set) service"""

import base64

from cryptography.hazmat.primitives.asymmetric import ec, rsa

from oidc_provider.core.algorithms import KeyAlgorithm
from oidc_provider.core.config import logger
from oidc_provider.core.exceptions import KeyAlgorithmMismatch, UnsupportedAlgorithm
from oidc_provider.core.security import KeyManager, PublicKey, key_manager
from oidc_provider.schemas.credential import Credential
from oidc_provider.services.issuers import Issuer


def _int_to_bytes(value: int, length: int | None = None) -> bytes:
    """Big-endian unsigned bytes, minimal length unless given"""
    if length is None:
        length = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(length, byteorder="big")


def _int_to_base64url(value: int) -> str:
    """
    Convert integer to base64url encoded string

    Args:
        value: Integer value to encode

    Returns:
        Base64url encoded string (without padding)
    """
    encoded = base64.urlsafe_b64encode(_int_to_bytes(value)).decode("utf-8")
    return encoded.rstrip("=")


def encode_rsa_jwk(algorithm: KeyAlgorithm, key_id: str, public_key: rsa.RSAPublicKey) -> dict:
    """JWK of an RSA public key; n and e are unpadded base64url"""
    numbers = public_key.public_numbers()
    return {
        "kid": key_id,
        "kty": "RSA",
        "alg": algorithm.value,
        "use": "sig",
        "n": _int_to_base64url(numbers.n),
        "e": _int_to_base64url(numbers.e),
    }


def encode_ec_jwk(algorithm: KeyAlgorithm, key_id: str, public_key: ec.EllipticCurvePublicKey) -> dict:
    """
    JWK of an EC public key

    x and y use the standard base64 alphabet with padding, unlike the RSA
    fields.
    """
    numbers = public_key.public_numbers()
    length = (public_key.curve.key_size + 7) // 8
    return {
        "alg": algorithm.value,
        "kty": "EC",
        "use": "sig",
        "kid": key_id,
        "crv": algorithm.curve,
        "x": base64.b64encode(_int_to_bytes(numbers.x, length)).decode("utf-8"),
        "y": base64.b64encode(_int_to_bytes(numbers.y, length)).decode("utf-8"),
    }


def encode_jwk(algorithm: KeyAlgorithm, key_id: str, public_key: PublicKey) -> dict:
    """
    Encode a public key as a JWK

    Raises:
        UnsupportedAlgorithm: If the algorithm family has no JWK encoding
        KeyAlgorithmMismatch: If the key does not belong to the family
    """
    if algorithm.is_rsa:
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise KeyAlgorithmMismatch(f"{algorithm.value} JWK requires an RSA public key")
        return encode_rsa_jwk(algorithm, key_id, public_key)
    if algorithm.is_elliptic_curve:
        if not isinstance(public_key, ec.EllipticCurvePublicKey):
            raise KeyAlgorithmMismatch(f"{algorithm.value} JWK requires an EC public key")
        return encode_ec_jwk(algorithm, key_id, public_key)
    raise UnsupportedAlgorithm(algorithm)


class JWKSService:
    """Service for generating JWKS (JSON Web Key Set)"""

    def __init__(self, keys: KeyManager):
        self.keys = keys

    def key(self, credential: Credential) -> dict:
        """
        Get the JWK of a credential's public key

        Args:
            credential: Credential to publish

        Returns:
            JWK dictionary, kid set to the credential ID
        """
        key_material = self.keys.to_key_pair(credential.secret_key_pair)
        return encode_jwk(credential.algorithm, credential.id, key_material.public_key)

    def get_jwks(self, issuer: Issuer) -> dict:
        """
        Get JWKS (JSON Web Key Set) of an issuer

        Credentials with an issuer override are skipped: their keys are
        published from that other issuer's JWKS.

        Returns:
            JWKS dictionary with public keys
        """
        keys = []
        for credential in issuer.credentials():
            if not credential.uses_default_issuer:
                logger.debug(
                    f"Declining to serve key for {credential.id} since it would be served from {credential.issuer}",
                    extra={"credential_id": credential.id, "issuer": credential.issuer},
                )
                continue
            keys.append(self.key(credential))

        return {"keys": keys}


# Global instance
jwks_service = JWKSService(key_manager)
