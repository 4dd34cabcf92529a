"""
Pytest configuration and fixtures.
"""

import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from oidc_provider.core.algorithms import KeyAlgorithm
from oidc_provider.core.config import settings
from oidc_provider.core.secrets import SecretCipher
from oidc_provider.core.security import KeyManager
from oidc_provider.schemas.credential import Credential
from oidc_provider.services.issuer_resolver import IssuerResolver
from oidc_provider.services.issuers import StaticIssuer, StaticIssuerFactory
from oidc_provider.services.jwks_service import JWKSService

ROOT_URL = "https://ci.example.org/"
ROOT_ISSUER_URL = "https://ci.example.org/oidc"

CURVES = {"P-256": ec.SECP256R1, "P-384": ec.SECP384R1, "P-521": ec.SECP521R1}


@pytest.fixture(scope="session")
def cipher():
    """Cipher with a test-only master key"""
    return SecretCipher("test-secret-key", settings.kdf_salt)


@pytest.fixture(scope="session")
def keys(cipher):
    """KeyManager bound to the test cipher"""
    return KeyManager(cipher)


@pytest.fixture(scope="session")
def key_materials(keys):
    """Generated key pairs per algorithm, created on first use (RSA 4096 is slow)"""
    cache = {}

    def get(algorithm: KeyAlgorithm):
        if algorithm not in cache:
            cache[algorithm] = keys.generate(algorithm)
        return cache[algorithm]

    return get


@pytest.fixture(scope="session")
def make_credential(keys, key_materials):
    """Build a credential for an algorithm, reusing cached key pairs"""

    def make(credential_id="creds", algorithm=KeyAlgorithm.RS256, issuer=None, audience=None):
        return Credential(
            id=credential_id,
            issuer=issuer,
            audience=audience,
            secret_key_pair=keys.to_record(algorithm, key_materials(algorithm)),
        )

    return make


@pytest.fixture
def jwks(keys):
    """JWKSService bound to the test key manager"""
    return JWKSService(keys)


@pytest.fixture
def resolver_for():
    """Build a resolver whose root issuer holds the given credentials"""

    def build(credentials, extra_issuers=()):
        root = StaticIssuer(ROOT_ISSUER_URL, "", credentials)
        return IssuerResolver(root, [StaticIssuerFactory([root, *extra_issuers])])

    return build


def public_key_from_jwk(jwk: dict):
    """
    Rebuild a public key from a JWK as a relying party would

    RSA fields are unpadded base64url while EC coordinates are standard
    padded base64, so each family is decoded with its own alphabet.
    """
    if jwk["kty"] == "RSA":
        def b64url(value: str) -> int:
            raw = base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
            return int.from_bytes(raw, "big")

        return rsa.RSAPublicNumbers(e=b64url(jwk["e"]), n=b64url(jwk["n"])).public_key()

    if jwk["kty"] == "EC":
        x = int.from_bytes(base64.b64decode(jwk["x"], validate=True), "big")
        y = int.from_bytes(base64.b64decode(jwk["y"], validate=True), "big")
        return ec.EllipticCurvePublicNumbers(x, y, CURVES[jwk["crv"]]()).public_key()

    raise AssertionError(f"unexpected kty {jwk['kty']}")


def public_pem_from_jwk(jwk: dict) -> str:
    """PEM of the public key a JWK describes"""
    return public_key_from_jwk(jwk).public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
