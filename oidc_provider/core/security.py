"""Key management for credential signing keys"""

import base64
import binascii
from collections.abc import Mapping
from dataclasses import dataclass

from cryptography import exceptions as crypto_exceptions
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from pydantic import ValidationError

from oidc_provider.core.algorithms import LEGACY_ALGORITHM, KeyAlgorithm
from oidc_provider.core.config import logger
from oidc_provider.core.exceptions import KeyAlgorithmMismatch, KeyDecodeFailure, UnsupportedAlgorithm
from oidc_provider.core.secrets import SecretCipher, secret_cipher
from oidc_provider.schemas.keys import EncryptedKeyRecord

PrivateKey = rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey
PublicKey = rsa.RSAPublicKey | ec.EllipticCurvePublicKey

RSA_PUBLIC_EXPONENT = 65537


@dataclass(frozen=True)
class KeyMaterial:
    """An asymmetric key pair bound to one algorithm"""

    algorithm: KeyAlgorithm
    private_key: PrivateKey
    public_key: PublicKey

    def get_private_key_pem(self) -> str:
        """Get private key in PEM format"""
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()

    def get_public_key_pem(self) -> str:
        """Get public key in PEM format"""
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode()


def key_types_for(algorithm: KeyAlgorithm) -> tuple[type, type]:
    """
    Private and public key types an algorithm signs and verifies with

    Raises:
        UnsupportedAlgorithm: If the algorithm family has no key types
    """
    if algorithm.is_rsa:
        return rsa.RSAPrivateKey, rsa.RSAPublicKey
    if algorithm.is_elliptic_curve:
        return ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey
    raise UnsupportedAlgorithm(algorithm)


def check_key_family(algorithm: KeyAlgorithm, private_key: object, public_key: object) -> None:
    """
    Ensure a key pair matches the family (and curve) of an algorithm

    Raises:
        KeyAlgorithmMismatch: On any mismatch
    """
    private_type, public_type = key_types_for(algorithm)
    if not isinstance(private_key, private_type) or not isinstance(public_key, public_type):
        raise KeyAlgorithmMismatch(
            f"{algorithm.value} requires {algorithm.family.value} keys, "
            f"got {type(private_key).__name__}/{type(public_key).__name__}"
        )
    curve_type = algorithm.spec.curve_type
    if curve_type is not None:
        for key in (private_key, public_key):
            if not isinstance(key.curve, curve_type):
                raise KeyAlgorithmMismatch(
                    f"{algorithm.value} requires curve {algorithm.curve}, got {key.curve.name}"
                )


class KeyManager:
    """Generates, encrypts and restores credential key pairs"""

    def __init__(self, cipher: SecretCipher):
        self._cipher = cipher

    def generate(self, algorithm: KeyAlgorithm) -> KeyMaterial:
        """
        Generate a fresh key pair for an algorithm

        Args:
            algorithm: Signing algorithm the pair is for

        Returns:
            KeyMaterial with RSA keys of the algorithm's key size, or EC keys
            on the algorithm's curve
        """
        spec = algorithm.spec
        if algorithm.is_rsa:
            private_key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=spec.key_size,
            )
        elif algorithm.is_elliptic_curve:
            private_key = ec.generate_private_key(spec.curve_type())
        else:
            raise UnsupportedAlgorithm(algorithm)

        logger.info(
            f"Generated new {algorithm.value} key pair",
            extra={"algorithm": algorithm.value, "key_size": spec.key_size},
        )
        return KeyMaterial(algorithm, private_key, private_key.public_key())

    def to_record(self, algorithm: KeyAlgorithm, key_material: KeyMaterial) -> EncryptedKeyRecord:
        """
        Encrypt a key pair for storage

        Args:
            algorithm: Algorithm to tag the record with
            key_material: Key pair to store

        Returns:
            EncryptedKeyRecord with both components encrypted independently

        Raises:
            KeyAlgorithmMismatch: If the keys do not belong to the algorithm
        """
        check_key_family(algorithm, key_material.private_key, key_material.public_key)

        private_der = key_material.private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        public_der = key_material.public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

        return EncryptedKeyRecord(
            algorithm=algorithm,
            private_key=self._encrypt(private_der),
            public_key=self._encrypt(public_der),
        )

    def to_key_pair(self, record: EncryptedKeyRecord) -> KeyMaterial:
        """
        Restore a key pair from its stored form

        Raises:
            UnsupportedAlgorithm: If the record's algorithm family is unknown
            KeyDecodeFailure: If either component cannot be decrypted or
                parsed, has the wrong key type, or the two do not match
        """
        algorithm = record.algorithm
        # Fail before touching secrets when the family is not implemented
        key_types_for(algorithm)

        try:
            private_key = serialization.load_der_private_key(self._decrypt(record.private_key), password=None)
            public_key = serialization.load_der_public_key(self._decrypt(record.public_key))
        except (ValueError, TypeError, crypto_exceptions.UnsupportedAlgorithm) as e:
            logger.error(
                f"Failed to parse {algorithm.value} key pair: {e}",
                extra={"algorithm": algorithm.value, "error_type": type(e).__name__},
            )
            raise KeyDecodeFailure(f"Unable to parse {algorithm.value} key pair") from e

        try:
            check_key_family(algorithm, private_key, public_key)
        except KeyAlgorithmMismatch as e:
            raise KeyDecodeFailure(str(e)) from e

        if private_key.public_key().public_numbers() != public_key.public_numbers():
            raise KeyDecodeFailure(f"Stored {algorithm.value} public key does not match the private key")

        return KeyMaterial(algorithm, private_key, public_key)

    def load_record(self, data: Mapping | EncryptedKeyRecord) -> EncryptedKeyRecord:
        """
        Load a persisted key record, upgrading the legacy layout

        Current records look like {algorithm, privateKey, publicKey}. Legacy
        records only hold {privateKey}: an RSA key from before algorithms
        were selectable. Those are converted to an RS256 record whose public
        key is derived from the private key. Loading a converted record
        again returns it unchanged.

        Raises:
            UnsupportedAlgorithm: If the record names an unknown algorithm
            KeyDecodeFailure: If the record is malformed or unreadable
        """
        if isinstance(data, EncryptedKeyRecord):
            return data

        if not isinstance(data, Mapping):
            raise KeyDecodeFailure(f"Key record must be an object, got {type(data).__name__}")

        if "algorithm" not in data:
            if "publicKey" in data:
                raise KeyDecodeFailure("Key record has a public key but no algorithm")
            return self.migrate_legacy_private_key(data.get("privateKey"))

        algorithm = KeyAlgorithm.from_name(data["algorithm"])
        try:
            return EncryptedKeyRecord(
                algorithm=algorithm,
                private_key=data["privateKey"],
                public_key=data["publicKey"],
            )
        except (KeyError, ValidationError) as e:
            raise KeyDecodeFailure(f"Malformed {algorithm.value} key record") from e

    def migrate_legacy_private_key(self, encrypted_private_key: str | None) -> EncryptedKeyRecord:
        """
        Convert a legacy encrypted RSA private key into a current record

        Raises:
            KeyDecodeFailure: If the key is missing, unreadable or not RSA
        """
        if not encrypted_private_key or not isinstance(encrypted_private_key, str):
            raise KeyDecodeFailure("Legacy key record has no private key")

        try:
            private_key = serialization.load_der_private_key(self._decrypt(encrypted_private_key), password=None)
        except (ValueError, TypeError, crypto_exceptions.UnsupportedAlgorithm) as e:
            raise KeyDecodeFailure("Unable to parse legacy private key") from e

        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise KeyDecodeFailure(f"Legacy private key must be RSA, got {type(private_key).__name__}")

        # No public key was stored; rebuild it from modulus and public exponent
        numbers = private_key.private_numbers().public_numbers
        public_key = rsa.RSAPublicNumbers(e=numbers.e, n=numbers.n).public_key()

        logger.info(
            "Migrating legacy key record",
            extra={"algorithm": LEGACY_ALGORITHM.value, "key_size": private_key.key_size},
        )
        return self.to_record(LEGACY_ALGORITHM, KeyMaterial(LEGACY_ALGORITHM, private_key, public_key))

    def _encrypt(self, der: bytes) -> str:
        return self._cipher.encrypt(base64.b64encode(der).decode("ascii"))

    def _decrypt(self, value: str) -> bytes:
        plain = self._cipher.decrypt(value)
        try:
            return base64.b64decode(plain, validate=True)
        except binascii.Error as e:
            raise KeyDecodeFailure("Key material is not valid base64") from e


# Global instance
key_manager = KeyManager(secret_cipher)
