"""Encryption at rest for persisted key material"""

import base64

from cryptography.fernet import Fernet, InvalidToken, MultiFernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from oidc_provider.core.config import logger, settings
from oidc_provider.core.exceptions import KeyDecodeFailure


class SecretCipher:
    """
    Symmetric cipher for secrets stored alongside credentials

    The primary key encrypts; the primary and every legacy key can decrypt,
    so the master key can be rotated without rewriting stored credentials.
    """

    KDF_ITERATIONS = 100000

    def __init__(
        self,
        primary_key: str,
        salt: str,
        legacy_keys: list[str] | None = None,
    ):
        try:
            salt_bytes = base64.b64decode(salt)
        except ValueError as e:
            raise ValueError(f"Invalid KDF salt format: {e}") from e

        all_keys = [primary_key, *(legacy_keys or [])]
        self._fernet = MultiFernet([Fernet(self._derive_key(key, salt_bytes)) for key in all_keys])

    @classmethod
    def _derive_key(cls, master_key: str, salt: bytes) -> bytes:
        """Derive a Fernet key from a master key using PBKDF2-SHA256"""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=cls.KDF_ITERATIONS,
        )
        return base64.urlsafe_b64encode(kdf.derive(master_key.encode()))

    def encrypt(self, plain_text: str) -> str:
        """
        Encrypt a string

        Args:
            plain_text: Value to protect

        Returns:
            Fernet token as text
        """
        return self._fernet.encrypt(plain_text.encode()).decode()

    def decrypt(self, cipher_text: str) -> str:
        """
        Decrypt a string produced by encrypt()

        Raises:
            KeyDecodeFailure: If the value was tampered with or encrypted
                under an unknown key
        """
        try:
            return self._fernet.decrypt(cipher_text.encode()).decode()
        except (InvalidToken, UnicodeError) as e:
            logger.error("Failed to decrypt secret", extra={"error_type": type(e).__name__})
            raise KeyDecodeFailure("Unable to decrypt key material") from e


def cipher_from_settings() -> SecretCipher:
    """Build the process-wide cipher from settings"""
    return SecretCipher(
        primary_key=settings.secret_key,
        salt=settings.kdf_salt,
        legacy_keys=settings.legacy_secret_keys,
    )


# Global instance
secret_cipher = cipher_from_settings()
