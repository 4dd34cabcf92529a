"""Persistence of credentials"""

import json
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from pydantic import ValidationError

from oidc_provider.core.algorithms import KeyAlgorithm
from oidc_provider.core.config import logger, settings
from oidc_provider.core.exceptions import KeyDecodeFailure
from oidc_provider.core.security import KeyManager, key_manager
from oidc_provider.schemas.credential import Credential


class CredentialStore:
    """
    JSON file of persisted credentials

    Each entry is {id, description, issuer, audience, secretKeyPair}.
    Entries written by older versions carry a top-level privateKey instead
    of secretKeyPair; they are upgraded when loaded and written back in the
    current layout on the next save.
    """

    def __init__(self, path: str | Path, keys: KeyManager = key_manager):
        self.path = Path(path)
        self.keys = keys

    def create(
        self,
        credential_id: str,
        algorithm: KeyAlgorithm,
        issuer: str | None = None,
        audience: str | None = None,
        description: str | None = None,
    ) -> Credential:
        """
        Create a credential with freshly generated key material

        Args:
            credential_id: Credential ID
            algorithm: Signing algorithm
            issuer: Issuer URL override
            audience: Audience override
            description: Description

        Returns:
            New Credential (not yet saved)
        """
        key_material = self.keys.generate(algorithm)
        return Credential(
            id=credential_id,
            description=description,
            issuer=issuer,
            audience=audience,
            secret_key_pair=self.keys.to_record(algorithm, key_material),
        )

    def from_persisted(self, data: dict) -> Credential:
        """
        Restore one persisted credential entry

        Raises:
            UnsupportedAlgorithm: If the entry names an unknown algorithm
            KeyDecodeFailure: If the entry or its key record is malformed or
                unreadable
        """
        if not isinstance(data, Mapping) or "id" not in data:
            raise KeyDecodeFailure("Credential entry has no id")

        if "secretKeyPair" in data:
            record = self.keys.load_record(data["secretKeyPair"])
        else:
            logger.info(f"Upgrading legacy credential {data['id']}", extra={"credential_id": data["id"]})
            record = self.keys.load_record({"privateKey": data.get("privateKey")})

        try:
            return Credential(
                id=data["id"],
                description=data.get("description"),
                issuer=data.get("issuer"),
                audience=data.get("audience"),
                secret_key_pair=record,
            )
        except ValidationError as e:
            raise KeyDecodeFailure(f"Malformed credential entry {data['id']!r}") from e

    @staticmethod
    def to_persisted(credential: Credential) -> dict:
        """Current persisted layout of a credential"""
        return credential.model_dump(mode="json", by_alias=True)

    def load(self) -> list[Credential]:
        """
        Load all credentials

        Returns:
            Credentials in file order; empty when the file does not exist
        """
        if not self.path.exists():
            logger.warning(f"Credentials file not found at {self.path}")
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                entries = json.load(f)
            credentials = [self.from_persisted(entry) for entry in entries]
        except Exception as e:
            logger.error(f"Failed to load credentials from {self.path}: {e}")
            raise

        logger.info(f"Loaded {len(credentials)} credentials", extra={"path": str(self.path)})
        return credentials

    def save(self, credentials: Iterable[Credential]) -> None:
        """Write credentials in the current layout"""
        entries = [self.to_persisted(c) for c in credentials]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2)

        # Set restrictive permissions
        os.chmod(self.path, 0o600)

        logger.info(f"Saved {len(entries)} credentials", extra={"path": str(self.path)})


# Global instance
credential_store = CredentialStore(settings.credentials_path)
