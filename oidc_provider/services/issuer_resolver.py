"""Issuer resolution for token issuance and discovery/JWKS dispatch"""

from collections.abc import Sequence
from typing import Any

from oidc_provider.core.config import logger
from oidc_provider.core.exceptions import IssuerNotFound
from oidc_provider.schemas.credential import Credential, ExecutionContext
from oidc_provider.services.issuers import Issuer, IssuerFactory

WELL_KNOWN_OPENID_CONFIGURATION = "/.well-known/openid-configuration"
JWKS = "/jwks"


class IssuerResolver:
    """Finds the issuer governing a credential, an admin request or a URL path"""

    def __init__(self, root_issuer: Issuer, factories: Sequence[IssuerFactory]):
        self.root_issuer = root_issuer
        self.factories = list(factories)

    def find_for_context(self, credential: Credential, context: ExecutionContext | None = None) -> Issuer:
        """
        Find the issuer a credential is used from

        Args:
            credential: Credential requesting a token
            context: Running build, None outside of a build

        Returns:
            The root issuer without a context, otherwise the first issuer
            applicable to the build that holds the credential

        Raises:
            IssuerNotFound: If no applicable issuer holds the credential
        """
        if context is None:
            return self.root_issuer

        for factory in self.factories:
            for issuer in factory.for_context(context):
                if any(c.id == credential.id for c in issuer.credentials()):
                    return issuer

        logger.error(
            f"No issuer holds credential {credential.id}",
            extra={"credential_id": credential.id, "subject": context.subject, "build_number": context.build_number},
        )
        raise IssuerNotFound(
            f"Could not find issuer corresponding to {credential.id} for {context.subject}#{context.build_number}"
        )

    def find_for_config(self, request: Any) -> Issuer | None:
        """First issuer any factory associates with an admin request"""
        for factory in self.factories:
            issuer = factory.for_config(request)
            if issuer is not None:
                return issuer
        return None

    def find_for_path(self, path: str, suffix: str, require_default_credentials: bool = False) -> Issuer | None:
        """
        Resolve the issuer serving a metadata path

        Args:
            path: Request path below the OIDC root, e.g. /team/proj/jwks
            suffix: Metadata suffix, e.g. /jwks
            require_default_credentials: Only accept an issuer with at least
                one credential issuing under its own URL

        Returns:
            The issuer whose URI is the path minus the suffix, or None
        """
        if not path.endswith(suffix):
            return None

        uri = path[: len(path) - len(suffix)]
        logger.debug(f"Looking up issuer for {uri!r}", extra={"uri": uri, "suffix": suffix})

        for factory in self.factories:
            issuer = factory.for_uri(uri)
            if issuer is None:
                continue
            if issuer.uri != uri:
                logger.warning(f"{issuer!r} was expected to have URI {uri!r}", extra={"uri": uri})
                return None
            if require_default_credentials and not issuer.default_credentials():
                logger.debug(
                    f"Found {issuer!r} but it has no credentials with default issuer; not advertising it",
                    extra={"uri": uri},
                )
                return None
            logger.debug(f"Found {issuer!r}", extra={"uri": uri})
            return issuer

        return None

    def find_discovery_issuer(self, path: str) -> Issuer | None:
        """Issuer for a /.well-known/openid-configuration path; must have default-issued credentials"""
        # The document advertises <url>/jwks, which is only served under the same condition
        return self.find_for_path(path, WELL_KNOWN_OPENID_CONFIGURATION, require_default_credentials=True)

    def find_jwks_issuer(self, path: str) -> Issuer | None:
        """Issuer for a /jwks path; must have default-issued credentials"""
        return self.find_for_path(path, JWKS, require_default_credentials=True)
