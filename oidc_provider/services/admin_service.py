"""Credential configuration helpers for the admin screens"""

from typing import Any
from urllib.parse import urlencode

from oidc_provider.core.algorithms import KeyAlgorithm
from oidc_provider.core.config import logger
from oidc_provider.core.exceptions import IssuerNotFound
from oidc_provider.schemas.admin import IssuerCheckResult
from oidc_provider.schemas.credential import Credential
from oidc_provider.services.discovery_service import DiscoveryService, discovery_service
from oidc_provider.services.issuer_resolver import JWKS, WELL_KNOWN_OPENID_CONFIGURATION, IssuerResolver
from oidc_provider.services.jwks_service import JWKSService, jwks_service
from oidc_provider.utils.validators import validate_issuer_url

CHECK_ISSUER_PATH = "/check-issuer"


class AdminService:
    """Feedback and self-hosting material for credentials with an issuer override"""

    def __init__(
        self,
        resolver: IssuerResolver,
        discovery: DiscoveryService = discovery_service,
        jwks: JWKSService = jwks_service,
    ):
        self.resolver = resolver
        self.discovery = discovery
        self.jwks = jwks

    def check_issuer(self, request: Any, credential_id: str, issuer: str | None) -> IssuerCheckResult:
        """
        Validate the issuer URL entered for a credential

        Args:
            request: Admin request, used to find the issuer being configured
            credential_id: ID of the credential being edited
            issuer: Issuer override entered, may be empty

        Returns:
            IssuerCheckResult; for a saved credential with a valid override
            it links to the documents the user has to serve themselves
        """
        scope = self.resolver.find_for_config(request)

        if not issuer:
            if scope is not None:
                return IssuerCheckResult.ok(f"Issuer URI: {scope.url}")
            return IssuerCheckResult.warning("Unable to determine the issuer URI")

        is_valid, error = validate_issuer_url(issuer)
        if not is_valid:
            logger.debug(f"Rejected issuer URI {issuer!r}: {error}", extra={"credential_id": credential_id})
            return IssuerCheckResult.error(error)

        if scope is None:
            return IssuerCheckResult.warning("Unable to determine where these credentials are being saved")

        if self._find_credential(scope.credentials(), credential_id, issuer) is None:
            return IssuerCheckResult.ok("Save these credentials, then return to this screen for instructions")

        base = request.url.path
        if base.endswith(CHECK_ISSUER_PATH):
            base = base[: -len(CHECK_ISSUER_PATH)]

        return IssuerCheckResult.ok(
            f"Serve {issuer}{WELL_KNOWN_OPENID_CONFIGURATION} and {issuer}{JWKS} with the linked content "
            "(both as application/json). Note that the JWKS document will need to be updated "
            "if you resave these credentials.",
            well_known_url=f"{base}/well-known-openid-configuration?{urlencode({'issuer': issuer})}",
            jwks_url=f"{base}/jwks?{urlencode({'id': credential_id, 'issuer': issuer})}",
        )

    def well_known_openid_configuration(self, issuer: str) -> dict:
        """Discovery document to serve at an overridden issuer URL"""
        return self.discovery.openid_configuration(issuer)

    def credential_jwks(self, request: Any, credential_id: str, issuer: str) -> dict:
        """
        JWKS to serve at an overridden issuer URL

        Raises:
            IssuerNotFound: If no issuer applies to the request or it holds no
                credential with that ID and override
        """
        scope = self.resolver.find_for_config(request)
        if scope is None:
            raise IssuerNotFound("Unable to determine where these credentials are saved")

        credential = self._find_credential(scope.credentials(), credential_id, issuer)
        if credential is None:
            raise IssuerNotFound(f"No credential {credential_id} with issuer {issuer}")

        return {"keys": [self.jwks.key(credential)]}

    @staticmethod
    def algorithm_items() -> list[str]:
        """Algorithms selectable for a credential"""
        return [algorithm.value for algorithm in KeyAlgorithm]

    @staticmethod
    def _find_credential(credentials, credential_id: str, issuer: str) -> Credential | None:
        for credential in credentials:
            if credential.id == credential_id and credential.issuer == issuer:
                return credential
        return None
