"""OpenID provider metadata"""

from oidc_provider.services.issuer_resolver import JWKS

UNIMPLEMENTED_ENDPOINT = "https://unimplemented"


class DiscoveryService:
    """Builds the OpenID provider configuration document"""

    def openid_configuration(self, issuer_url: str) -> dict:
        """
        Get the discovery document for an issuer

        Only ID tokens are issued; the authorization and token endpoints are
        advertised because the metadata format requires them.

        Args:
            issuer_url: Absolute issuer URL

        Returns:
            Provider metadata dictionary
        """
        # TODO derive id_token_signing_alg_values_supported from the issuer's credentials
        return {
            "issuer": issuer_url,
            "jwks_uri": issuer_url + JWKS,
            "response_types_supported": ["code"],
            "subject_types_supported": ["public"],
            "id_token_signing_alg_values_supported": ["RS256"],
            "authorization_endpoint": UNIMPLEMENTED_ENDPOINT,
            "token_endpoint": UNIMPLEMENTED_ENDPOINT,
        }


# Global instance
discovery_service = DiscoveryService()
