"""Token service for ID token issuance"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from oidc_provider.core.config import logger, settings
from oidc_provider.core.security import KeyManager, check_key_family, key_manager
from oidc_provider.schemas.credential import Credential, ExecutionContext
from oidc_provider.schemas.token import IdTokenPayload
from oidc_provider.services.issuer_resolver import IssuerResolver

TOKEN_LIFETIME = timedelta(hours=1)


class TokenService:
    """Service for creating signed ID tokens"""

    def __init__(self, resolver: IssuerResolver, keys: KeyManager = key_manager, root_url: str | None = None):
        self.resolver = resolver
        self.keys = keys
        self.root_url = root_url if root_url is not None else settings.root_url

    def build_payload(self, credential: Credential, context: ExecutionContext | None = None) -> IdTokenPayload:
        """
        Build the claims of an ID token

        Args:
            credential: Credential the token is issued for
            context: Running build, None outside of a build

        Returns:
            IdTokenPayload

        Raises:
            IssuerNotFound: If the credential has no issuer override and no
                issuer applicable to the build holds it
        """
        if credential.issuer is not None:
            issuer = credential.issuer
        else:
            issuer = self.resolver.find_for_context(credential, context).url

        now = datetime.now(timezone.utc)
        exp = now + TOKEN_LIFETIME

        return IdTokenPayload(
            iss=issuer,
            aud=credential.audience,
            sub=context.subject if context is not None else self.root_url,
            build_number=context.build_number if context is not None else None,
            iat=int(now.timestamp()),
            exp=int(exp.timestamp()),
        )

    def issue(self, credential: Credential, context: ExecutionContext | None = None) -> str:
        """
        Create a signed ID token

        Args:
            credential: Credential whose key signs the token
            context: Running build, None outside of a build

        Returns:
            Compact JWT with the credential ID as kid

        Raises:
            IssuerNotFound: If the issuer cannot be determined
            KeyDecodeFailure: If the stored key pair cannot be restored
            KeyAlgorithmMismatch: If the key does not fit the algorithm
        """
        payload = self.build_payload(credential, context)
        key_material = self.keys.to_key_pair(credential.secret_key_pair)
        check_key_family(credential.algorithm, key_material.private_key, key_material.public_key)

        token = jwt.encode(
            payload.claims(),
            key_material.get_private_key_pem(),
            algorithm=credential.algorithm.value,
            headers={"kid": credential.id},
        )

        logger.debug(
            f"Issued ID token for {credential.id}",
            extra={
                "credential_id": credential.id,
                "algorithm": credential.algorithm.value,
                "iss": payload.iss,
                "sub": payload.sub,
                "build_number": payload.build_number,
            },
        )

        return token
