"""Issuers and the factories that locate them"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from oidc_provider.schemas.credential import Credential, ExecutionContext


class Issuer(ABC):
    """A base URL on whose behalf tokens are signed, and its credentials"""

    @property
    @abstractmethod
    def url(self) -> str:
        """Absolute issuer URL, e.g. https://ci.example.org/oidc/team"""

    @property
    @abstractmethod
    def uri(self) -> str:
        """Path below the OIDC root this issuer is served from, e.g. /team ("" for the root)"""

    @abstractmethod
    def credentials(self) -> Sequence[Credential]:
        """Credentials stored in this issuer's scope, in order"""

    def default_credentials(self) -> list[Credential]:
        """Credentials issuing tokens under this issuer's own URL"""
        return [c for c in self.credentials() if c.uses_default_issuer]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r}, uri={self.uri!r})"


class IssuerFactory(ABC):
    """Locates issuers for a build, an admin request or a URI"""

    @abstractmethod
    def for_context(self, context: ExecutionContext) -> list[Issuer]:
        """Issuers whose credentials a running build may use"""

    @abstractmethod
    def for_config(self, request: Any) -> Issuer | None:
        """Issuer whose credentials an admin request is configuring"""

    @abstractmethod
    def for_uri(self, uri: str) -> Issuer | None:
        """Issuer served from the given URI below the OIDC root"""


class StaticIssuer(Issuer):
    """Issuer with a fixed credential list"""

    def __init__(self, url: str, uri: str, credentials: Sequence[Credential] = ()):
        self._url = url
        self._uri = uri
        self._credentials = tuple(credentials)

    @property
    def url(self) -> str:
        return self._url

    @property
    def uri(self) -> str:
        return self._uri

    def credentials(self) -> Sequence[Credential]:
        return self._credentials


class StaticIssuerFactory(IssuerFactory):
    """
    Factory over a fixed set of issuers

    Every issuer applies to every build; admin requests select an issuer
    with the ``scope`` query parameter (its URI, the root when absent).
    """

    def __init__(self, issuers: Sequence[Issuer]):
        self._issuers = list(issuers)

    def for_context(self, context: ExecutionContext) -> list[Issuer]:
        return list(self._issuers)

    def for_config(self, request: Any) -> Issuer | None:
        scope = request.query_params.get("scope", "")
        return self.for_uri(scope)

    def for_uri(self, uri: str) -> Issuer | None:
        for issuer in self._issuers:
            if issuer.uri == uri:
                return issuer
        return None
