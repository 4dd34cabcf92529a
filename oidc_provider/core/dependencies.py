"""FastAPI dependencies"""

from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends, Request

from oidc_provider.core.config import settings
from oidc_provider.schemas.credential import Credential
from oidc_provider.services.admin_service import AdminService
from oidc_provider.services.discovery_service import DiscoveryService, discovery_service
from oidc_provider.services.issuer_resolver import IssuerResolver
from oidc_provider.services.issuers import StaticIssuer, StaticIssuerFactory
from oidc_provider.services.jwks_service import JWKSService, jwks_service


def build_issuer_resolver(credentials: Sequence[Credential]) -> IssuerResolver:
    """Resolver with every stored credential in the root issuer"""
    root = StaticIssuer(settings.root_issuer_url, "", credentials)
    return IssuerResolver(root, [StaticIssuerFactory([root])])


# Service dependencies
def get_issuer_resolver(request: Request) -> IssuerResolver:
    """Get the resolver built at startup"""
    return request.app.state.issuer_resolver


def get_discovery_service() -> DiscoveryService:
    """Get discovery service instance"""
    return discovery_service


def get_jwks_service() -> JWKSService:
    """Get JWKS service instance"""
    return jwks_service


IssuerResolverDep = Annotated[IssuerResolver, Depends(get_issuer_resolver)]
DiscoveryServiceDep = Annotated[DiscoveryService, Depends(get_discovery_service)]
JWKSServiceDep = Annotated[JWKSService, Depends(get_jwks_service)]


def get_admin_service(
    resolver: IssuerResolverDep,
    discovery: DiscoveryServiceDep,
    jwks: JWKSServiceDep,
) -> AdminService:
    """Get admin service bound to the current resolver"""
    return AdminService(resolver, discovery=discovery, jwks=jwks)


AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
