"""Discovery and JWKS endpoints"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from oidc_provider.core.dependencies import DiscoveryServiceDep, IssuerResolverDep, JWKSServiceDep

router = APIRouter()

CACHE_HEADERS = {"Cache-Control": "public, max-age=3600"}


@router.get("/{path:path}")
async def serve_metadata(
    path: str,
    resolver: IssuerResolverDep,
    discovery: DiscoveryServiceDep,
    jwks: JWKSServiceDep,
):
    """
    Serve the discovery document or JWKS of an issuer

    The issuer is identified by the path before the suffix, e.g.
    /oidc/team/.well-known/openid-configuration or /oidc/team/jwks.

    Returns:
        Provider metadata or JWKS

    Raises:
        HTTPException: 404 if no issuer is served from the path
    """
    rest = "/" + path

    issuer = resolver.find_discovery_issuer(rest)
    if issuer is not None:
        return JSONResponse(content=discovery.openid_configuration(issuer.url), headers=CACHE_HEADERS)

    issuer = resolver.find_jwks_issuer(rest)
    if issuer is not None:
        return JSONResponse(content=jwks.get_jwks(issuer), headers=CACHE_HEADERS)

    raise HTTPException(status_code=404, detail="Not Found")
