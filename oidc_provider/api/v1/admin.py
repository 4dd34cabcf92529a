"""Admin endpoints for configuring credentials"""

from fastapi import APIRouter, Query, Request

from oidc_provider.core.dependencies import AdminServiceDep
from oidc_provider.schemas.admin import IssuerCheckResult

router = APIRouter()


@router.get("/check-issuer", response_model=IssuerCheckResult)
async def check_issuer(
    request: Request,
    admin: AdminServiceDep,
    id: str = Query(""),
    issuer: str = Query(""),
):
    """
    Validate an issuer URL override

    Returns:
        IssuerCheckResult with ok, warning or error feedback
    """
    return admin.check_issuer(request, id, issuer)


@router.get("/well-known-openid-configuration")
async def well_known_openid_configuration(admin: AdminServiceDep, issuer: str = Query(...)):
    """Discovery document to serve at an issuer URL override"""
    return admin.well_known_openid_configuration(issuer)


@router.get("/jwks")
async def credential_jwks(
    request: Request,
    admin: AdminServiceDep,
    id: str = Query(...),
    issuer: str = Query(...),
):
    """
    JWKS to serve at an issuer URL override

    Raises:
        IssuerNotFound: Mapped to 404
    """
    return admin.credential_jwks(request, id, issuer)


@router.get("/algorithms")
async def algorithms(admin: AdminServiceDep):
    """Selectable signing algorithms"""
    return admin.algorithm_items()
