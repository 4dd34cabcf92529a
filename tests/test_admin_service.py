"""
Unit tests for AdminService.
"""

from unittest.mock import MagicMock

import pytest

from oidc_provider.core.algorithms import KeyAlgorithm
from oidc_provider.core.exceptions import IssuerNotFound
from oidc_provider.schemas.admin import CheckKind
from oidc_provider.services.admin_service import AdminService
from oidc_provider.services.issuer_resolver import IssuerResolver
from oidc_provider.services.issuers import StaticIssuer, StaticIssuerFactory
from tests.conftest import ROOT_ISSUER_URL

OVERRIDE = "https://issuer.example.com/ci"


def create_request(path: str = "/admin/credentials/check-issuer", scope: str = ""):
    """Create mock Request."""
    request = MagicMock()
    request.url.path = path
    request.query_params = {"scope": scope}
    return request


@pytest.fixture
def admin(make_credential, jwks):
    root = StaticIssuer(
        ROOT_ISSUER_URL,
        "",
        [make_credential("default-creds"), make_credential("self-hosted", issuer=OVERRIDE)],
    )
    resolver = IssuerResolver(root, [StaticIssuerFactory([root])])
    return AdminService(resolver, jwks=jwks)


def test_empty_issuer_shows_resolved_url(admin):
    result = admin.check_issuer(create_request(), "default-creds", "")

    assert result.kind is CheckKind.OK
    assert result.message == f"Issuer URI: {ROOT_ISSUER_URL}"


def test_empty_issuer_without_scope(admin):
    result = admin.check_issuer(create_request(scope="/unknown"), "default-creds", None)

    assert result.kind is CheckKind.WARNING
    assert result.message == "Unable to determine the issuer URI"


@pytest.mark.parametrize("issuer", ["http://x", "https://x/", "https://x?a=1", "https://x#f"])
def test_malformed_issuer_is_an_error(admin, issuer):
    result = admin.check_issuer(create_request(), "self-hosted", issuer)

    assert result.kind is CheckKind.ERROR
    assert result.well_known_url is None


def test_valid_issuer_without_scope(admin):
    result = admin.check_issuer(create_request(scope="/unknown"), "self-hosted", OVERRIDE)

    assert result.kind is CheckKind.WARNING
    assert result.message == "Unable to determine where these credentials are being saved"


def test_valid_issuer_not_saved_yet(admin):
    result = admin.check_issuer(create_request(), "new-creds", OVERRIDE)

    assert result.kind is CheckKind.OK
    assert result.message == "Save these credentials, then return to this screen for instructions"
    assert result.jwks_url is None


def test_valid_issuer_saved_links_documents(admin):
    result = admin.check_issuer(create_request(), "self-hosted", OVERRIDE)

    assert result.kind is CheckKind.OK
    assert f"{OVERRIDE}/.well-known/openid-configuration" in result.message
    assert f"{OVERRIDE}/jwks" in result.message
    assert result.well_known_url == (
        "/admin/credentials/well-known-openid-configuration?issuer=https%3A%2F%2Fissuer.example.com%2Fci"
    )
    assert result.jwks_url == (
        "/admin/credentials/jwks?id=self-hosted&issuer=https%3A%2F%2Fissuer.example.com%2Fci"
    )


def test_well_known_for_override(admin):
    doc = admin.well_known_openid_configuration(OVERRIDE)

    assert doc["issuer"] == OVERRIDE
    assert doc["jwks_uri"] == f"{OVERRIDE}/jwks"


def test_credential_jwks(admin):
    result = admin.credential_jwks(create_request(), "self-hosted", OVERRIDE)

    assert [key["kid"] for key in result["keys"]] == ["self-hosted"]


def test_credential_jwks_requires_matching_issuer(admin):
    with pytest.raises(IssuerNotFound):
        admin.credential_jwks(create_request(), "self-hosted", "https://someone-else.example.com")


def test_credential_jwks_without_scope(admin):
    with pytest.raises(IssuerNotFound):
        admin.credential_jwks(create_request(scope="/unknown"), "self-hosted", OVERRIDE)


def test_algorithm_items():
    assert AdminService.algorithm_items() == [a.value for a in KeyAlgorithm]
