"""
Unit tests for TokenService.
"""

from unittest.mock import MagicMock

import pytest
from jose import JWTError, jwt

from oidc_provider.core.algorithms import KeyAlgorithm
from oidc_provider.core.exceptions import IssuerNotFound, KeyAlgorithmMismatch
from oidc_provider.core.security import KeyMaterial
from oidc_provider.schemas.credential import ExecutionContext
from oidc_provider.services.issuers import StaticIssuer
from oidc_provider.services.token_service import TokenService
from tests.conftest import ROOT_ISSUER_URL, ROOT_URL, public_pem_from_jwk

BUILD = ExecutionContext(subject="https://ci.example.org/job/team/job/app/", build_number=42)


@pytest.fixture
def token_service_for(keys, resolver_for):
    def build(credentials, extra_issuers=()):
        return TokenService(resolver_for(credentials, extra_issuers), keys=keys, root_url=ROOT_URL)

    return build


def test_issue_outside_build(make_credential, token_service_for):
    credential = make_credential("root-creds", audience="https://sts.example.com")
    token = token_service_for([credential]).issue(credential)

    claims = jwt.get_unverified_claims(token)

    assert claims["iss"] == ROOT_ISSUER_URL
    assert claims["aud"] == "https://sts.example.com"
    assert claims["sub"] == ROOT_URL
    assert "build_number" not in claims
    assert claims["exp"] - claims["iat"] == 3600


def test_issue_in_build(make_credential, token_service_for):
    credential = make_credential("build-creds")
    token = token_service_for([credential]).issue(credential, BUILD)

    claims = jwt.get_unverified_claims(token)

    assert claims["iss"] == ROOT_ISSUER_URL
    assert claims["sub"] == BUILD.subject
    assert claims["build_number"] == 42


def test_kid_header_is_credential_id(make_credential, token_service_for):
    credential = make_credential("kid-creds", algorithm=KeyAlgorithm.ES256)
    token = token_service_for([credential]).issue(credential)

    header = jwt.get_unverified_header(token)

    assert header["kid"] == "kid-creds"
    assert header["alg"] == "ES256"


def test_unset_audience_is_omitted(make_credential, token_service_for):
    credential = make_credential("no-aud", audience="")
    token = token_service_for([credential]).issue(credential)

    assert credential.audience is None
    assert "aud" not in jwt.get_unverified_claims(token)


def test_issuer_override(make_credential, token_service_for):
    credential = make_credential("override", issuer="https://other.example.org/oidc")

    # The override wins even when no issuer holds the credential
    token = token_service_for([]).issue(credential, BUILD)

    assert jwt.get_unverified_claims(token)["iss"] == "https://other.example.org/oidc"


def test_issuer_resolved_from_build(make_credential, token_service_for):
    root_credential = make_credential("root-only")
    folder_credential = make_credential("folder-creds")
    folder = StaticIssuer("https://ci.example.org/oidc/team", "/team", [folder_credential])

    service = token_service_for([root_credential], extra_issuers=[folder])

    claims = jwt.get_unverified_claims(service.issue(folder_credential, BUILD))

    assert claims["iss"] == "https://ci.example.org/oidc/team"


def test_issuer_not_found_in_build(make_credential, token_service_for):
    credential = make_credential("orphan")

    with pytest.raises(IssuerNotFound):
        token_service_for([]).issue(credential, BUILD)


@pytest.mark.parametrize("algorithm", list(KeyAlgorithm))
def test_token_verifies_against_jwk(make_credential, token_service_for, jwks, algorithm):
    credential = make_credential(f"verify-{algorithm.value}", algorithm=algorithm, audience="relying-party")
    token = token_service_for([credential]).issue(credential, BUILD)

    jwk = jwks.key(credential)
    claims = jwt.decode(
        token,
        public_pem_from_jwk(jwk),
        algorithms=[algorithm.value],
        audience="relying-party",
        issuer=ROOT_ISSUER_URL,
    )

    assert claims["sub"] == BUILD.subject
    assert jwt.get_unverified_header(token)["kid"] == jwk["kid"]


def test_token_does_not_verify_against_other_key(make_credential, token_service_for, jwks, keys):
    credential = make_credential("signer", algorithm=KeyAlgorithm.ES256)
    token = token_service_for([credential]).issue(credential)

    other = keys.generate(KeyAlgorithm.ES256)

    with pytest.raises(JWTError):
        jwt.decode(token, other.get_public_key_pem(), algorithms=["ES256"])


def test_sign_time_family_mismatch(make_credential, resolver_for, key_materials):
    credential = make_credential("mismatch", algorithm=KeyAlgorithm.RS256)
    ec_material = key_materials(KeyAlgorithm.ES256)

    broken_keys = MagicMock()
    broken_keys.to_key_pair.return_value = KeyMaterial(
        KeyAlgorithm.RS256, ec_material.private_key, ec_material.public_key
    )
    service = TokenService(resolver_for([credential]), keys=broken_keys, root_url=ROOT_URL)

    with pytest.raises(KeyAlgorithmMismatch):
        service.issue(credential)


def test_issue_does_not_mutate_credential(make_credential, token_service_for):
    credential = make_credential("immutable")
    before = credential.model_dump()

    token_service_for([credential]).issue(credential, BUILD)

    assert credential.model_dump() == before
