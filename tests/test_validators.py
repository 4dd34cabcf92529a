"""
Unit tests for input validators.
"""

import pytest

from oidc_provider.utils.validators import validate_issuer_url


@pytest.mark.parametrize("url", [
    "https://x/path",
    "https://x",
    "https://ci.example.org/oidc/team",
    "https://ci.example.org:8443/oidc",
])
def test_valid_issuer_urls(url):
    assert validate_issuer_url(url) == (True, None)


@pytest.mark.parametrize("url,message", [
    ("http://x", "Issuer URIs should use https scheme"),
    ("https://x/", "Issuer URIs should not end with a slash (/) in this context"),
    ("https://x/path/", "Issuer URIs should not end with a slash (/) in this context"),
    ("https://x?a=1", "Issuer URIs must not have a query component"),
    ("https://x/path?", "Issuer URIs must not have a query component"),
    ("https://x#f", "Issuer URIs must not have a fragment component"),
    ("https://x/path#", "Issuer URIs must not have a fragment component"),
    ("ci.example.org/oidc", "Issuer URIs should use https scheme"),
    ("https://x/a b", "Not a well-formed URI"),
    ("https://[::1/oidc", "Not a well-formed URI"),
    ("https://x:port/oidc", "Not a well-formed URI"),
    ("https:///oidc", "Not a well-formed URI"),
    ("", "Issuer URI is required"),
])
def test_invalid_issuer_urls(url, message):
    assert validate_issuer_url(url) == (False, message)
