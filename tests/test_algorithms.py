"""
Unit tests for the key algorithm registry.
"""

import pytest

from oidc_provider.core.algorithms import ALGORITHM_SPECS, KeyAlgorithm, KeyFamily
from oidc_provider.core.exceptions import UnsupportedAlgorithm


def test_every_algorithm_has_metadata():
    assert set(ALGORITHM_SPECS) == set(KeyAlgorithm)


@pytest.mark.parametrize("algorithm,curve", [
    (KeyAlgorithm.ES256, "P-256"),
    (KeyAlgorithm.ES384, "P-384"),
    (KeyAlgorithm.ES512, "P-521"),
])
def test_elliptic_curve_algorithms(algorithm, curve):
    assert algorithm.family is KeyFamily.ELLIPTIC_CURVE
    assert algorithm.is_elliptic_curve
    assert not algorithm.is_rsa
    assert algorithm.curve == curve


@pytest.mark.parametrize("algorithm,key_size", [
    (KeyAlgorithm.RS256, 2048),
    (KeyAlgorithm.RS384, 3072),
    (KeyAlgorithm.RS512, 4096),
])
def test_rsa_algorithms(algorithm, key_size):
    assert algorithm.family is KeyFamily.RSA
    assert algorithm.is_rsa
    assert algorithm.curve is None
    assert algorithm.spec.key_size == key_size


def test_from_name():
    assert KeyAlgorithm.from_name("ES384") is KeyAlgorithm.ES384


@pytest.mark.parametrize("name", ["HS256", "PS256", "none", "", None])
def test_from_name_unsupported(name):
    with pytest.raises(UnsupportedAlgorithm):
        KeyAlgorithm.from_name(name)
