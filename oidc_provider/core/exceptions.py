"""Exceptions raised by the OIDC provider core"""


class OIDCProviderError(Exception):
    """Base class for provider errors"""


class UnsupportedAlgorithm(OIDCProviderError):
    """The algorithm (or its family) is not implemented by the encoder/decoder"""

    def __init__(self, algorithm: object):
        self.algorithm = algorithm
        super().__init__(f"Unsupported key algorithm: {algorithm}")


class IssuerNotFound(OIDCProviderError):
    """No issuer factory claims ownership of a credential or URI"""


class KeyDecodeFailure(OIDCProviderError):
    """Persisted key material could not be decrypted, decoded or parsed"""


class KeyAlgorithmMismatch(OIDCProviderError):
    """A key does not belong to the family required by its algorithm"""
