"""Supported signing algorithms and their family metadata"""

from dataclasses import dataclass
from enum import Enum

from cryptography.hazmat.primitives.asymmetric import ec

from oidc_provider.core.exceptions import UnsupportedAlgorithm


class KeyFamily(str, Enum):
    """Key families"""

    RSA = "RSA"
    ELLIPTIC_CURVE = "EC"


class KeyAlgorithm(str, Enum):
    """JWS algorithms a credential can sign with"""

    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"

    @classmethod
    def from_name(cls, name: str) -> "KeyAlgorithm":
        """
        Look up an algorithm by its JWS name

        Raises:
            UnsupportedAlgorithm: If the name is not a supported algorithm
        """
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedAlgorithm(name) from None

    @property
    def spec(self) -> "AlgorithmSpec":
        return ALGORITHM_SPECS[self]

    @property
    def family(self) -> KeyFamily:
        return self.spec.family

    @property
    def curve(self) -> str | None:
        return self.spec.curve

    @property
    def is_rsa(self) -> bool:
        return self.family is KeyFamily.RSA

    @property
    def is_elliptic_curve(self) -> bool:
        return self.family is KeyFamily.ELLIPTIC_CURVE


@dataclass(frozen=True)
class AlgorithmSpec:
    """Family specific metadata of an algorithm"""

    family: KeyFamily
    key_size: int
    curve: str | None = None
    curve_type: type[ec.EllipticCurve] | None = None


# Key sizes follow what the signature scheme requires (RFC 7518 §3.3, §3.4)
ALGORITHM_SPECS: dict[KeyAlgorithm, AlgorithmSpec] = {
    KeyAlgorithm.ES256: AlgorithmSpec(KeyFamily.ELLIPTIC_CURVE, 256, "P-256", ec.SECP256R1),
    KeyAlgorithm.ES384: AlgorithmSpec(KeyFamily.ELLIPTIC_CURVE, 384, "P-384", ec.SECP384R1),
    KeyAlgorithm.ES512: AlgorithmSpec(KeyFamily.ELLIPTIC_CURVE, 521, "P-521", ec.SECP521R1),
    KeyAlgorithm.RS256: AlgorithmSpec(KeyFamily.RSA, 2048),
    KeyAlgorithm.RS384: AlgorithmSpec(KeyFamily.RSA, 3072),
    KeyAlgorithm.RS512: AlgorithmSpec(KeyFamily.RSA, 4096),
}

# Algorithm implied by credentials persisted before algorithms were selectable
LEGACY_ALGORITHM = KeyAlgorithm.RS256
