"""
Quorum Python SDK

Threshold secret sharing for arbitrary byte data. A secret is split into
shares so that any threshold-sized subset reconstructs it exactly while
smaller subsets reveal nothing. Includes pluggable field arithmetic,
coefficient and interpolation polynomials, and an AES-GCM envelope whose
key is shared the same way.
"""

from .finite_field import Field, IntegerField, ModularField, exponentiate, product, modulus_for_chunk_size
from .polynomials import Point, PolynomialInfo, CoefficientPolynomial, LagrangePolynomial
from .models import Share, ShareInfo
from .sharing import SecretSharingService, SecureRandom, encode, decode
from .crypto import EnvelopeConfig, SealedSecret, ThresholdEnvelope
from .errors import QuorumError, ValidationError, NoInverseError, ReconstructionError, EncryptionError

__version__ = "0.1.0"
__author__ = "Quorum Team"

__all__ = [
    "Field",
    "IntegerField",
    "ModularField",
    "exponentiate",
    "product",
    "modulus_for_chunk_size",
    "Point",
    "PolynomialInfo",
    "CoefficientPolynomial",
    "LagrangePolynomial",
    "Share",
    "ShareInfo",
    "SecretSharingService",
    "SecureRandom",
    "encode",
    "decode",
    "EnvelopeConfig",
    "SealedSecret",
    "ThresholdEnvelope",
    "QuorumError",
    "ValidationError",
    "NoInverseError",
    "ReconstructionError",
    "EncryptionError"
]
