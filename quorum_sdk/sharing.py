"""
Threshold secret sharing of byte data

Bytes are cut into chunks, each chunk becomes the constant term of a random
polynomial, and every share receives one evaluation of every polynomial.
Any threshold-sized set of shares interpolates the chunks back.
"""

import logging
import secrets
from typing import Callable, List, Sequence, Union

from .errors import ReconstructionError, ValidationError
from .models import Share, ShareInfo
from .polynomials import CoefficientPolynomial, LagrangePolynomial, Point
from .sequences import chunk_by, transpose
from .services import CryptographyService

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

BYTE_ORDER = "little"


def bytes_to_int(data: Sequence[int]) -> int:
    """Interpret bytes as a signed little-endian integer"""
    return int.from_bytes(bytes(data), BYTE_ORDER, signed=True)


def int_to_bytes(value: int, length: int) -> bytes:
    """Signed little-endian encoding of value in exactly length bytes"""
    try:
        return value.to_bytes(length, BYTE_ORDER, signed=True)
    except OverflowError:
        raise ReconstructionError(
            f"Reconstructed value does not fit in {length} bytes",
            details={"length": length}
        ) from None


class SecureRandom:
    """
    Cryptographically secure random byte source with an explicit lifetime
    """

    def __init__(self):
        self._closed = False

    def token_bytes(self, n: int) -> bytes:
        if self._closed:
            raise RuntimeError("Random source is closed")
        return secrets.token_bytes(n)

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "SecureRandom":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class SecretSharingService(CryptographyService[bytes, List[Share]]):
    """
    Encrypts bytes into shares and decrypts shares back into bytes.

    Holds no mutable state, so one instance can serve concurrent callers.
    """

    def __init__(self, info: ShareInfo, random_factory: Callable[[], SecureRandom] = SecureRandom):
        """
        Initialize secret sharing service

        Args:
            info: Chunk size, share count, degree and field
            random_factory: Creates the random source used for one encrypt call
        """
        if not isinstance(info, ShareInfo):
            raise ValidationError("info must be a ShareInfo")

        self.info = info
        self._random_factory = random_factory

    def encrypt(self, data: BytesLike) -> List[Share]:
        """
        Split data into shares

        Args:
            data: Secret bytes

        Returns:
            number_of_shares shares, each with one point per chunk
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ValidationError(f"Secret must be bytes-like, got {type(data).__name__}")

        data = bytes(data)
        info = self.info
        chunks = chunk_by(data, info.chunk_size)

        logger.debug(
            "Encoding %d bytes as %d chunks into %d shares (threshold %d)",
            len(data), len(chunks), info.number_of_shares, info.threshold
        )

        with self._random_factory() as rng:
            per_chunk = [self._encrypt_chunk(chunk, rng) for chunk in chunks]

        columns = transpose(per_chunk) if per_chunk else [[] for _ in info.inputs]
        return [Share(points, len(data)) for points in columns]

    def _encrypt_chunk(self, chunk: Sequence[int], rng: SecureRandom) -> List[Point[int]]:
        info = self.info
        coefficients = [bytes_to_int(chunk)]
        for _ in range(info.polynomial_info.degree):
            coefficients.append(bytes_to_int(rng.token_bytes(info.chunk_size)))

        polynomial = CoefficientPolynomial(info.polynomial_info, coefficients)
        return [polynomial.evaluate_at(x) for x in info.inputs]

    def decrypt(self, shares: Sequence[Share]) -> bytes:
        """
        Recombine shares into the original bytes

        Args:
            shares: At least threshold shares from one encrypt call; only the
                first threshold of them are used

        Returns:
            Reconstructed secret bytes
        """
        info = self.info
        shares = list(shares)

        if len(shares) < info.threshold:
            raise ValidationError(
                f"Need at least {info.threshold} shares, got {len(shares)}",
                details={"required": info.threshold, "given": len(shares)}
            )

        active = shares[:info.threshold]
        secret_length = self._check_shares(active)
        lengths = info.chunk_lengths(secret_length)

        logger.debug("Decoding %d chunks from %d shares", len(lengths), len(active))

        groups = transpose(share.points for share in active)
        return b"".join(
            self._decrypt_chunk(points, length) for points, length in zip(groups, lengths)
        )

    def _check_shares(self, shares: List[Share]) -> int:
        """Ensure shares describe the same secret layout and return its length"""
        for share in shares:
            if not isinstance(share, Share):
                raise ValidationError(f"Expected Share, got {type(share).__name__}")

        secret_length = shares[0].secret_length
        if any(share.secret_length != secret_length for share in shares):
            raise ValidationError("Shares disagree on the secret length")

        expected = self.info.chunk_count(secret_length)
        if any(len(share.points) != expected for share in shares):
            raise ValidationError(
                f"Every share must hold {expected} points for a {secret_length}-byte secret"
            )

        return secret_length

    def _decrypt_chunk(self, points: List[Point[int]], length: int) -> bytes:
        polynomial_info = self.info.polynomial_info
        polynomial = LagrangePolynomial(polynomial_info, points)
        value = polynomial_info.field.to_signed(polynomial.evaluate_at(0).output)
        return int_to_bytes(value, length)


def encode(secret: BytesLike, info: ShareInfo) -> List[Share]:
    """
    Convenience function to split secret bytes

    Args:
        secret: Secret bytes to split
        info: Share parameters

    Returns:
        List of shares
    """
    return SecretSharingService(info).encrypt(secret)


def decode(shares: Sequence[Share], info: ShareInfo) -> bytes:
    """
    Convenience function to reconstruct secret bytes

    Args:
        shares: At least info.threshold shares
        info: Share parameters used when splitting

    Returns:
        Reconstructed secret bytes
    """
    return SecretSharingService(info).decrypt(shares)
