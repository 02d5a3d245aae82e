"""
Cryptographic utilities for Quorum SDK
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import EncryptionError, QuorumError, ValidationError
from .finite_field import modulus_for_chunk_size
from .models import Share, ShareInfo
from .services import CryptographyService
from .sharing import SecretSharingService

logger = logging.getLogger(__name__)

KEY_SIZE = 32  # 256-bit key
NONCE_SIZE = 12  # 96-bit nonce for GCM


@dataclass(frozen=True)
class EnvelopeConfig:
    """Configuration for threshold envelope encryption"""
    threshold: int = 3
    total_shares: int = 5
    chunk_size: int = 16
    modulus: Optional[int] = None
    # Input 0 would hand out the key itself
    first_input: int = 1
    algorithm: str = "AES-256-GCM"

    def __post_init__(self):
        if self.algorithm != "AES-256-GCM":
            raise ValidationError(f"Unsupported algorithm: {self.algorithm}")
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, int) or self.threshold < 1:
            raise ValidationError("Threshold must be a positive integer")

    def share_info(self) -> ShareInfo:
        """Share parameters used for splitting the data key"""
        modulus = self.modulus if self.modulus is not None else modulus_for_chunk_size(self.chunk_size)
        return ShareInfo.create(
            self.chunk_size, self.total_shares, self.threshold - 1, modulus, self.first_input
        )


@dataclass(frozen=True)
class SealedSecret:
    """Ciphertext plus the key shares needed to open it"""
    ciphertext: bytes
    nonce: bytes
    key_shares: List[Share] = field(default_factory=list)
    algorithm: str = "AES-256-GCM"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "ciphertext": self.ciphertext.hex(),
            "nonce": self.nonce.hex(),
            "key_shares": [share.to_dict() for share in self.key_shares]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SealedSecret":
        try:
            return cls(
                ciphertext=bytes.fromhex(data["ciphertext"]),
                nonce=bytes.fromhex(data["nonce"]),
                key_shares=[Share.from_dict(s) for s in data["key_shares"]],
                algorithm=data.get("algorithm", "AES-256-GCM")
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed sealed secret: {str(e)}")

    def with_shares(self, shares: List[Share]) -> "SealedSecret":
        """Copy of this envelope carrying only the given key shares"""
        return SealedSecret(self.ciphertext, self.nonce, list(shares), self.algorithm)


class ThresholdEnvelope(CryptographyService[bytes, SealedSecret]):
    """
    Encrypts data with AES-256-GCM and splits the key into shares.

    Any threshold of the key shares opens the envelope.
    """

    def __init__(self, config: EnvelopeConfig = None):
        """
        Initialize threshold envelope

        Args:
            config: Envelope configuration, defaults to 3-of-5
        """
        self.config = config or EnvelopeConfig()
        self._sharing = SecretSharingService(self.config.share_info())

    def encrypt(self, data: bytes) -> SealedSecret:
        """
        Encrypt data and split the key.

        Args:
            data: Plaintext bytes

        Returns:
            Sealed secret holding ciphertext, nonce and key shares
        """
        key = secrets.token_bytes(KEY_SIZE)
        nonce = secrets.token_bytes(NONCE_SIZE)

        try:
            ciphertext = AESGCM(key).encrypt(nonce, bytes(data), None)
        except (TypeError, ValueError) as e:
            raise EncryptionError(f"Envelope encryption failed: {str(e)}")

        key_shares = self._sharing.encrypt(key)
        logger.debug("Sealed %d bytes under %d key shares", len(data), len(key_shares))

        return SealedSecret(ciphertext, nonce, key_shares, self.config.algorithm)

    def decrypt(self, sealed: SealedSecret) -> bytes:
        """
        Reconstruct the key from the sealed key shares and decrypt.

        Args:
            sealed: Output of encrypt, possibly with only a subset of shares

        Returns:
            Decrypted plaintext
        """
        try:
            key = self._sharing.decrypt(sealed.key_shares)
            if len(key) != KEY_SIZE:
                raise EncryptionError(f"Reconstructed key has {len(key)} bytes, expected {KEY_SIZE}")
            plaintext = AESGCM(key).decrypt(sealed.nonce, sealed.ciphertext, None)
        except EncryptionError:
            raise
        except (QuorumError, InvalidTag, ValueError) as e:
            raise EncryptionError(f"Envelope decryption failed: {str(e) or type(e).__name__}")

        return plaintext


def hash_data(data: bytes) -> str:
    """Generate SHA-256 hash of data"""
    return hashlib.sha256(data).hexdigest()


def verify_integrity(data: bytes, expected_hash: str) -> bool:
    """Verify data integrity against expected hash"""
    return secrets.compare_digest(hash_data(data), expected_hash)
