"""
Exception classes for Quorum SDK
"""


class QuorumError(Exception):
    """Base exception for Quorum SDK errors"""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ValidationError(QuorumError, ValueError):
    """Input validation failed"""
    pass


class NoInverseError(QuorumError, ZeroDivisionError):
    """Divisor has no multiplicative inverse in the active field"""
    pass


class ReconstructionError(QuorumError):
    """Reconstructed chunk does not fit its recorded length"""
    pass


class EncryptionError(QuorumError):
    """Encryption/decryption failed"""
    pass
