"""
Encrypt/decrypt service contracts
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

PlainT = TypeVar("PlainT")
CipherT = TypeVar("CipherT")


class EncryptionService(ABC, Generic[PlainT, CipherT]):
    """Turns plain data into its protected form"""

    @abstractmethod
    def encrypt(self, data: PlainT) -> CipherT:
        pass


class DecryptionService(ABC, Generic[PlainT, CipherT]):
    """Recovers plain data from its protected form"""

    @abstractmethod
    def decrypt(self, data: CipherT) -> PlainT:
        pass


class CryptographyService(EncryptionService[PlainT, CipherT], DecryptionService[PlainT, CipherT]):
    """Service that both encrypts and decrypts"""
    pass
