"""
Cipher context over the `cryptography` library.

One interface (init / update / finalize / release) with two private
adapters. Releases of cryptography before 3.1 require an explicit
backend object; later releases take none. new_cipher_context() picks the
adapter from the installed version so the engine never has to care.
"""

from abc import ABC, abstractmethod
from typing import Optional

import cryptography
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from packaging.version import Version

from aesudf.common.config import get_cipher_backend

# First release where Cipher(..., backend=None) is accepted.
OPTIONAL_BACKEND_VERSION = Version("3.1")


class CipherContext(ABC):
    """
    Per-call cipher state. Never shared between calls or threads.
    """

    def __init__(self):
        self._ctx = None

    @abstractmethod
    def _new_cipher(self, key: bytes) -> Cipher:
        ...

    def init(self, key: bytes, encrypting: bool) -> None:
        """
        Derive the key schedule and open an ECB encryptor/decryptor.
        Raises ValueError if the key is rejected by the primitive.
        """
        cipher = self._new_cipher(key)
        self._ctx = cipher.encryptor() if encrypting else cipher.decryptor()

    def update(self, data: bytes) -> bytes:
        """Process data; returns every full block produced so far."""
        if self._ctx is None:
            raise ValueError("cipher context not initialised")
        return self._ctx.update(data)

    def finalize(self) -> bytes:
        """
        Close the context. ECB holds no partial state once input is
        block-aligned, so this returns b"" for valid use and raises
        ValueError if a partial block is left over.
        """
        if self._ctx is None:
            raise ValueError("cipher context not initialised")
        out = self._ctx.finalize()
        self._ctx = None
        return out

    def release(self) -> None:
        """Drop the key schedule. Safe to call more than once."""
        self._ctx = None


class _ModernCipherContext(CipherContext):
    def _new_cipher(self, key: bytes) -> Cipher:
        return Cipher(algorithms.AES(key), modes.ECB())


class _LegacyCipherContext(CipherContext):
    def _new_cipher(self, key: bytes) -> Cipher:
        from cryptography.hazmat.backends import default_backend
        return Cipher(algorithms.AES(key), modes.ECB(), backend=default_backend())


def new_cipher_context(version: Optional[str] = None, backend: Optional[str] = None) -> CipherContext:
    """
    Build a fresh cipher context.

    :param version: cryptography version string; defaults to the installed one
    :param backend: "auto" | "modern" | "legacy"; defaults to AES_CIPHER_BACKEND
    """
    if backend is None:
        backend = get_cipher_backend()

    if backend == "modern":
        return _ModernCipherContext()
    if backend == "legacy":
        return _LegacyCipherContext()

    if version is None:
        version = cryptography.__version__
    if Version(version) >= OPTIONAL_BACKEND_VERSION:
        return _ModernCipherContext()
    return _LegacyCipherContext()
