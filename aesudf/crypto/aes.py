"""AES-128/192/256 (ECB) + PKCS#7 row functions (Hive-compatible)."""

from typing import Callable, NamedTuple, Optional

from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives import padding

from aesudf.crypto.context import new_cipher_context

BLOCK_SIZE_BYTES = 16  # AES block size, the same for every key size
SUPPORTED_KEY_SIZES = (16, 24, 32)

Allocator = Callable[[int], Optional[bytearray]]


# ------------- Errors -------------


class AesError(ValueError):
    """Base class; every subclass means "no value" to the row functions."""


class AbsentInput(AesError):
    pass


class InvalidKeyLength(AesError):
    pass


class MalformedCiphertext(AesError):
    pass


class PrimitiveFailure(AesError):
    pass


class ContextCreationFailure(PrimitiveFailure):
    """No cipher context could be built (bad backend setting, unknown version)."""


# ------------- Cipher selector -------------


class CipherSpec(NamedTuple):
    name: str
    key_size: int
    block_size: int


_CIPHERS = {
    16: CipherSpec("aes-128-ecb", 16, BLOCK_SIZE_BYTES),
    24: CipherSpec("aes-192-ecb", 24, BLOCK_SIZE_BYTES),
    32: CipherSpec("aes-256-ecb", 32, BLOCK_SIZE_BYTES),
}


def select_cipher(key_len: int) -> Optional[CipherSpec]:
    """
    Map a key length in bytes to its cipher, or None if unsupported.

    Hive compatibility: only 16/24/32 are accepted. Other keys are never
    padded, truncated or hashed to fit.
    """
    return _CIPHERS.get(key_len)


# ------------- Padding -------------


def pkcs7_padder(block_size: int = BLOCK_SIZE_BYTES):
    """Streaming PKCS#7 padder; finalize() yields the padded last block."""
    return padding.PKCS7(block_size * 8).padder()


def pkcs7_pad(data: bytes, block_size: int = BLOCK_SIZE_BYTES) -> bytes:
    """
    Apply PKCS#7 padding. Aligned input gets a full extra block.
    """
    padder = pkcs7_padder(block_size)
    return padder.update(data) + padder.finalize()


def pkcs7_unpad(padded: bytes, block_size: int = BLOCK_SIZE_BYTES) -> bytes:
    """
    Remove PKCS#7 padding.

    The last byte N must be in [1, block_size] and the trailing N bytes
    must all equal N. Raises ValueError otherwise.
    """
    if not padded or len(padded) % block_size:
        raise ValueError("Padded data must be a positive multiple of the block size")
    unpadder = padding.PKCS7(block_size * 8).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


# ------------- Engine -------------


def _check_inputs(data: Optional[bytes], key: Optional[bytes]) -> CipherSpec:
    if data is None or key is None:
        raise AbsentInput("input or key is NULL")
    spec = select_cipher(len(key))
    if spec is None:
        raise InvalidKeyLength(f"key length must be 16/24/32 bytes, got {len(key)}")
    return spec


def _allocate(allocate: Allocator, size: int) -> bytearray:
    try:
        buf = allocate(size)
    except MemoryError as e:
        raise PrimitiveFailure("output allocation failed") from e
    if buf is None:
        raise PrimitiveFailure("output allocation failed")
    return buf


def _run(data: bytes, key: bytes, encrypting: bool, out: bytearray) -> int:
    """
    Drive one cipher context over data into out. Returns bytes written.
    Padding is applied to the final block when encrypting.
    """
    written = 0

    def emit(chunk: bytes) -> None:
        nonlocal written
        out[written:written + len(chunk)] = chunk
        written += len(chunk)

    try:
        ctx = new_cipher_context()
    except ValueError as e:
        raise ContextCreationFailure(f"cannot create cipher context: {e}") from e

    try:
        ctx.init(bytes(key), encrypting)
        if encrypting:
            padder = pkcs7_padder()
            emit(ctx.update(padder.update(data)))
            emit(ctx.update(padder.finalize()))
        else:
            emit(ctx.update(data))
        emit(ctx.finalize())
    except (ValueError, TypeError, MemoryError, InternalError, UnsupportedAlgorithm) as e:
        raise PrimitiveFailure(f"cipher failure: {e}") from e
    finally:
        ctx.release()
    return written


def encrypt_checked(plaintext: Optional[bytes], key: Optional[bytes],
                    allocate: Allocator = bytearray) -> bytes:
    """
    AES-ECB encrypt with PKCS#7 padding.

    :param plaintext: raw bytes, any length (including 0)
    :param key: 16/24/32-byte AES key
    :param allocate: output buffer factory; may return None when out of memory
    :return: ciphertext, a positive multiple of 16 bytes
    :raises AesError: subclass naming the failure
    """
    spec = _check_inputs(plaintext, key)

    # Upper bound: at most one full block of padding.
    out = _allocate(allocate, len(plaintext) + spec.block_size)
    written = _run(plaintext, key, True, out)
    del out[written:]
    return bytes(out)


def decrypt_checked(ciphertext: Optional[bytes], key: Optional[bytes],
                    allocate: Allocator = bytearray) -> bytes:
    """
    AES-ECB decrypt and strip PKCS#7 padding.

    :param ciphertext: positive multiple of 16 bytes
    :param key: 16/24/32-byte AES key
    :param allocate: output buffer factory; may return None when out of memory
    :return: plaintext bytes
    :raises AesError: subclass naming the failure
    """
    spec = _check_inputs(ciphertext, key)
    if not ciphertext or len(ciphertext) % spec.block_size:
        raise MalformedCiphertext(
            f"ciphertext length must be a positive multiple of {spec.block_size}, got {len(ciphertext)}"
        )

    # Plaintext never exceeds the ciphertext.
    out = _allocate(allocate, len(ciphertext))
    written = _run(ciphertext, key, False, out)
    del out[written:]
    try:
        return pkcs7_unpad(bytes(out), spec.block_size)
    except ValueError as e:
        raise MalformedCiphertext("bad padding after decrypt") from e


def encrypt(plaintext: Optional[bytes], key: Optional[bytes],
            allocate: Allocator = bytearray) -> Optional[bytes]:
    """Encrypt; None for NULL input, bad key length or cipher failure."""
    try:
        return encrypt_checked(plaintext, key, allocate)
    except AesError:
        return None


def decrypt(ciphertext: Optional[bytes], key: Optional[bytes],
            allocate: Allocator = bytearray) -> Optional[bytes]:
    """Decrypt; None for NULL input, bad key length, malformed ciphertext or bad padding."""
    try:
        return decrypt_checked(ciphertext, key, allocate)
    except AesError:
        return None
