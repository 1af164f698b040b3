"""Common utility helpers: base64 and hex rendering of byte buffers."""

import base64
import binascii
from typing import Union


def b64_encode(data: bytes) -> str:
    """
    Base64-encode bytes -> str (ASCII), standard alphabet, no newlines.
    """
    return base64.b64encode(data).decode("ascii")


def b64_decode(s: Union[bytes, str]) -> bytes:
    """
    Base64-decode str -> bytes.
    Raises ValueError on malformed input.
    """
    if isinstance(s, str):
        s = s.encode("ascii")
    return base64.b64decode(s, validate=True)


def hex_encode(data: bytes) -> str:
    """Lowercase hex string of data."""
    return binascii.hexlify(data).decode("ascii")


def hex_decode(s: str) -> bytes:
    """
    Hex string -> bytes.
    Raises ValueError on odd length or non-hex characters.
    """
    return bytes.fromhex(s)
