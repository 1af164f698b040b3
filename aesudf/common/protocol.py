"""
Pydantic value models shared by the host shim and the CLI harness.
The crypto core never sees these; it only takes and returns bytes.
"""

from pydantic import BaseModel


# -------------------------
# Host runtime values
# -------------------------

class StringVal(BaseModel):
    """Nullable byte string as passed to and returned from row functions."""
    is_null: bool = False
    data: bytes = b""

    @property
    def len(self) -> int:
        return len(self.data)

    @classmethod
    def null(cls) -> "StringVal":
        return cls(is_null=True)


# -------------------------
# Command-line harness
# -------------------------

class CliRequest(BaseModel):
    mode: str      # "enc" | "dec"
    key: bytes     # raw key bytes, 16/24/32
    data: bytes    # plaintext (enc) or ciphertext (dec)


class CliResult(BaseModel):
    hex: str       # lowercase hex of output
    b64: str       # standard base64 of output
