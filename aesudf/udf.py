"""
Host query-runtime shim: aes_encrypt / aes_decrypt row functions.

The runtime calls each function once per row with a FunctionContext and
two nullable byte strings. Output buffers come from the context's memory
pool, and a "no value" result from the core becomes the runtime's NULL.
"""

from typing import Callable, Dict, List, Optional, Sequence

from aesudf.common.config import get_mem_limit
from aesudf.common.protocol import StringVal
from aesudf.crypto.aes import AesError, ContextCreationFailure, decrypt_checked, encrypt_checked

RowFunction = Callable[["FunctionContext", StringVal, StringVal], StringVal]

_UNSET = object()


class FunctionContext:
    """
    Per-query memory context. Not thread-safe; the runtime gives each
    fragment its own.
    """

    def __init__(self, mem_limit=_UNSET):
        self.mem_limit: Optional[int] = get_mem_limit() if mem_limit is _UNSET else mem_limit
        self.bytes_allocated = 0
        self.error: Optional[str] = None

    def allocate(self, size: int) -> Optional[bytearray]:
        """
        Zeroed buffer of `size` bytes, or None if the pool is exhausted.
        """
        if self.mem_limit is not None and self.bytes_allocated + size > self.mem_limit:
            return None
        self.bytes_allocated += size
        return bytearray(size)

    def set_error(self, msg: str) -> None:
        """Record the first error raised by a row function."""
        if self.error is None:
            self.error = msg

    @property
    def has_error(self) -> bool:
        return self.error is not None


class HostAdapter:
    """
    Narrow seam between the crypto core and the runtime: where output
    buffers come from and how "no value" is represented.
    """

    def __init__(self, ctx: FunctionContext, fn_name: str):
        self.ctx = ctx
        self.fn_name = fn_name

    def allocate_output(self, size: int) -> Optional[bytearray]:
        buf = self.ctx.allocate(size)
        if buf is None:
            self.ctx.set_error(f"{self.fn_name}: output allocation failed")
        return buf

    def to_nullable(self, result: Optional[bytes]) -> StringVal:
        if result is None:
            return StringVal.null()
        return StringVal(data=result)


def _call(fn_name: str, core, ctx: FunctionContext, input: StringVal, key: StringVal) -> StringVal:
    if input.is_null or key.is_null:
        return StringVal.null()
    adapter = HostAdapter(ctx, fn_name)
    try:
        result = core(input.data, key.data, adapter.allocate_output)
    except ContextCreationFailure:
        ctx.set_error(f"{fn_name}: cipher context creation failed")
        result = None
    except AesError:
        result = None
    return adapter.to_nullable(result)


def aes_encrypt(ctx: FunctionContext, input: StringVal, key: StringVal) -> StringVal:
    """AES-ECB/PKCS#7 encrypt; NULL on NULL input or key length not 16/24/32."""
    return _call("aes_encrypt", encrypt_checked, ctx, input, key)


def aes_decrypt(ctx: FunctionContext, input: StringVal, key: StringVal) -> StringVal:
    """AES-ECB/PKCS#7 decrypt; NULL on NULL input, bad key or bad ciphertext."""
    return _call("aes_decrypt", decrypt_checked, ctx, input, key)


FUNCTIONS: Dict[str, RowFunction] = {
    "aes_encrypt": aes_encrypt,
    "aes_decrypt": aes_decrypt,
}


def evaluate(fn: RowFunction, ctx: FunctionContext,
             inputs: Sequence[StringVal], keys: Sequence[StringVal]) -> List[StringVal]:
    """
    Evaluate a row function over two columns of equal length.
    """
    if len(inputs) != len(keys):
        raise ValueError(f"column length mismatch: {len(inputs)} inputs, {len(keys)} keys")
    return [fn(ctx, value, key) for value, key in zip(inputs, keys)]


def create_function_sql(location: str, database: Optional[str] = None) -> List[str]:
    """
    CREATE FUNCTION statements registering every row function in FUNCTIONS.
    """
    prefix = f"{database}." if database else ""
    return [
        f"CREATE FUNCTION IF NOT EXISTS {prefix}{name}(STRING, STRING) RETURNS STRING "
        f"LOCATION '{location}' SYMBOL='{name}';"
        for name in FUNCTIONS
    ]
