"""Environment configuration (see .env.example)."""

import os
from typing import Optional, Tuple

try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    # AES_* settings then come from the process environment only
    pass


BACKEND_CHOICES = ("auto", "modern", "legacy")


def get_cipher_backend() -> str:
    """
    Which cipher context adapter to use: auto | modern | legacy.
    """
    backend = os.getenv("AES_CIPHER_BACKEND", "auto").strip().lower()
    if backend not in BACKEND_CHOICES:
        raise ValueError(
            f"AES_CIPHER_BACKEND must be one of {', '.join(BACKEND_CHOICES)}, got '{backend}'"
        )
    return backend


def get_mem_limit() -> Optional[int]:
    """
    Default FunctionContext memory limit in bytes.
    0 (the default) means unlimited and is returned as None.
    """
    limit = int(os.getenv("AES_UDF_MEM_LIMIT", "0"))
    if limit < 0:
        raise ValueError("AES_UDF_MEM_LIMIT must be >= 0")
    return limit or None


def get_ddl_config() -> Tuple[str, Optional[str]]:
    """Defaults for scripts/gen_ddl.py: (library location, database)."""
    location = os.getenv("AES_UDF_LIBRARY", "/user/impala/udfs/libaesudf.so")
    database = os.getenv("AES_UDF_DATABASE", "") or None
    return location, database
