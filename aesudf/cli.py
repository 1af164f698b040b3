"""
Command-line harness for the AES-ECB/PKCS#7 row functions.

    python -m aesudf.cli enc <key> <input>
    python -m aesudf.cli dec <key> <input> --input-format hex

Prints `hex:<...>` and `b64:<...>` on success.

Exit codes:
    2  usage error
    3  bad key length
    4  unknown mode
    5  crypto failed
"""

import argparse
import sys
from typing import List, Optional

from aesudf.common.protocol import CliRequest, CliResult
from aesudf.common.utils import b64_decode, b64_encode, hex_decode, hex_encode
from aesudf.crypto.aes import AesError, decrypt_checked, encrypt_checked, select_cipher

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_BAD_KEY = 3
EXIT_BAD_MODE = 4
EXIT_CRYPTO = 5

INPUT_DECODERS = {
    "raw": lambda s: s.encode("utf-8"),
    "hex": hex_decode,
    "b64": b64_decode,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aesudf",
        description="AES-ECB with PKCS#7 padding (Hive-compatible).",
    )
    parser.add_argument("mode", help="enc | dec")
    parser.add_argument("key", help="key string, 16/24/32 bytes")
    parser.add_argument("input", help="plaintext (enc) or ciphertext (dec)")
    parser.add_argument(
        "--input-format",
        choices=sorted(INPUT_DECODERS),
        default="raw",
        help="how to decode <input> into bytes (default: raw)",
    )
    return parser


def split_argv(argv: List[str]) -> List[str]:
    """
    Reorder argv so only --input-format (anywhere) and a leading -h/--help
    are read as options. Every other token is positional, so keys and
    inputs starting with "-" are taken as given.
    """
    options: List[str] = []
    positionals: List[str] = []
    if argv and argv[0] in ("-h", "--help"):
        options.append(argv[0])
        argv = argv[1:]
    i = 0
    while i < len(argv):
        token = argv[i]
        if token == "--input-format" and i + 1 < len(argv):
            options += argv[i:i + 2]
            i += 2
            continue
        if token.startswith("--input-format="):
            options.append(token)
        elif token != "--":
            positionals.append(token)
        i += 1
    return options + ["--"] + positionals


def run(request: CliRequest) -> CliResult:
    """
    Run one request. Raises AesError on crypto failure.
    """
    if request.mode == "enc":
        out = encrypt_checked(request.data, request.key)
    else:
        out = decrypt_checked(request.data, request.key)
    return CliResult(hex=hex_encode(out), b64=b64_encode(out))


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(split_argv(sys.argv[1:] if argv is None else list(argv)))
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    key = args.key.encode("utf-8")
    if select_cipher(len(key)) is None:
        print("key length must be 16/24/32 bytes", file=sys.stderr)
        return EXIT_BAD_KEY

    if args.mode not in ("enc", "dec"):
        print(f"unknown mode: {args.mode}", file=sys.stderr)
        return EXIT_BAD_MODE

    try:
        data = INPUT_DECODERS[args.input_format](args.input)
    except ValueError as e:
        print(f"cannot decode input as {args.input_format}: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        result = run(CliRequest(mode=args.mode, key=key, data=data))
    except AesError as e:
        print("crypto failed", file=sys.stderr)
        print(f"[AES] {e}", file=sys.stderr)
        return EXIT_CRYPTO

    print(f"hex:{result.hex}")
    print(f"b64:{result.b64}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
