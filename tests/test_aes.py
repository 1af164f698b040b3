import os
import unittest
from unittest import mock

from aesudf.crypto.aes import (
    BLOCK_SIZE_BYTES,
    InvalidKeyLength,
    MalformedCiphertext,
    PrimitiveFailure,
    decrypt,
    decrypt_checked,
    encrypt,
    encrypt_checked,
    select_cipher,
)

# openssl enc -aes-{128,192,256}-ecb -K <zeros>, plaintext "YELLOW SUBMARINE"
GOLDEN = {
    16: "9f966aceece847cd3333bb0fd5306172" "0143db63ee66b0cdff9f69917680151e",
    24: "b186bdd5bcfa3398acdda4f1713cc12c" "02bb292527e726fd51eb29894d6f0aad",
    32: "bf0c216dca48108791c46f207e4c6387" "1f788fe6d86c317549697fbf0c07fa43",
}

# AES-128 of sixteen zero bytes under the zero key, no padding applied.
ZERO_BLOCK_CT = bytes.fromhex("66e94bd4ef8a2c3b884cfa59ca342b2e")


class TestCipherSelector(unittest.TestCase):
    def test_supported_key_sizes(self):
        self.assertEqual(select_cipher(16).name, "aes-128-ecb")
        self.assertEqual(select_cipher(24).name, "aes-192-ecb")
        self.assertEqual(select_cipher(32).name, "aes-256-ecb")
        for size in (16, 24, 32):
            self.assertEqual(select_cipher(size).block_size, 16)
            self.assertEqual(select_cipher(size).key_size, size)

    def test_other_sizes_unsupported(self):
        for size in (0, 1, 8, 15, 17, 20, 31, 33, 64):
            self.assertIsNone(select_cipher(size))


class TestEncryptDecrypt(unittest.TestCase):
    def test_round_trip(self):
        for key_size in (16, 24, 32):
            key = os.urandom(key_size)
            for n in (0, 1, 15, 16, 17, 1000):
                plaintext = os.urandom(n)
                ct = encrypt(plaintext, key)
                self.assertEqual(decrypt(ct, key), plaintext, (key_size, n))

    def test_padding_always_present(self):
        key = os.urandom(16)
        for n in (0, 1, 15, 16, 17, 31, 32, 1000):
            ct = encrypt(b"x" * n, key)
            self.assertEqual(len(ct) % BLOCK_SIZE_BYTES, 0)
            self.assertGreaterEqual(len(ct), BLOCK_SIZE_BYTES)
            # always at least one byte of padding
            self.assertEqual(len(ct), (n // 16 + 1) * 16)

    def test_empty_plaintext_is_a_value(self):
        key = bytes(16)
        ct = encrypt(b"", key)
        self.assertEqual(len(ct), 16)
        self.assertEqual(decrypt(ct, key), b"")

    def test_invalid_key_length(self):
        for size in (0, 1, 8, 15, 17, 20, 33):
            key = b"k" * size
            self.assertIsNone(encrypt(b"hello", key))
            self.assertIsNone(decrypt(bytes(32), key))
            with self.assertRaises(InvalidKeyLength):
                encrypt_checked(b"hello", key)

    def test_null_propagation(self):
        key = bytes(16)
        self.assertIsNone(encrypt(None, key))
        self.assertIsNone(encrypt(b"hello", None))
        self.assertIsNone(encrypt(None, None))
        self.assertIsNone(decrypt(None, key))
        self.assertIsNone(decrypt(bytes(16), None))
        self.assertIsNone(decrypt(None, None))

    def test_null_checked_before_key_length(self):
        with mock.patch("aesudf.crypto.aes.select_cipher") as selector:
            self.assertIsNone(encrypt(None, b"short"))
            selector.assert_not_called()

    def test_malformed_ciphertext_length(self):
        key = bytes(16)
        for n in (0, 1, 15, 17, 31):
            self.assertIsNone(decrypt(bytes(n), key))
        with self.assertRaises(MalformedCiphertext):
            decrypt_checked(bytes(15), key)

    def test_bad_padding_rejected(self):
        key = bytes(16)
        # decrypts to sixteen zero bytes: trailing byte 0 is not valid padding
        self.assertIsNone(decrypt(ZERO_BLOCK_CT, key))
        with self.assertRaises(MalformedCiphertext):
            decrypt_checked(ZERO_BLOCK_CT, key)

    def test_ecb_identical_blocks(self):
        key = os.urandom(24)
        block = os.urandom(16)
        ct = encrypt(block * 2, key)
        self.assertEqual(ct[:16], ct[16:32])

    def test_golden_vectors(self):
        for size, expected in GOLDEN.items():
            ct = encrypt(b"YELLOW SUBMARINE", bytes(size))
            self.assertEqual(ct.hex(), expected, size)
            self.assertEqual(decrypt(ct, bytes(size)), b"YELLOW SUBMARINE")

    def test_deterministic(self):
        key = os.urandom(32)
        self.assertEqual(encrypt(b"same input", key), encrypt(b"same input", key))

    def test_accepts_bytearray_and_memoryview(self):
        key = bytearray(16)
        ct = encrypt(memoryview(b"YELLOW SUBMARINE"), key)
        self.assertEqual(ct.hex(), GOLDEN[16])

    def test_allocator_used_and_failure_is_absent(self):
        sizes = []

        def alloc(size):
            sizes.append(size)
            return bytearray(size)

        encrypt(b"abc", bytes(16), alloc)
        self.assertEqual(sizes, [3 + 16])
        self.assertIsNone(encrypt(b"abc", bytes(16), lambda size: None))
        with self.assertRaises(PrimitiveFailure):
            encrypt_checked(b"abc", bytes(16), lambda size: None)

    def test_memory_error_is_absent(self):
        def alloc(size):
            raise MemoryError()

        self.assertIsNone(decrypt(bytes(16), bytes(16), alloc))

    def test_context_released_on_failure(self):
        ctx = mock.Mock()
        ctx.update.side_effect = ValueError("boom")
        with mock.patch("aesudf.crypto.aes.new_cipher_context", return_value=ctx):
            self.assertIsNone(encrypt(b"hello", bytes(16)))
        ctx.release.assert_called_once_with()

    def test_context_released_on_success(self):
        ctx = mock.Mock()
        ctx.update.side_effect = lambda data: data
        ctx.finalize.return_value = b""
        with mock.patch("aesudf.crypto.aes.new_cipher_context", return_value=ctx):
            out = encrypt(b"hello", bytes(16))
        self.assertEqual(out, b"hello" + bytes([11]) * 11)
        ctx.release.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
