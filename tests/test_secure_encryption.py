import os
import sys
import base64
import unittest
from unittest import mock

from cryptography.exceptions import UnsupportedAlgorithm

# Ensure the repo root is importable when running tests from anywhere
THIS_DIR = os.path.dirname(__file__)
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from encryption_errors import (  # noqa: E402
    CryptoBackendError,
    DecryptionFailedError,
    InvalidCiphertextError,
    InvalidEncodingError,
    InvalidKeyLengthError,
    InvalidUtf8Error,
    KeyDisposedError,
    NullInputError,
    NullKeyError,
    RandomSourceUnavailableError,
    SimpleEncryptError,
)
from secure_encryption import IV_SIZE, KEY_SIZE, SecureEncryption, generate_key  # noqa: E402


class GenerateKeyTests(unittest.TestCase):
    def test_key_is_32_random_bytes(self):
        k1 = generate_key()
        k2 = generate_key()
        self.assertIsInstance(k1, bytes)
        self.assertEqual(len(k1), KEY_SIZE)
        self.assertNotEqual(k1, k2)
        self.assertEqual(len(SecureEncryption.generate_key()), 32)

    def test_missing_entropy_source(self):
        with mock.patch("secure_encryption.os.urandom", side_effect=NotImplementedError("no source")):
            with self.assertRaises(RandomSourceUnavailableError):
                generate_key()


class ConstructionTests(unittest.TestCase):
    def test_key_length_validation(self):
        for n in (0, 16, 31, 33, 64):
            with self.assertRaises(InvalidKeyLengthError):
                SecureEncryption(b"\x01" * n)
        with SecureEncryption(b"\x01" * 32) as enc:
            self.assertFalse(enc.closed)

    def test_none_key_is_distinct_from_bad_length(self):
        with self.assertRaises(NullKeyError):
            SecureEncryption(None)
        # both still catchable the usual Python way
        with self.assertRaises(ValueError):
            SecureEncryption(b"short")
        with self.assertRaises(TypeError):
            SecureEncryption(None)

    def test_non_bytes_key_rejected(self):
        with self.assertRaises(TypeError):
            SecureEncryption("k" * 32)

    def test_bytearray_key_is_copied(self):
        key = bytearray(generate_key())
        enc = SecureEncryption(key)
        ct = enc.encrypt_bytes(b"data")
        key[:] = bytes(32)
        self.assertEqual(enc.decrypt_bytes(ct), b"data")
        enc.close()


class BytesTests(unittest.TestCase):
    def setUp(self):
        self.enc = SecureEncryption(generate_key())

    def tearDown(self):
        self.enc.close()

    def test_roundtrip_various_lengths(self):
        for n in (0, 1, 15, 16, 17, 31, 32, 1000):
            pt = os.urandom(n)
            ct = self.enc.encrypt_bytes(pt)
            # IV plus padded body, always at least one block of padding
            self.assertEqual(len(ct), IV_SIZE + (n // 16 + 1) * 16)
            self.assertEqual(self.enc.decrypt_bytes(ct), pt)

    def test_fresh_iv_each_call(self):
        pt = b"same plaintext"
        c1 = self.enc.encrypt_bytes(pt)
        c2 = self.enc.encrypt_bytes(pt)
        self.assertNotEqual(c1, c2)
        self.assertNotEqual(c1[:IV_SIZE], c2[:IV_SIZE])
        self.assertEqual(self.enc.decrypt_bytes(c1), pt)
        self.assertEqual(self.enc.decrypt_bytes(c2), pt)

    def test_short_input_is_invalid(self):
        for n in (0, 1, 15):
            with self.assertRaises(InvalidCiphertextError):
                self.enc.decrypt_bytes(b"\x00" * n)

    def test_partial_block_is_invalid(self):
        ct = self.enc.encrypt_bytes(b"hello")
        with self.assertRaises(InvalidCiphertextError):
            self.enc.decrypt_bytes(ct[:-1])

    def test_backend_failure_is_mapped(self):
        ct = self.enc.encrypt_bytes(b"payload")
        with mock.patch("secure_encryption.Cipher", side_effect=UnsupportedAlgorithm("no AES")):
            with self.assertRaises(CryptoBackendError):
                self.enc.encrypt_bytes(b"payload")
            with self.assertRaises(CryptoBackendError):
                self.enc.decrypt_bytes(ct)

    def test_iv_only_fails_padding(self):
        with self.assertRaises(DecryptionFailedError):
            self.enc.decrypt_bytes(os.urandom(IV_SIZE))

    def test_none_input(self):
        with self.assertRaises(NullInputError):
            self.enc.encrypt_bytes(None)
        with self.assertRaises(NullInputError):
            self.enc.decrypt_bytes(None)

    def test_wrong_key_fails(self):
        # long plaintext: garbage that passes the padding check is still not UTF-8
        token = self.enc.encrypt_string("attack at dawn " * 20)
        with SecureEncryption(generate_key()) as other:
            with self.assertRaises(SimpleEncryptError):
                other.decrypt_string(token)

    def test_aes256_cbc_nist_vectors(self):
        # NIST SP 800-38A F.2.5 CBC-AES256
        key = bytes.fromhex(
            "603deb1015ca71be2b73aef0857d7781"
            "1f352c073b6108d72d9810a30914dff4"
        )
        iv = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
        pt = bytes.fromhex(
            "6bc1bee22e409f96e93d7e117393172a"
            "ae2d8a571e03ac9c9eb76fac45af8e51"
            "30c81c46a35ce411e5fbc1191a0a52ef"
            "f69f2445df4f9b17ad2b417be66c3710"
        )
        ct_expected = bytes.fromhex(
            "f58c4c04d6e5f1ba779eabfb5f7bfbd6"
            "9cfc4e967edb808d679f777bc6702c7d"
            "39f23369a9d9bacfa530e26304231461"
            "b2eb05e2c39be9fcda6c19078c6a9d1b"
        )
        with SecureEncryption(key) as enc:
            with mock.patch("secure_encryption.os.urandom", return_value=iv):
                out = enc.encrypt_bytes(pt)
            self.assertEqual(out[:16], iv)
            # full padding block follows the four NIST blocks
            self.assertEqual(out[16:80], ct_expected)
            self.assertEqual(len(out), 16 + 80)
            self.assertEqual(enc.decrypt_bytes(out), pt)


class StringTests(unittest.TestCase):
    def setUp(self):
        self.enc = SecureEncryption(generate_key())

    def tearDown(self):
        self.enc.close()

    def test_roundtrip(self):
        for s in ("", "hello", "héllo wörld", "日本語テキスト", "emoji \U0001F512"):
            token = self.enc.encrypt_string(s)
            base64.b64decode(token, validate=True)
            self.assertEqual(self.enc.decrypt_string(token), s)

    def test_empty_string_is_one_padding_block(self):
        token = self.enc.encrypt_string("")
        self.assertEqual(len(base64.b64decode(token)), IV_SIZE + 16)

    def test_none_text(self):
        with self.assertRaises(NullInputError):
            self.enc.encrypt_string(None)
        with self.assertRaises(NullInputError):
            self.enc.decrypt_string(None)

    def test_bad_base64(self):
        for bad in ("not base64!!", "abc", "éééé"):
            with self.assertRaises(InvalidEncodingError):
                self.enc.decrypt_string(bad)

    def test_short_ciphertext_via_string(self):
        with self.assertRaises(InvalidCiphertextError):
            self.enc.decrypt_string(base64.b64encode(b"tiny").decode())

    def test_lone_surrogate(self):
        with self.assertRaises(InvalidUtf8Error):
            self.enc.encrypt_string("\ud800")

    def test_non_utf8_plaintext(self):
        ct = self.enc.encrypt_bytes(b"\xff\xfe\xfd")
        with self.assertRaises(InvalidUtf8Error):
            self.enc.decrypt_string(base64.b64encode(ct).decode())


class DisposalTests(unittest.TestCase):
    def test_close_wipes_key(self):
        enc = SecureEncryption(b"\xaa" * 32)
        enc.close()
        self.assertTrue(enc.closed)
        self.assertEqual(enc._key, bytearray(32))
        enc.close()  # idempotent

    def test_context_manager_wipes_on_error(self):
        enc = SecureEncryption(generate_key())
        with self.assertRaises(InvalidCiphertextError):
            with enc:
                enc.decrypt_bytes(b"x")
        self.assertTrue(enc.closed)
        self.assertEqual(enc._key, bytearray(32))

    def test_closed_instance_rejects_use(self):
        enc = SecureEncryption(generate_key())
        enc.close()
        with self.assertRaises(KeyDisposedError):
            enc.encrypt_bytes(b"x")
        with self.assertRaises(KeyDisposedError):
            enc.decrypt_string("AAAA")
        with self.assertRaises(KeyDisposedError):
            with enc:
                pass

    def test_repr_hides_key(self):
        key = b"\x42" * 32
        with SecureEncryption(key) as enc:
            self.assertNotIn(key.hex(), repr(enc))
            self.assertIn("open", repr(enc))


if __name__ == "__main__":
    unittest.main(verbosity=2)
