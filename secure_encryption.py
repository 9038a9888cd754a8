# secure_encryption.py
"""AES-256-CBC encryption of bytes and strings with a random per-message IV.

Ciphertext layout is ``IV (16 bytes) || AES-256-CBC(PKCS7(plaintext))``.

CBC with PKCS7 carries no MAC, so tampered ciphertext is not detected unless it
happens to break the padding. The format is kept for compatibility with
existing key files and ciphertexts; new designs should use an AEAD mode.
"""
import base64
import logging
import os
from typing import Optional, Union

from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from encryption_errors import (
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
)

logger = logging.getLogger(__name__)

KEY_SIZE = 32          # bytes, AES-256
IV_SIZE = 16           # bytes, one AES block
BLOCK_SIZE_BITS = 128  # PKCS7 padder wants bits

BytesLike = Union[bytes, bytearray, memoryview]


def _random_bytes(n: int) -> bytes:
    try:
        return os.urandom(n)
    except (NotImplementedError, OSError) as exc:
        raise RandomSourceUnavailableError(f"OS random source unavailable: {exc}") from exc


def generate_key() -> bytes:
    """Generate a cryptographically secure random 32-byte (256-bit) key."""
    return _random_bytes(KEY_SIZE)


def _check_bytes(name: str, value) -> None:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes")


class SecureEncryption:
    """Encrypt and decrypt with one AES-256 key.

    The key is copied into a private buffer that ``close()`` overwrites with
    zeros. Use the instance as a context manager so the wipe happens on every
    exit path::

        with SecureEncryption(key) as enc:
            token = enc.encrypt_string("hello")
    """

    def __init__(self, key: Optional[BytesLike]):
        self._closed = True
        if key is None:
            raise NullKeyError("Encryption key cannot be None.")
        _check_bytes("key", key)
        if memoryview(key).nbytes != KEY_SIZE:
            raise InvalidKeyLengthError(
                f"Key must be exactly {KEY_SIZE} bytes (256 bits) for AES-256 encryption, "
                f"got {memoryview(key).nbytes}."
            )
        self._key = bytearray(key)
        self._closed = False

    # -------- lifecycle --------
    @staticmethod
    def generate_key() -> bytes:
        return generate_key()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Overwrite the key with zeros. Safe to call more than once."""
        if self._closed:
            return
        self._key[:] = bytes(len(self._key))
        self._closed = True
        logger.debug("SecureEncryption key wiped")

    def __enter__(self) -> "SecureEncryption":
        self._check_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        # last resort only; callers should close() or use ``with``
        if not getattr(self, "_closed", True):
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<SecureEncryption AES-256-CBC {state}>"

    def _check_open(self) -> None:
        if self._closed:
            raise KeyDisposedError("SecureEncryption instance is closed; its key was wiped.")

    def _cipher(self, iv: bytes) -> Cipher:
        # fresh context per call, no chaining state carried between messages
        return Cipher(algorithms.AES(self._key), modes.CBC(iv))

    # -------- bytes --------
    def encrypt_bytes(self, plaintext: BytesLike) -> bytes:
        """Return ``IV || ciphertext`` for ``plaintext`` under a new random IV."""
        self._check_open()
        if plaintext is None:
            raise NullInputError("Plain bytes cannot be None.")
        _check_bytes("plaintext", plaintext)

        iv = _random_bytes(IV_SIZE)
        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(bytes(plaintext)) + padder.finalize()
        try:
            encryptor = self._cipher(iv).encryptor()
            ct = encryptor.update(padded) + encryptor.finalize()
        except (UnsupportedAlgorithm, InternalError) as exc:
            raise CryptoBackendError(f"AES-256-CBC encryption failed: {exc}") from exc
        return iv + ct

    def decrypt_bytes(self, data: BytesLike) -> bytes:
        """Split the leading IV off ``data`` and decrypt the rest."""
        self._check_open()
        if data is None:
            raise NullInputError("Encrypted bytes cannot be None.")
        _check_bytes("data", data)
        data = bytes(data)
        if len(data) < IV_SIZE:
            raise InvalidCiphertextError("Encrypted data is too short to be valid.")

        iv, body = data[:IV_SIZE], data[IV_SIZE:]
        if len(body) % IV_SIZE:
            raise InvalidCiphertextError(
                "Encrypted data length is not a multiple of the AES block size."
            )
        try:
            decryptor = self._cipher(iv).decryptor()
            padded = decryptor.update(body) + decryptor.finalize()
        except (UnsupportedAlgorithm, InternalError) as exc:
            raise CryptoBackendError(f"AES-256-CBC decryption failed: {exc}") from exc

        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise DecryptionFailedError(
                "Decryption failed: invalid padding (wrong key or corrupted data)."
            ) from exc

    # -------- strings --------
    def encrypt_string(self, text: str) -> str:
        """UTF-8 encode ``text``, encrypt it and return the result as Base64."""
        self._check_open()
        if text is None:
            raise NullInputError("Plain text cannot be None.")
        if not isinstance(text, str):
            raise TypeError("text must be str")
        try:
            raw = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidUtf8Error(f"Text cannot be encoded as UTF-8: {exc}") from exc
        return base64.b64encode(self.encrypt_bytes(raw)).decode("ascii")

    def decrypt_string(self, encrypted_text: str) -> str:
        """Reverse of encrypt_string."""
        self._check_open()
        if encrypted_text is None:
            raise NullInputError("Encrypted text cannot be None.")
        if not isinstance(encrypted_text, str):
            raise TypeError("encrypted_text must be str")
        try:
            blob = base64.b64decode(encrypted_text.strip(), validate=True)
        except ValueError as exc:  # binascii.Error and non-ASCII input
            raise InvalidEncodingError("The encrypted text is not a valid Base64 string.") from exc

        plain = self.decrypt_bytes(blob)
        try:
            return plain.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUtf8Error("Decrypted data is not valid UTF-8 (wrong key?).") from exc
