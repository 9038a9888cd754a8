# encryption_errors.py
"""Exceptions raised by the SimpleEncrypt modules.

Every error derives from SimpleEncryptError and, where one fits, from the
matching builtin so callers can also catch ValueError / OSError / TypeError.
"""


class SimpleEncryptError(Exception):
    """Base exception for all SimpleEncrypt errors."""


# -------- key / input validation --------
class NullKeyError(SimpleEncryptError, TypeError):
    """No key was supplied."""


class InvalidKeyLengthError(SimpleEncryptError, ValueError):
    """Key is not exactly 32 bytes."""


class NullInputError(SimpleEncryptError, TypeError):
    """Plaintext or ciphertext argument was None."""


class KeyDisposedError(SimpleEncryptError, ValueError):
    """The SecureEncryption instance was closed and its key wiped."""


# -------- ciphertext --------
class InvalidEncodingError(SimpleEncryptError, ValueError):
    """Ciphertext string is not valid Base64."""


class InvalidCiphertextError(SimpleEncryptError, ValueError):
    """Ciphertext buffer is structurally invalid (too short, bad length)."""


class DecryptionFailedError(SimpleEncryptError, ValueError):
    """PKCS7 padding check failed after decryption."""


class InvalidUtf8Error(SimpleEncryptError, ValueError):
    """Bytes could not be converted to or from UTF-8 text."""


class CryptoBackendError(SimpleEncryptError):
    """The underlying cipher primitive failed."""


class RandomSourceUnavailableError(SimpleEncryptError, OSError):
    """The OS entropy source could not be read."""


# -------- key files --------
class KeyFileNotFoundError(SimpleEncryptError, FileNotFoundError):
    """Key file path does not exist."""


class KeyFileIOError(SimpleEncryptError, OSError):
    """Reading or writing a key file failed."""


class NoValidKeyFoundError(SimpleEncryptError, ValueError):
    """Key file holds neither a usable Base64 nor hex key line."""
