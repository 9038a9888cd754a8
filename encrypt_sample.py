# encrypt_sample.py – load a key file and round-trip one line of text
import argparse
import logging
from typing import List, Optional

from encryption_errors import SimpleEncryptError
from keyfile import DEFAULT_KEY_FILE, read_key_from_file
from secure_encryption import SecureEncryption

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="SimpleEncrypt sample: encrypt and decrypt one line")
    p.add_argument("--key-file", default=DEFAULT_KEY_FILE,
                   help=f"Key file written by keygen (default {DEFAULT_KEY_FILE})")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def round_trip(key: bytes, text: str):
    """Encrypt then decrypt ``text``; returns (ciphertext_b64, decrypted)."""
    with SecureEncryption(key) as enc:
        encrypted = enc.encrypt_string(text)
    with SecureEncryption(key) as dec:
        decrypted = dec.decrypt_string(encrypted)
    return encrypted, decrypted


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    print("SimpleEncrypt Sample")
    print("====================\n")

    try:
        key = read_key_from_file(args.key_file)
    except (SimpleEncryptError, OSError) as e:
        print(f"Error: {e}")
        print("Failed to read encryption key. Exiting.")
        return 1
    print("Successfully loaded encryption key from file.")

    try:
        text = input("\nEnter text to encrypt: ")
    except EOFError:
        text = ""
    if not text:
        print("No input provided. Exiting.")
        return 1

    try:
        encrypted, decrypted = round_trip(key, text)
    except SimpleEncryptError as e:
        logger.debug("round trip failed", exc_info=True)
        print(f"Error: {e}")
        return 1

    print("\nEncrypted (Base64):")
    print(encrypted)
    print("\nDecrypted:")
    print(decrypted)
    print("\nMatch: " + ("Yes" if text == decrypted else "No"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
