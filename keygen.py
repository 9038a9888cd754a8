# keygen.py – interactive AES-256 key generator
import argparse
import logging
from typing import List, Optional

from encryption_errors import SimpleEncryptError
from keyfile import DEFAULT_KEY_FILE, format_base64, format_hex, generate_and_save_key
from secure_encryption import generate_key

logger = logging.getLogger(__name__)

MENU = (
    "\nChoose an option:\n"
    "1. Generate new encryption key\n"
    "2. Generate and save key to file\n"
    "3. Exit"
)


def generate_and_display_key() -> bytes:
    print("\nGenerating new encryption key...")
    key = generate_key()
    print("\nKey in different formats:")
    print("------------------------")
    print(f"Base64: {format_base64(key)}")
    print(f"Hex:    {format_hex(key)}")
    print(f"Length: {len(key)} bytes ({len(key) * 8} bits)")
    return key


def generate_and_save_key_interactive() -> None:
    path = input(f"\nEnter the path to save the key (default: {DEFAULT_KEY_FILE}): ").strip()
    try:
        print("\nGenerating new encryption key...")
        _, saved = generate_and_save_key(path)
    except (SimpleEncryptError, OSError) as e:
        logger.debug("key save failed", exc_info=True)
        print(f"\nError saving key: {e}")
        return
    print(f"\nKey successfully saved to: {saved}")
    print("\nFile contains both Base64 and Hex formats of the key.")
    print("WARNING: Keep this file secure and never share it!")


def run_menu() -> int:
    print("SimpleEncrypt Key Generator")
    print("===========================")
    print()
    while True:
        print(MENU)
        try:
            raw = input("\nEnter your choice (1-3): ")
        except EOFError:
            print()
            return 0
        try:
            choice = int(raw.strip())
        except ValueError:
            print("Invalid input. Please enter a number between 1 and 3.")
            continue

        try:
            if choice == 1:
                generate_and_display_key()
            elif choice == 2:
                generate_and_save_key_interactive()
            elif choice == 3:
                print("Goodbye!")
                return 0
            else:
                print("Invalid choice. Please enter a number between 1 and 3.")
        except EOFError:
            print()
            return 0
        except SimpleEncryptError as e:
            print(f"\nError: {e}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate AES-256 encryption keys")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level (default WARNING)")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")
    return run_menu()


if __name__ == "__main__":
    raise SystemExit(main())
