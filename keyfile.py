# keyfile.py
"""Key display formats and the plain-text key file.

A key file carries the same 32-byte key twice, once as Base64 and once as
uppercase hex, between ``#`` comment lines. The reader finds the key lines by
length (44 chars Base64, 64 chars hex) so existing files keep loading.
"""
import base64
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from encryption_errors import KeyFileIOError, KeyFileNotFoundError, NoValidKeyFoundError
from secure_encryption import KEY_SIZE, generate_key

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILE = "encryption.key"
BASE64_KEY_LENGTH = 44
HEX_KEY_LENGTH = 64

_HEX_LINE = re.compile(r"[0-9A-Fa-f]{%d}" % HEX_KEY_LENGTH)

PathLike = Union[str, Path]


# -------- display formats --------
def format_base64(key: bytes) -> str:
    return base64.b64encode(key).decode("ascii")


def format_hex(key: bytes) -> str:
    """Uppercase hex without separators."""
    return bytes(key).hex().upper()


def render_key_file(key: bytes, generated_at: Optional[datetime] = None) -> str:
    """Build key file text: timestamp + warning comments, Base64 line, hex line."""
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)
    stamp = generated_at.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    lines = [
        f"# Encryption Key Generated: {stamp}",
        "# WARNING: Keep this file secure and never share it!",
        "",
        f"# Base64 Format ({len(key)} bytes, {len(key) * 8} bits)",
        format_base64(key),
        "",
        f"# Hex Format ({len(key)} bytes, {len(key) * 8} bits)",
        format_hex(key),
    ]
    return "\n".join(lines) + "\n"


# -------- writing --------
def resolve_key_path(path: Optional[PathLike]) -> Path:
    if path is None or not str(path).strip():
        return Path(DEFAULT_KEY_FILE)
    return Path(str(path).strip())


def save_key_file(key: bytes, path: Optional[PathLike] = None) -> Path:
    """Write ``key`` to ``path`` (default ``encryption.key``) and return the absolute path.

    The write is not atomic; a failure may leave a partial file behind.
    """
    target = resolve_key_path(path)
    try:
        with open(target, "w", encoding="utf-8") as f:
            f.write(render_key_file(key))
    except OSError as exc:
        raise KeyFileIOError(f"Could not write key file '{target}': {exc.strerror or exc}") from exc
    logger.debug("key file written to %s", target)
    return target.resolve()


def generate_and_save_key(path: Optional[PathLike] = None) -> Tuple[bytes, Path]:
    key = generate_key()
    return key, save_key_file(key, path)


# -------- reading --------
def _base64_candidate(line: str) -> Optional[bytes]:
    try:
        raw = base64.b64decode(line, validate=True)
    except ValueError as exc:  # binascii.Error and non-ASCII lines
        logger.debug("skipping 44-char line, not Base64: %s", exc)
        return None
    if len(raw) != KEY_SIZE:
        logger.debug("skipping Base64 line, decodes to %d bytes", len(raw))
        return None
    return raw


def _hex_candidate(line: str) -> Optional[bytes]:
    if not _HEX_LINE.fullmatch(line):
        logger.debug("skipping 64-char line, not hex")
        return None
    return bytes.fromhex(line)


def parse_key_lines(lines: Iterable[str]) -> bytes:
    """Pick the key out of key file lines.

    Comment (``#``) and blank lines are skipped. The first valid Base64 line wins
    over the first valid hex line; malformed candidate lines are ignored.
    """
    b64_key = None
    hex_key = None
    for line in lines:
        line = line.rstrip("\r\n")
        if line.startswith("#") or not line.strip():
            continue
        if b64_key is None and len(line) == BASE64_KEY_LENGTH:
            b64_key = _base64_candidate(line)
        elif hex_key is None and len(line) == HEX_KEY_LENGTH:
            hex_key = _hex_candidate(line)

    if b64_key is not None:
        return b64_key
    if hex_key is not None:
        return hex_key
    raise NoValidKeyFoundError("No valid key found in the file.")


def read_key_from_file(path: PathLike = DEFAULT_KEY_FILE) -> bytes:
    """Load the 32-byte key from a file written by save_key_file."""
    p = Path(path)
    if not p.exists():
        raise KeyFileNotFoundError(f"Key file '{p}' not found.")
    try:
        with open(p, "r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
    except OSError as exc:
        raise KeyFileIOError(f"Error reading key file '{p}': {exc}") from exc
    logger.debug("read %d lines from %s", len(lines), p)
    return parse_key_lines(lines)
