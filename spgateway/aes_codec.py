"""AES-256-CBC payload codec used for ``PostData_``, ``TradeInfo`` and
``EncryptData_`` fields.

The gateway pads to 32 bytes, not to the 16-byte AES block: a payload of
``n`` bytes gets ``p = 32 - n % 32`` bytes of value ``p`` appended, so an
already aligned payload still receives a full 32-byte pad block.
"""

from __future__ import annotations

import binascii
import json
import logging

from Crypto.Cipher import AES

from .credentials import Credential
from .errors import CodecError, DecodeError

logger = logging.getLogger(__name__)

PAD_BLOCK_SIZE = 32
CLOSING_BRACE = ord("}")


def add_padding(data: bytes, size: int = PAD_BLOCK_SIZE) -> bytes:
    pad = size - (len(data) % size)
    return data + bytes([pad]) * pad


def strip_padding(data: bytes, *, brace_guard: bool = True, strict: bool = False) -> bytes:
    """Remove the pad block from a decrypted buffer.

    With ``brace_guard`` a buffer ending in ``}`` is returned as is; the
    gateway sometimes returns JSON that was never padded.

    The default policy strips the whole trailing run of bytes equal to the
    last byte, which is what the gateway's own libraries do. It over-strips
    when the plaintext itself ends with the pad value. ``strict=True``
    removes exactly as many bytes as the last byte says and validates them.
    """
    if not data:
        return data
    last = data[-1]
    if brace_guard and last == CLOSING_BRACE:
        return data
    if strict:
        if not 1 <= last <= PAD_BLOCK_SIZE or last > len(data):
            raise CodecError(f"invalid padding length {last}")
        if data[-last:] != bytes([last]) * last:
            raise CodecError("inconsistent padding bytes")
        return data[:-last]
    return data.rstrip(bytes([last]))


def _cipher(credential: Credential):
    return AES.new(credential.hash_key, AES.MODE_CBC, credential.hash_iv)


def encode_post_data(credential: Credential, data) -> str:
    """Pad, encrypt and hex-encode ``data`` (``str`` or ``bytes``)."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    encrypted = _cipher(credential).encrypt(add_padding(raw))
    return encrypted.hex()


def decode_aes_bytes(
    credential: Credential, data: str, *, brace_guard: bool = True, strict_unpad: bool = False
) -> bytes:
    try:
        encrypted = binascii.unhexlify(data.strip())
    except (binascii.Error, ValueError, AttributeError) as e:
        raise CodecError(f"payload is not valid hex: {e}") from e
    if len(encrypted) % AES.block_size:
        raise CodecError(
            f"payload length {len(encrypted)} is not a multiple of {AES.block_size}"
        )
    if not encrypted:
        return b""
    try:
        decrypted = _cipher(credential).decrypt(encrypted)
    except ValueError as e:
        raise CodecError(f"decryption failed: {e}") from e
    return strip_padding(decrypted, brace_guard=brace_guard, strict=strict_unpad)


def decode_aes_data(
    credential: Credential, data: str, *, brace_guard: bool = True, strict_unpad: bool = False
) -> str:
    """Hex-decode, decrypt and unpad ``data``; return the UTF-8 text."""
    plain = decode_aes_bytes(
        credential, data, brace_guard=brace_guard, strict_unpad=strict_unpad
    )
    try:
        return plain.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning("decrypted payload is not UTF-8; HashKey/HashIV mismatch?")
        raise CodecError("decrypted payload is not valid UTF-8") from e


def decode_json_data(credential: Credential, data: str, **kwargs):
    text = decode_aes_data(credential, data, **kwargs)
    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeError(f"encrypted payload is not JSON: {e}") from e


__all__ = [
    "add_padding",
    "strip_padding",
    "encode_post_data",
    "decode_aes_bytes",
    "decode_aes_data",
    "decode_json_data",
]
