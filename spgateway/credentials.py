"""Merchant credentials shared by every codec call of one client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import InvalidCredentialError, InvalidModeError, MissingOptionError

MODES = ("test", "production")
KEY_SIZE = 32
IV_SIZE = 16


def _to_bytes(value) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return str(value).encode("utf-8")


@dataclass(frozen=True)
class Credential:
    merchant_id: str
    hash_key: bytes
    hash_iv: bytes
    mode: str = "production"

    def __post_init__(self):
        if self.mode not in MODES:
            raise InvalidModeError(self.mode)
        for name in ("merchant_id", "hash_key", "hash_iv"):
            if getattr(self, name) in (None, ""):
                raise MissingOptionError(name)
        object.__setattr__(self, "merchant_id", str(self.merchant_id))
        object.__setattr__(self, "hash_key", _to_bytes(self.hash_key))
        object.__setattr__(self, "hash_iv", _to_bytes(self.hash_iv))
        if len(self.hash_key) != KEY_SIZE:
            raise InvalidCredentialError(
                f"hash_key must be {KEY_SIZE} bytes, got {len(self.hash_key)}"
            )
        if len(self.hash_iv) != IV_SIZE:
            raise InvalidCredentialError(
                f"hash_iv must be {IV_SIZE} bytes, got {len(self.hash_iv)}"
            )

    # The templates embed the secrets as literal text.
    @property
    def key_text(self) -> str:
        return self.hash_key.decode("utf-8")

    @property
    def iv_text(self) -> str:
        return self.hash_iv.decode("utf-8")

    def __repr__(self):
        return f"Credential(merchant_id={self.merchant_id!r}, mode={self.mode!r})"


def credential_from_options(
    options: Optional[Mapping[str, Any]] = None, **overrides
) -> Credential:
    """Build a :class:`Credential` from a client options mapping.

    ``mode`` defaults to ``"production"``. Missing options raise
    :class:`MissingOptionError` before any request can be made.
    """
    merged = {"mode": "production"}
    merged.update(options or {})
    merged.update(overrides)
    mode = merged.get("mode") or "production"
    if mode not in MODES:
        raise InvalidModeError(mode)
    for name in ("merchant_id", "hash_key", "hash_iv"):
        if merged.get(name) in (None, ""):
            raise MissingOptionError(name)
    return Credential(
        merchant_id=merged["merchant_id"],
        hash_key=merged["hash_key"],
        hash_iv=merged["hash_iv"],
        mode=mode,
    )


def credential_from_env() -> Credential:
    from . import config

    return credential_from_options(config.load_options())
