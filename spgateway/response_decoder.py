"""Parsing of gateway replies.

Replies come in three shapes:

``form``
    ``key=value&...`` with percent-encoded keys and values (v1 ``String``
    responses).
``json``
    A flat JSON object (v2 and e-invoice responses).
``encrypted-json``
    A JSON object whose payload field holds either inline JSON text or a
    hex-encoded encrypted blob, optionally signed by a sibling field.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Union
from urllib.parse import unquote

from .aes_codec import decode_aes_data
from .check_value import check_values_match, compute_check_value
from .credentials import Credential
from .errors import DecodeError

logger = logging.getLogger(__name__)

SHAPES = ("form", "json", "encrypted-json")


@dataclass(frozen=True)
class SignatureMismatch:
    expected: str
    received: Optional[str]


@dataclass(frozen=True)
class DecodedResponse(Mapping):
    data: Dict[str, Any]
    shape: str
    signature_valid: Optional[bool] = None
    mismatch: Optional[SignatureMismatch] = field(default=None, repr=False)

    def __getitem__(self, key):
        return self.data[key]

    def __iter__(self):
        return iter(self.data)

    def __len__(self):
        return len(self.data)


def _text(body: Union[bytes, str]) -> str:
    if isinstance(body, (bytes, bytearray)):
        try:
            return bytes(body).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"response body is not UTF-8: {e}") from e
    return body


def decode_form(body: Union[bytes, str]) -> Dict[str, str]:
    result = {}
    for segment in _text(body).split("&"):
        if not segment:
            continue
        if "=" not in segment:
            raise DecodeError(f"form segment without '=': {segment[:40]!r}")
        key, value = segment.split("=", 1)
        result[unquote(key)] = unquote(value)
    return result


def decode_json(body: Union[bytes, str], nested_json_fields: Iterable[str] = ()) -> Dict[str, Any]:
    try:
        result = json.loads(_text(body))
    except ValueError as e:
        raise DecodeError(f"response body is not JSON: {e}") from e
    if not isinstance(result, dict):
        raise DecodeError(f"expected a JSON object, got {type(result).__name__}")
    for name in nested_json_fields:
        value = result.get(name)
        if isinstance(value, str) and value:
            try:
                result[name] = json.loads(value)
            except ValueError as e:
                raise DecodeError(f"field {name} is not JSON: {e}") from e
    return result


def _check_signature(credential, profile, payload, received):
    if not isinstance(payload, str):
        logger.warning("%s response is signed but carries no payload", profile)
        return False, SignatureMismatch(expected="", received=received)
    expected = compute_check_value(credential, profile, payload)
    if check_values_match(expected, received):
        return True, None
    logger.warning("signature mismatch on %s response", profile)
    return False, SignatureMismatch(expected=expected, received=received)


def decode_encrypted_json(
    body: Union[bytes, str],
    credential: Credential,
    *,
    payload_field: str = "TradeInfo",
    signature_field: str = "TradeSha",
    signature_profile: str = "wallet-refund",
) -> DecodedResponse:
    outer = decode_json(body)
    payload = outer.get(payload_field)

    signature_valid, mismatch = None, None
    if signature_field in outer:
        signature_valid, mismatch = _check_signature(
            credential, signature_profile, payload, outer.get(signature_field)
        )

    data = dict(outer)
    if isinstance(payload, str) and payload:
        if payload.startswith("{"):
            inner_text = payload
        else:
            inner_text = decode_aes_data(credential, payload)
        try:
            inner = json.loads(inner_text)
        except ValueError as e:
            raise DecodeError(f"{payload_field} is not JSON: {e}") from e
        if not isinstance(inner, dict):
            raise DecodeError(f"{payload_field} is not a JSON object")
        data.update(inner)

    return DecodedResponse(
        data=data, shape="encrypted-json", signature_valid=signature_valid, mismatch=mismatch
    )


def decode_response(
    body: Union[bytes, str],
    shape: str,
    credential: Optional[Credential] = None,
    *,
    payload_field: str = "TradeInfo",
    signature_field: str = "TradeSha",
    signature_profile: str = "wallet-refund",
    nested_json_fields: Iterable[str] = (),
) -> DecodedResponse:
    """Decode a raw response ``body`` of the declared ``shape``."""
    if shape == "form":
        return DecodedResponse(data=decode_form(body), shape=shape)
    if shape == "json":
        return DecodedResponse(data=decode_json(body, nested_json_fields), shape=shape)
    if shape == "encrypted-json":
        if credential is None:
            raise ValueError("a credential is required to decode encrypted-json responses")
        return decode_encrypted_json(
            body,
            credential,
            payload_field=payload_field,
            signature_field=signature_field,
            signature_profile=signature_profile,
        )
    raise ValueError(f"unknown response shape: {shape!r}; expected one of {SHAPES}")


__all__ = [
    "SHAPES",
    "DecodedResponse",
    "SignatureMismatch",
    "decode_form",
    "decode_json",
    "decode_encrypted_json",
    "decode_response",
]
