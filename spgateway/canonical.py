"""Deterministic string renderings of gateway parameter maps.

Two renderings exist:

* the *payload* rendering keeps the caller's insertion order and
  percent-encodes every value; it is what gets encrypted into ``PostData_``
  or ``TradeInfo``.
* the *signing* rendering keeps only the requested fields, sorts them by
  their lowercased names and leaves the values untouched; it is the text
  wrapped by a check-value template before hashing.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping
from urllib.parse import quote, quote_plus

from .errors import MissingFieldError

# Characters left alone by the gateway's v1 "escape the whole query" step.
URI_SAFE = "-_.!~*'();/?:@&=+$,[]"


def to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return str(value)


def require_fields(params: Mapping[str, Any], fields: Iterable[str]) -> None:
    for field in fields:
        if params.get(field) is None:
            raise MissingFieldError(field)


def _encode_value(value: str, style: str) -> str:
    if style == "form":
        # The gateway's form encoder escapes "~"; quote_plus never does.
        return quote_plus(value, safe="*").replace("~", "%7E")
    if style == "uri":
        return quote(value, safe=URI_SAFE)
    raise ValueError(f"unknown payload style: {style!r}")


def render_payload(
    params: Mapping[str, Any], required: Iterable[str] = (), style: str = "form"
) -> str:
    """Join ``key=value`` pairs with ``&`` in insertion order.

    ``style="form"`` encodes like an HTML form post (space becomes ``+``);
    ``style="uri"`` only escapes characters outside the URI character set
    (space becomes ``%20``). ``None`` values are skipped.
    """

    require_fields(params, required)
    return "&".join(
        f"{key}={_encode_value(to_text(value), style)}"
        for key, value in params.items()
        if value is not None
    )


def _join_sorted(pairs) -> str:
    # sorted() is stable, so keys equal under lower() keep their input order.
    ordered = sorted(pairs, key=lambda kv: kv[0].lower())
    return "&".join(f"{k}={to_text(v)}" for k, v in ordered)


def render_for_signing(params: Mapping[str, Any], fields: Iterable[str]) -> str:
    """Return the canonical signing string for ``fields`` of ``params``."""
    wanted = list(dict.fromkeys(fields))
    require_fields(params, wanted)
    return _join_sorted((k, v) for k, v in params.items() if k in wanted)


def select_present(params: Mapping[str, Any], fields: Iterable[str]) -> str:
    """Like :func:`render_for_signing` but ignores fields that are absent."""
    wanted = set(fields)
    return _join_sorted(
        (k, v) for k, v in params.items() if k in wanted and v is not None
    )


__all__ = ["render_payload", "render_for_signing", "select_present", "require_fields"]
