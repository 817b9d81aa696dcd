"""Check values for the spgateway / NewebPay family of APIs.

A check value is computed as follows:

1. Look up the wire profile for the API type.
2. Keep only the profile's fields and sort them by their lowercased names.
3. Join them as ``key=value`` pairs and wrap the result in the profile's
   template, which embeds ``HashKey`` and ``HashIV`` as literal text.
4. Compute the SHA-256 digest and output the hex string in uppercase.

Profiles without any fields (``TradeSha``, ``HashData_``) wrap an already
encrypted payload string directly instead of steps 2 and 3.

New gateway message types are added to :data:`PROFILES`; the engine itself
has no per-type branches.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

from .canonical import render_for_signing, require_fields, select_present
from .credentials import Credential
from .errors import UnsupportedProfileError

HASH_KEY_FIRST = "HashKey={hash_key}&{data}&HashIV={hash_iv}"
IV_FIRST = "IV={hash_iv}&{data}&Key={hash_key}"
HASH_IV_FIRST = "HashIV={hash_iv}&{data}&HashKey={hash_key}"


@dataclass(frozen=True)
class WireProfile:
    name: str
    template: str
    required_fields: FrozenSet[str] = frozenset()
    optional_fields: FrozenSet[str] = frozenset()
    digest: str = "sha256"
    generations: FrozenSet[str] = frozenset({"v1"})

    @property
    def raw_payload(self) -> bool:
        return not (self.required_fields or self.optional_fields)

    def signing_string(self, params: Mapping[str, Any]) -> str:
        if self.optional_fields:
            return select_present(params, self.required_fields | self.optional_fields)
        return render_for_signing(params, self.required_fields)


def _profile(name, template, required=(), optional=(), generations=("v1",)):
    return WireProfile(
        name=name,
        template=template,
        required_fields=frozenset(required),
        optional_fields=frozenset(optional),
        generations=frozenset(generations),
    )


PROFILES: Dict[str, WireProfile] = {
    p.name: p
    for p in (
        _profile(
            "card-payment",
            HASH_KEY_FIRST,
            ("Amt", "MerchantID", "MerchantOrderNo", "TimeStamp", "Version"),
        ),
        _profile(
            "transaction-query",
            IV_FIRST,
            ("Amt", "MerchantID", "MerchantOrderNo"),
            generations=("v1", "v2"),
        ),
        _profile(
            "recurring-billing",
            HASH_KEY_FIRST,
            ("MerchantID", "MerchantOrderNo", "PeriodAmt", "PeriodType", "TimeStamp"),
        ),
        _profile("card-payment-v2", HASH_KEY_FIRST, generations=("v2",)),
        _profile("wallet-refund", HASH_KEY_FIRST, generations=("v2",)),
        # Inbound notifications, see compute_legacy_check_code().
        _profile(
            "callback-check-code",
            HASH_IV_FIRST,
            optional=("Amt", "MerchantID", "MerchantOrderNo", "TradeNo"),
        ),
    )
}

# The gateway's own names for the API types.
PROFILE_ALIASES = {
    "mpg": "card-payment",
    "query_trade_info": "transaction-query",
    "credit_card_period": "recurring-billing",
    "mpg20": "card-payment-v2",
    "line_pay_refund": "wallet-refund",
}


def get_profile(name: str) -> WireProfile:
    try:
        return PROFILES[PROFILE_ALIASES.get(name, name)]
    except (KeyError, TypeError):
        raise UnsupportedProfileError(name) from None


def profiles_for(generation: str) -> Dict[str, WireProfile]:
    return {n: p for n, p in PROFILES.items() if generation in p.generations}


def _digest(profile: WireProfile, credential: Credential, data: str) -> str:
    padded = profile.template.format(
        hash_key=credential.key_text, hash_iv=credential.iv_text, data=data
    )
    return hashlib.new(profile.digest, padded.encode("utf-8")).hexdigest().upper()


def compute_check_value(
    credential: Credential, profile_name: str, data: Union[Mapping[str, Any], str]
) -> str:
    """Return the uppercase SHA-256 check value of ``data`` for a profile.

    ``data`` is a parameter map for fielded profiles and the serialized
    (usually encrypted) payload string for raw-payload profiles.
    """
    profile = get_profile(profile_name)
    if profile.raw_payload:
        if not isinstance(data, str):
            raise TypeError(f"profile {profile.name!r} signs a serialized payload string")
        return _digest(profile, credential, data)
    if isinstance(data, str):
        raise TypeError(f"profile {profile.name!r} signs a parameter map")
    require_fields(data, sorted(profile.required_fields))
    return _digest(profile, credential, profile.signing_string(data))


def check_values_match(expected: str, candidate: Optional[str]) -> bool:
    if not isinstance(candidate, str):
        return False
    return hmac.compare_digest(expected.encode("utf-8"), candidate.encode("utf-8"))


def verify_check_value(
    credential: Credential,
    profile_name: str,
    data: Union[Mapping[str, Any], str],
    candidate: Optional[str],
) -> bool:
    return check_values_match(compute_check_value(credential, profile_name, data), candidate)


def compute_legacy_check_code(credential: Credential, params: Mapping[str, Any]) -> str:
    """``CheckCode`` of an inbound notification (only fields present are signed)."""
    return compute_check_value(credential, "callback-check-code", params)


def verify_check_code(credential: Credential, params: Mapping[str, Any]) -> bool:
    fields = dict(params)
    check_code = fields.pop("CheckCode", None)
    return check_values_match(compute_legacy_check_code(credential, fields), check_code)


def sign_params(
    credential: Credential, profile_name: str, params: Mapping[str, Any]
) -> Dict[str, Any]:
    """Copy ``params``, stamp ``MerchantID`` and append ``CheckValue``."""
    result = dict(params)
    result["MerchantID"] = credential.merchant_id
    result["CheckValue"] = compute_check_value(credential, profile_name, result)
    return result


__all__ = [
    "WireProfile",
    "PROFILES",
    "PROFILE_ALIASES",
    "get_profile",
    "profiles_for",
    "compute_check_value",
    "verify_check_value",
    "compute_legacy_check_code",
    "verify_check_code",
    "sign_params",
    "check_values_match",
]
