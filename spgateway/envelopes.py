"""Transport field sets the gateway expects for each kind of endpoint."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from .aes_codec import encode_post_data
from .canonical import render_payload
from .check_value import compute_check_value
from .credentials import Credential


def post_data_envelope(
    credential: Credential, params: Mapping[str, Any], style: str = "form"
) -> Dict[str, str]:
    """``MerchantID_`` / ``PostData_`` for blob-encrypted endpoints."""
    return {
        "MerchantID_": credential.merchant_id,
        "PostData_": encode_post_data(credential, render_payload(params, style=style)),
    }


def trade_info_envelope(
    credential: Credential,
    params: Mapping[str, Any],
    profile: str = "card-payment-v2",
    extra: Optional[Mapping[str, Any]] = None,
    style: str = "form",
) -> Dict[str, Any]:
    """``MerchantID`` / ``TradeInfo`` / ``TradeSha`` triple plus ``extra``."""
    trade_info = encode_post_data(credential, render_payload(params, style=style))
    result = {
        "MerchantID": credential.merchant_id,
        "TradeInfo": trade_info,
        "TradeSha": compute_check_value(credential, profile, trade_info),
    }
    result.update(extra or {})
    return result


def encrypt_data_envelope(credential: Credential, params: Mapping[str, Any]) -> Dict[str, str]:
    """E-wallet refund fields: JSON payload in ``EncryptData_``, signed in ``HashData_``."""
    payload = json.dumps(
        {k: v for k, v in params.items() if v is not None},
        separators=(",", ":"),
        ensure_ascii=False,
    )
    encrypted = encode_post_data(credential, payload)
    return {
        "UID_": credential.merchant_id,
        "Version_": "1.0",
        "RespondType_": "JSON",
        "EncryptData_": encrypted,
        "HashData_": compute_check_value(credential, "wallet-refund", encrypted),
    }
