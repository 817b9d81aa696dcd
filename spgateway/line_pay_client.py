"""LINE Pay refunds through NewebPay."""

from __future__ import annotations

from typing import Any, Dict

from .base_client import BaseClient, endpoints, merge_params
from .envelopes import trade_info_envelope
from .response_decoder import DecodedResponse, decode_response


class LinePayClient(BaseClient):
    ENDPOINTS = {
        "refund": endpoints(
            "https://ccore.newebpay.com/API/LinePay/refund",
            "https://core.newebpay.com/API/LinePay/refund",
        ),
    }

    def refund(self, params: Dict[str, Any]) -> DecodedResponse:
        """Refund a LINE Pay order.

        The reply's ``TradeInfo`` is re-signed locally; check
        ``signature_valid`` on the result before trusting it.
        """
        self._require(params, "MerchantOrderNo", "RefundAmount")
        raw_params = merge_params({"MerchantID": self.merchant_id}, params)
        fields = trade_info_envelope(
            self.credential, raw_params, "wallet-refund", extra={"Version": "1.0"}, style="uri"
        )
        res = self._post("refund", fields)
        return decode_response(
            res.body,
            "encrypted-json",
            self.credential,
            payload_field="TradeInfo",
            signature_field="TradeSha",
            signature_profile="wallet-refund",
        )
