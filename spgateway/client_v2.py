"""NewebPay client for the second-generation (JSON) APIs."""

from __future__ import annotations

from typing import Any, Dict

from .aes_codec import decode_json_data
from .base_client import (
    BaseClient,
    endpoints,
    merge_params,
    require_order_reference,
    timestamp,
)
from .check_value import sign_params
from .envelopes import encrypt_data_envelope, post_data_envelope, trade_info_envelope
from .response_decoder import DecodedResponse, decode_response

MPG_VERSION = "2.0"


class ClientV2(BaseClient):
    ENDPOINTS = {
        "mpg": endpoints(
            "https://ccore.newebpay.com/MPG/mpg_gateway",
            "https://core.newebpay.com/MPG/mpg_gateway",
        ),
        "period": endpoints(
            "https://ccore.newebpay.com/MPG/period",
            "https://core.newebpay.com/MPG/period",
        ),
        "query_trade_info": endpoints(
            "https://ccore.newebpay.com/API/QueryTradeInfo",
            "https://core.newebpay.com/API/QueryTradeInfo",
        ),
        "credit_card_deauthorize": endpoints(
            "https://ccore.newebpay.com/API/CreditCard/Cancel",
            "https://core.newebpay.com/API/CreditCard/Cancel",
        ),
        "credit_card_collect_refund": endpoints(
            "https://ccore.newebpay.com/API/CreditCard/Close",
            "https://core.newebpay.com/API/CreditCard/Close",
        ),
        "change_subscription_status": endpoints(
            "https://ccore.newebpay.com/MPG/period/AlterStatus",
            "https://core.newebpay.com/MPG/period/AlterStatus",
        ),
        "ewallet_refund": endpoints(
            "https://ccore.newebpay.com/API/EWallet/refund",
            "https://core.newebpay.com/API/EWallet/refund",
        ),
    }

    def generate_mpg_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """``MerchantID``/``TradeInfo``/``TradeSha``/``Version`` for the MPG page."""
        self._require(params, "MerchantOrderNo", "Amt", "ItemDesc")
        post_params = merge_params(
            {
                "MerchantID": self.merchant_id,
                "RespondType": "JSON",
                "TimeStamp": timestamp(),
                "Version": MPG_VERSION,
            },
            params,
        )
        return trade_info_envelope(
            self.credential, post_params, "card-payment-v2", extra={"Version": MPG_VERSION}
        )

    def generate_credit_card_period_params(self, params: Dict[str, Any]) -> Dict[str, str]:
        self._require(
            params,
            "MerOrderNo",
            "ProdDesc",
            "PeriodAmt",
            "PeriodType",
            "PeriodPoint",
            "PeriodStartType",
            "PeriodTimes",
            "ReturnURL",
            "PayerEmail",
            "NotifyURL",
            "BackURL",
        )
        post_params = merge_params(
            {"RespondType": "JSON", "TimeStamp": timestamp(), "Version": "1.5"}, params
        )
        return post_data_envelope(self.credential, post_params)

    def change_subscription_status(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "MerOrderNo", "PeriodNo", "AlterType")
        post_params = merge_params(
            {"Version": "1.0", "RespondType": "JSON", "TimeStamp": timestamp()}, params
        )
        return self._request("change_subscription_status", post_params)

    def query_trade_info(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "MerchantOrderNo", "Amt")
        post_params = merge_params(
            {"Version": "1.3", "RespondType": "JSON", "TimeStamp": timestamp()}, params
        )
        return self._request("query_trade_info", post_params)

    def credit_card_deauthorize(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "IndexType")
        require_order_reference(params)
        post_params = merge_params(
            {"RespondType": "JSON", "Version": "1.0", "TimeStamp": timestamp()}, params
        )
        return self._request("credit_card_deauthorize", post_params)

    def credit_card_deauthorize_by_merchant_order_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "MerchantOrderNo")
        return self.credit_card_deauthorize(merge_params({"IndexType": 1}, params))

    def credit_card_deauthorize_by_trade_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "TradeNo")
        return self.credit_card_deauthorize(merge_params({"IndexType": 2}, params))

    def credit_card_collect_refund(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "IndexType", "CloseType")
        require_order_reference(params)
        post_params = merge_params(
            {"RespondType": "JSON", "Version": "1.1", "TimeStamp": timestamp()}, params
        )
        return self._request("credit_card_collect_refund", post_params)

    # CloseType 1 requests capture, 2 requests a refund.
    def credit_card_collect_by_merchant_order_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "MerchantOrderNo")
        return self.credit_card_collect_refund(merge_params({"IndexType": 1, "CloseType": 1}, params))

    def credit_card_collect_by_trade_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "TradeNo")
        return self.credit_card_collect_refund(merge_params({"IndexType": 2, "CloseType": 1}, params))

    def credit_card_refund_by_merchant_order_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "MerchantOrderNo")
        return self.credit_card_collect_refund(merge_params({"IndexType": 1, "CloseType": 2}, params))

    def credit_card_refund_by_trade_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "TradeNo")
        return self.credit_card_collect_refund(merge_params({"IndexType": 2, "CloseType": 2}, params))

    def ewallet_refund_by_merchant_order_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amount", "PaymentType", "MerchantOrderNo")
        post_params = merge_params({"TimeStamp": timestamp()}, params)
        return self._request("ewallet_refund", post_params)

    def decode_json_data(self, data: str):
        """Decrypt a ``TradeInfo`` blob (e.g. from a notify callback) into a dict."""
        return decode_json_data(self.credential, data)

    def _request(self, api_type: str, params: Dict[str, Any]) -> DecodedResponse:
        if api_type == "query_trade_info":
            fields = sign_params(self.credential, "transaction-query", params)
        elif api_type == "ewallet_refund":
            fields = encrypt_data_envelope(self.credential, params)
        else:
            fields = post_data_envelope(self.credential, params)
        res = self._post(api_type, fields)
        return decode_response(res.body, "json")
