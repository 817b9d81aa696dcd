"""First-generation spgateway API client (``String`` responses)."""

from __future__ import annotations

from typing import Any, Dict

from .base_client import (
    BaseClient,
    endpoints,
    merge_params,
    require_order_reference,
    timestamp,
)
from .check_value import sign_params
from .envelopes import post_data_envelope
from .response_decoder import DecodedResponse, decode_response


class Client(BaseClient):
    ENDPOINTS = {
        "query_trade_info": endpoints(
            "https://ccore.spgateway.com/API/QueryTradeInfo",
            "https://core.spgateway.com/API/QueryTradeInfo",
        ),
        "credit_card_collect_refund": endpoints(
            "https://ccore.spgateway.com/API/CreditCard/Close",
            "https://core.spgateway.com/API/CreditCard/Close",
        ),
        "credit_card_deauthorize": endpoints(
            "https://ccore.spgateway.com/API/CreditCard/Cancel",
            "https://core.spgateway.com/API/CreditCard/Cancel",
        ),
    }

    def generate_mpg_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Form fields for the MPG checkout page, signed with ``CheckValue``."""
        self._require(params, "MerchantOrderNo", "Amt", "ItemDesc", "Email", "LoginType")
        post_params = merge_params(
            {"RespondType": "String", "TimeStamp": timestamp(), "Version": "1.2"}, params
        )
        return sign_params(self.credential, "card-payment", post_params)

    def generate_credit_card_period_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        self._require(
            params,
            "MerchantOrderNo",
            "ProdDesc",
            "PeriodAmt",
            "PeriodAmtMode",
            "PeriodType",
            "PeriodPoint",
            "PeriodStartType",
            "PeriodTimes",
        )
        post_params = merge_params(
            {"RespondType": "String", "TimeStamp": timestamp(), "Version": "1.0"}, params
        )
        return sign_params(self.credential, "recurring-billing", post_params)

    def query_trade_info(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "MerchantOrderNo", "Amt")
        post_params = merge_params(
            {"Version": "1.1", "RespondType": "String", "TimeStamp": timestamp()}, params
        )
        fields = sign_params(self.credential, "transaction-query", post_params)
        return self._form_request("query_trade_info", fields)

    def credit_card_deauthorize(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "IndexType")
        require_order_reference(params)
        post_params = merge_params(
            {"RespondType": "String", "Version": "1.0", "TimeStamp": timestamp()}, params
        )
        return self._encrypted_request("credit_card_deauthorize", post_params)

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
            {"RespondType": "String", "Version": "1.0", "TimeStamp": timestamp()}, params
        )
        return self._encrypted_request("credit_card_collect_refund", post_params)

    def credit_card_collect_refund_by_merchant_order_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "MerchantOrderNo", "CloseType")
        return self.credit_card_collect_refund(merge_params({"IndexType": 1}, params))

    def credit_card_collect_refund_by_trade_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "Amt", "TradeNo", "CloseType")
        return self.credit_card_collect_refund(merge_params({"IndexType": 2}, params))

    def _encrypted_request(self, api_type, post_params) -> DecodedResponse:
        fields = post_data_envelope(self.credential, post_params, style="uri")
        return self._form_request(api_type, fields)

    def _form_request(self, api_type, fields) -> DecodedResponse:
        res = self._post(api_type, fields)
        return decode_response(res.body, "form")
