"""ezPay e-invoice client.

Every call posts an encrypted ``PostData_`` blob and receives a JSON body
whose ``Result`` field is itself JSON text.
"""

from __future__ import annotations

from typing import Any, Dict, Union

from .aes_codec import encode_post_data
from .base_client import BaseClient, endpoints, merge_params, timestamp
from .canonical import render_payload
from .envelopes import post_data_envelope
from .response_decoder import DecodedResponse, decode_response


class InvoiceClient(BaseClient):
    ENDPOINTS = {
        "invoice_issue": endpoints(
            "https://cinv.ezpay.com.tw/API/invoice_issue",
            "https://inv.ezpay.com.tw/API/invoice_issue",
        ),
        "invoice_invalid": endpoints(
            "https://cinv.ezpay.com.tw/API/invoice_invalid",
            "https://inv.ezpay.com.tw/API/invoice_invalid",
        ),
        "allowance_issue": endpoints(
            "https://cinv.ezpay.com.tw/API/allowance_issue",
            "https://inv.ezpay.com.tw/API/allowance_issue",
        ),
        "invoice_search": endpoints(
            "https://cinv.ezpay.com.tw/API/invoice_search",
            "https://inv.ezpay.com.tw/API/invoice_search",
        ),
    }

    def invoice_issue(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(
            params,
            "MerchantOrderNo",
            "Status",
            "Category",
            "BuyerName",
            "PrintFlag",
            "TaxType",
            "TaxRate",
            "Amt",
            "TaxAmt",
            "TotalAmt",
            "ItemName",
            "ItemCount",
            "ItemUnit",
            "ItemPrice",
            "ItemAmt",
        )
        post_params = merge_params(
            {"RespondType": "JSON", "Version": "1.4", "TimeStamp": timestamp()}, params
        )
        return self._request("invoice_issue", post_params)

    def invoice_invalid(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "InvoiceNumber", "InvalidReason")
        post_params = merge_params(
            {"RespondType": "JSON", "Version": "1.0", "TimeStamp": timestamp()}, params
        )
        return self._request("invoice_invalid", post_params)

    def allowance_issue(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(
            params,
            "InvoiceNo",
            "MerchantOrderNo",
            "ItemName",
            "ItemCount",
            "ItemUnit",
            "ItemPrice",
            "ItemAmt",
            "ItemTaxAmt",
            "TotalAmt",
            "BuyerEmail",
            "Status",
        )
        post_params = merge_params(
            {"RespondType": "JSON", "Version": "1.3", "TimeStamp": timestamp()}, params
        )
        return self._request("allowance_issue", post_params)

    def invoice_search_by_merchant_order_no(self, params: Dict[str, Any]) -> DecodedResponse:
        self._require(params, "MerchantOrderNo", "TotalAmt")
        post_params = merge_params(
            {"RespondType": "JSON", "Version": "1.3", "TimeStamp": timestamp(), "SearchType": 1},
            params,
        )
        return self._request("invoice_search", post_params)

    def invoice_search_by_invoice_no(
        self, params: Dict[str, Any], offsite: bool = False
    ) -> Union[DecodedResponse, str]:
        """Search by invoice number.

        With ``offsite=True`` nothing is sent; the encrypted ``PostData_`` is
        returned for the caller to post from the buyer's browser.
        """
        self._require(params, "InvoiceNumber", "RandomNum")
        post_params = merge_params(
            {"RespondType": "JSON", "Version": "1.3", "TimeStamp": timestamp(), "SearchType": 0},
            params,
        )
        if offsite:
            return encode_post_data(self.credential, render_payload(post_params, style="uri"))
        return self._request("invoice_search", post_params)

    def _request(self, api_type: str, params: Dict[str, Any]) -> DecodedResponse:
        fields = post_data_envelope(self.credential, params, style="uri")
        res = self._post(api_type, fields)
        return decode_response(res.body, "json", nested_json_fields=("Result",))
