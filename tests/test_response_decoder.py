import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
from spgateway import response_decoder
from spgateway.credentials import Credential
from spgateway.errors import CodecError, DecodeError

CRED = Credential(
    merchant_id="MS12345",
    hash_key="0123456789abcdef0123456789abcdef",
    hash_iv="0123456789abcdef",
)

# '{"Status":"SUCCESS","Amt":100}' and its TradeSha
TRADE_INFO = "a6a33edeab69cbb6cf7153eb75d3c8fca5993bcb8ef63163fcc306d723e8030d"
TRADE_SHA = "259D697CED40D2D0703E688A27616F952B0BC4B077263AD5008FEA8444EB4F2B"


def test_form_response():
    body = b"Status=SUCCESS&Message=%E6%9F%A5%E8%A9%A2%E6%88%90%E5%8A%9F&Amt=100&Amt=200&Note=a=b&"
    res = response_decoder.decode_response(body, "form")
    assert res.shape == "form"
    assert res["Message"] == "查詢成功"
    assert res["Amt"] == "200"
    assert res["Note"] == "a=b"
    assert res.signature_valid is None
    assert dict(res) == res.data


def test_form_segment_without_equals():
    with pytest.raises(DecodeError):
        response_decoder.decode_response("Status=SUCCESS&garbage", "form")


def test_json_response_with_nested_result():
    body = json.dumps({"Status": "SUCCESS", "Result": json.dumps({"InvoiceNumber": "AB12345678"})})
    res = response_decoder.decode_response(body, "json", nested_json_fields=("Result",))
    assert res["Result"] == {"InvoiceNumber": "AB12345678"}


def test_json_response_keeps_empty_result():
    res = response_decoder.decode_response('{"Status":"LIB10003","Result":""}', "json", nested_json_fields=("Result",))
    assert res["Result"] == ""


@pytest.mark.parametrize("body", ["<html>", "[1, 2]", b"\xff\xfe"])
def test_malformed_json(body):
    with pytest.raises(DecodeError):
        response_decoder.decode_response(body, "json")


def test_encrypted_json_blob_is_decrypted_and_verified():
    body = json.dumps({"Status": "SUCCESS", "TradeInfo": TRADE_INFO, "TradeSha": TRADE_SHA})
    res = response_decoder.decode_response(body, "encrypted-json", CRED)
    assert res.signature_valid is True
    assert res.mismatch is None
    assert res["Amt"] == 100
    assert res["TradeInfo"] == TRADE_INFO


def test_encrypted_json_signature_mismatch_is_reported():
    body = json.dumps({"Status": "SUCCESS", "TradeInfo": TRADE_INFO, "TradeSha": "BAD"})
    res = response_decoder.decode_response(body, "encrypted-json", CRED)
    assert res.signature_valid is False
    assert res.mismatch.expected == TRADE_SHA
    assert res.mismatch.received == "BAD"
    assert res["Amt"] == 100


def test_encrypted_json_inline_payload_skips_cipher(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("cipher must not be used for inline JSON")

    monkeypatch.setattr(response_decoder, "decode_aes_data", boom)
    body = json.dumps({"Status": "SUCCESS", "TradeInfo": '{"a":1}'})
    res = response_decoder.decode_response(body, "encrypted-json", CRED)
    assert res["a"] == 1
    assert res.signature_valid is None


def test_encrypted_json_without_payload():
    body = json.dumps({"Status": "TRA10001", "Message": "error", "TradeSha": TRADE_SHA})
    res = response_decoder.decode_response(body, "encrypted-json", CRED)
    assert res["Status"] == "TRA10001"
    assert res.signature_valid is False


def test_encrypted_json_bad_blob():
    body = json.dumps({"TradeInfo": "not-hex"})
    with pytest.raises(CodecError):
        response_decoder.decode_response(body, "encrypted-json", CRED)


def test_encrypted_json_needs_credential():
    with pytest.raises(ValueError):
        response_decoder.decode_response("{}", "encrypted-json")


def test_unknown_shape():
    with pytest.raises(ValueError):
        response_decoder.decode_response("{}", "xml")
