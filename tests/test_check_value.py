import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
from spgateway import check_value
from spgateway.credentials import Credential
from spgateway.errors import MissingFieldError, UnsupportedProfileError

CRED = Credential(
    merchant_id="MS12345",
    hash_key="0123456789abcdef0123456789abcdef",
    hash_iv="0123456789abcdef",
    mode="test",
)

CARD_PAYMENT = {
    "MerchantID": "MS12345",
    "MerchantOrderNo": "ORDER1",
    "Amt": "1000",
    "TimeStamp": "1700000000",
    "Version": "2.0",
}


def test_card_payment_check_value():
    expected = "98CA6CB56297D659ED5FC194DD4576E0BDBEC568211CFF4AE30231DF024F80D0"
    assert check_value.compute_check_value(CRED, "card-payment", CARD_PAYMENT) == expected
    assert check_value.compute_check_value(CRED, "mpg", CARD_PAYMENT) == expected


def test_check_value_ignores_order_and_unrelated_fields():
    reordered = dict(reversed(list(CARD_PAYMENT.items())))
    reordered["ItemDesc"] = "寵物名牌"
    reordered["RespondType"] = "JSON"
    assert check_value.compute_check_value(
        CRED, "card-payment", reordered
    ) == check_value.compute_check_value(CRED, "card-payment", CARD_PAYMENT)


def test_transaction_query_uses_iv_first_template():
    params = {"MerchantID": "5000", "Amt": "100", "MerchantOrderNo": "ORDER1"}
    assert (
        check_value.compute_check_value(CRED, "query_trade_info", params)
        == "8997802C8014C0D4CAC20774B9DFB661CD06D8A46C963447345A4517DAF9988B"
    )


def test_recurring_billing_check_value():
    params = {
        "MerchantID": "MS12345",
        "MerchantOrderNo": "SUB1",
        "PeriodAmt": 500,
        "PeriodType": "M",
        "TimeStamp": 1700000000,
    }
    assert (
        check_value.compute_check_value(CRED, "recurring-billing", params)
        == "9D62225F01DE4723AEDDDF38F3AE0EA460C839F66C74A44209BB69326E0EEC6C"
    )


def test_raw_payload_profile_wraps_payload_directly():
    trade_info = "c3ee3e7ee77151ca517475567c37e33cfec0b37c8cb339d8ba835436dcde1615"
    expected = "7DA54A7A8F5567CC78B498F0106022351E557118A214180E63E7220DD2D908AF"
    assert check_value.compute_check_value(CRED, "card-payment-v2", trade_info) == expected
    assert check_value.compute_check_value(CRED, "line_pay_refund", trade_info) == expected


def test_raw_payload_profile_rejects_mapping():
    with pytest.raises(TypeError):
        check_value.compute_check_value(CRED, "wallet-refund", {"a": "b"})
    with pytest.raises(TypeError):
        check_value.compute_check_value(CRED, "card-payment", "Amt=1")


def test_unknown_profile():
    with pytest.raises(UnsupportedProfileError):
        check_value.compute_check_value(CRED, "barcode", CARD_PAYMENT)


def test_missing_field_is_named():
    params = dict(CARD_PAYMENT)
    del params["TimeStamp"]
    with pytest.raises(MissingFieldError) as exc:
        check_value.compute_check_value(CRED, "card-payment", params)
    assert exc.value.field == "TimeStamp"
    assert "TimeStamp" in str(exc.value)


def test_verify_check_value():
    good = "98CA6CB56297D659ED5FC194DD4576E0BDBEC568211CFF4AE30231DF024F80D0"
    assert check_value.verify_check_value(CRED, "card-payment", CARD_PAYMENT, good)
    assert not check_value.verify_check_value(CRED, "card-payment", CARD_PAYMENT, good.lower())
    assert not check_value.verify_check_value(CRED, "card-payment", CARD_PAYMENT, None)


def test_legacy_check_code():
    notification = {
        "Status": "SUCCESS",
        "MerchantID": "MS12345",
        "Amt": "1000",
        "MerchantOrderNo": "ORDER1",
        "TradeNo": "T123",
    }
    expected = "1EF208EFBF5B8E438C097A76FC79251C9E8BC9C9FAD1E85DBEB9DEB4CEF036B5"
    assert check_value.compute_legacy_check_code(CRED, notification) == expected
    assert check_value.verify_check_code(CRED, dict(notification, CheckCode=expected))
    assert not check_value.verify_check_code(CRED, dict(notification, CheckCode="0" * 64))
    assert not check_value.verify_check_code(CRED, notification)


def test_legacy_check_code_skips_absent_fields():
    assert check_value.compute_legacy_check_code(
        CRED, {"MerchantID": "MS12345"}
    ) == check_value.compute_legacy_check_code(CRED, {"MerchantID": "MS12345", "Foo": "bar"})


def test_sign_params_appends_merchant_and_check_value():
    params = {k: v for k, v in CARD_PAYMENT.items() if k != "MerchantID"}
    signed = check_value.sign_params(CRED, "card-payment", params)
    assert signed["MerchantID"] == "MS12345"
    assert signed["CheckValue"] == "98CA6CB56297D659ED5FC194DD4576E0BDBEC568211CFF4AE30231DF024F80D0"
    assert "CheckValue" not in params


def test_profile_generations():
    v1 = check_value.profiles_for("v1")
    v2 = check_value.profiles_for("v2")
    assert "card-payment" in v1 and "card-payment" not in v2
    assert "transaction-query" in v1 and "transaction-query" in v2
    assert check_value.get_profile("mpg20").raw_payload
