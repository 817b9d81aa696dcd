"""Receiver for the gateway's NotifyURL callbacks.

v1 notifications carry a ``CheckCode``; v2 notifications carry an
encrypted ``TradeInfo`` signed by ``TradeSha``.
"""

import json
import logging
from typing import Any, Dict, Mapping, NamedTuple
from urllib.parse import parse_qsl

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from . import config
from .aes_codec import decode_aes_data
from .check_value import verify_check_code, verify_check_value
from .credentials import Credential, credential_from_env
from .errors import DecodeError, SpgatewayError
from .response_decoder import decode_form


class NotificationResult(NamedTuple):
    accepted: bool
    data: Dict[str, Any]


def _decode_trade_info(credential: Credential, trade_info: str) -> Dict[str, Any]:
    text = decode_aes_data(credential, trade_info)
    if text.startswith("{"):
        return json.loads(text)
    return decode_form(text)


def parse_notification_body(body: bytes) -> Dict[str, str]:
    """Decode a form-urlencoded callback body; ``+`` is a space here."""
    try:
        return dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True, strict_parsing=True))
    except ValueError as e:
        raise DecodeError(f"notification is not form-urlencoded: {e}") from e


def handle_notification(credential: Credential, fields: Mapping[str, Any]) -> NotificationResult:
    data = dict(fields)
    if "TradeInfo" in data:
        if not verify_check_value(credential, "card-payment-v2", data["TradeInfo"], data.get("TradeSha")):
            logging.warning("notify: TradeSha mismatch for merchant %s", data.get("MerchantID"))
            return NotificationResult(False, data)
        try:
            data.update(_decode_trade_info(credential, data["TradeInfo"]))
        except (SpgatewayError, ValueError) as e:
            logging.warning("notify: TradeInfo undecodable: %s", e)
            return NotificationResult(False, data)
        return NotificationResult(True, data)

    if not verify_check_code(credential, data):
        logging.warning("notify: CheckCode mismatch for order %s", data.get("MerchantOrderNo"))
        return NotificationResult(False, data)
    return NotificationResult(True, data)


def create_app(credential: Credential) -> FastAPI:
    app = FastAPI()

    @app.post("/notify")
    async def notify(req: Request):
        body: bytes = await req.body()
        try:
            fields = parse_notification_body(body)
        except DecodeError as e:
            logging.warning("notify: malformed body: %s", e)
            return PlainTextResponse("Malformed notification", status_code=400)

        try:
            result = handle_notification(credential, fields)
        except Exception as er:
            logging.exception("notify: %s", er)
            return PlainTextResponse("Internal error", status_code=500)
        if not result.accepted:
            return PlainTextResponse("Invalid check code", status_code=400)
        logging.info(
            "notify: accepted %s status=%s",
            result.data.get("MerchantOrderNo"),
            result.data.get("Status"),
        )
        return PlainTextResponse("OK")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def main():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    app = create_app(credential_from_env())
    uvicorn.run(app, host=config.NOTIFY_HOST, port=config.NOTIFY_PORT, log_level="warning")


if __name__ == "__main__":
    main()
