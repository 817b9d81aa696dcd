"""Shared plumbing for the gateway client façades."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional

from .canonical import require_fields
from .credentials import Credential, credential_from_options
from .errors import MissingFieldError, UnsupportedTypeError
from .http_transport import HttpResponse, RequestsTransport, Transport

logger = logging.getLogger(__name__)


def endpoints(test: str, production: str) -> Dict[str, str]:
    return {"test": test, "production": production}


def timestamp() -> int:
    return int(time.time())


def merge_params(defaults: Mapping[str, Any], params: Mapping[str, Any]) -> Dict[str, Any]:
    """``defaults`` overridden by ``params``, with ``None`` values dropped."""
    merged = dict(defaults)
    merged.update(params)
    return {k: v for k, v in merged.items() if v is not None}


def require_order_reference(params: Mapping[str, Any]) -> None:
    if params.get("MerchantOrderNo") is None and params.get("TradeNo") is None:
        raise MissingFieldError(
            "MerchantOrderNo",
            "One of the following param is required: MerchantOrderNo, TradeNo",
        )


class BaseClient:
    """Credential, endpoint table and transport shared by every façade.

    ``options`` holds ``mode``, ``merchant_id``, ``hash_key`` and
    ``hash_iv``; keyword arguments override it. A bad credential raises at
    construction time.
    """

    ENDPOINTS: Dict[str, Dict[str, str]] = {}

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        transport: Optional[Transport] = None,
        **kwargs,
    ):
        self.credential: Credential = credential_from_options(options, **kwargs)
        self.transport = transport if transport is not None else RequestsTransport()

    @property
    def mode(self) -> str:
        return self.credential.mode

    @property
    def merchant_id(self) -> str:
        return self.credential.merchant_id

    def api_url_for(self, api_type: str) -> str:
        table = self.ENDPOINTS.get(api_type)
        if table is None:
            raise UnsupportedTypeError(api_type)
        return table[self.mode]

    def _post(self, api_type: str, fields: Mapping[str, Any]) -> HttpResponse:
        url = self.api_url_for(api_type)
        logger.info("%s %s request to %s", type(self).__name__, api_type, url)
        return self.transport.post(url, {k: str(v) for k, v in fields.items()})

    @staticmethod
    def _require(params: Mapping[str, Any], *fields: str) -> None:
        require_fields(params, fields)
