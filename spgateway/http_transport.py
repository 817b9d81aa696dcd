"""Outbound HTTP for the client façades."""

from __future__ import annotations

import logging
from typing import Mapping, NamedTuple, Optional, Protocol

import requests

from . import config

logger = logging.getLogger(__name__)


class HttpResponse(NamedTuple):
    status: int
    body: bytes


class Transport(Protocol):
    def post(self, url: str, form_fields: Mapping[str, str]) -> HttpResponse: ...


class RequestsTransport:
    """Form-encoded POSTs through ``requests``. No retries."""

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.timeout = config.HTTP_TIMEOUT if timeout is None else timeout
        self.session = session

    def post(self, url: str, form_fields: Mapping[str, str]) -> HttpResponse:
        poster = self.session.post if self.session is not None else requests.post
        logger.debug("POST %s fields=%s", url, sorted(form_fields))
        res = poster(url, data=dict(form_fields), timeout=self.timeout)
        if res.status_code >= 400:
            logger.warning("POST %s returned HTTP %s", url, res.status_code)
        return HttpResponse(status=res.status_code, body=res.content)
