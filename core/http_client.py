"""Process-wide ``requests`` session shared by the geocoding and forecast calls."""

from __future__ import annotations

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from app.config import get_http_timeout, get_user_agent

logger = logging.getLogger(__name__)

_session = requests.Session()
_session.headers.update({
    "User-Agent": get_user_agent(),
    "Accept": "application/json",
})
# Each lookup makes exactly one attempt per upstream call.
_session.mount("https://", HTTPAdapter(max_retries=0))
_session.mount("http://", HTTPAdapter(max_retries=0))


def http_get(url: str, *, timeout: Optional[float] = None, **kwargs) -> requests.Response:
    # Wrapper around session.get with the configured timeout
    kwargs["timeout"] = timeout if timeout is not None else get_http_timeout()
    logger.debug("GET %s params=%s", url, kwargs.get("params"))
    return _session.get(url, **kwargs)
