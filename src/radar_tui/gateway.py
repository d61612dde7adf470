from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import (
    API_BASE,
    HTTP_TIMEOUT,
    REQUEST_HEADERS,
    RETRY_ATTEMPTS,
    RETRY_BACKOFF,
)
from .datamodels import Dataset, parse_dataset

logger = logging.getLogger("radar")

NOT_JSON_MESSAGE = "API did not return JSON."


class FetchError(Exception):
    """A fetch that produced no usable dataset. The message is user-facing."""


def create_session() -> requests.Session:
    s = requests.Session()
    s.headers.update(REQUEST_HEADERS)
    # 429 is left alone so the server's rate-limit message reaches the user.
    retries = Retry(
        total=RETRY_ATTEMPTS,
        backoff_factor=RETRY_BACKOFF,
        status_forcelist=[502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


def _error_message(resp: requests.Response, data: Any) -> str:
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"HTTP {resp.status_code}"


class CandidatesGateway:
    """Fetches the candidate list from the radar API."""

    def __init__(
        self,
        api_base: str = API_BASE,
        timeout: int = HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_base = api_base
        self.timeout = timeout
        self.session = session or create_session()

    def fetch(self, top: int) -> Dataset:
        logger.debug("Fetching %s (top=%d)", self.api_base, top)
        try:
            resp = self.session.get(
                self.api_base, params={"top": str(top)}, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("Request to %s failed: %s", self.api_base, e)
            raise FetchError(str(e)) from e

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("Non-JSON response from %s (HTTP %s)", self.api_base, resp.status_code)
            raise FetchError(NOT_JSON_MESSAGE) from e

        if not resp.ok:
            message = _error_message(resp, data)
            logger.warning("API error from %s: %s", self.api_base, message)
            raise FetchError(message)

        dataset = parse_dataset(data, fetched_at=datetime.now())
        logger.debug("Fetched %d items from %s", len(dataset), self.api_base)
        return dataset
