"""HTTP executor for the DataPantry query API.

One statement is one ``POST {base_url}/api/v1/query`` call::

    POST /api/v1/query
    APIkey: <api key>
    Content-Type: application/json

    {"query": "SELECT * FROM \\"Pixels\\" WHERE \\"x\\" = ?", "parameters": [3]}

A successful response carries the rows under ``result``; a failed one
carries a human-readable ``statusMessage``.  The blocking ``requests`` call
runs in a worker thread so the event loop is not held up.  Retries and
backoff are left to the caller (or to a ``requests`` adapter mounted on the
session passed in).
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

import requests

from datapantry.errors import InvalidArgumentError, RemoteQueryError
from datapantry.execute.base import Executor

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://datapantry.org"
QUERY_PATH = "/api/v1/query"
GENERIC_FAILURE = "Query failed"


class HttpExecutor(Executor):
    """Runs statements through the DataPantry HTTP API.

    Args:
        api_key: Key sent in the ``APIkey`` header.
        base_url: Service root, without the ``/api/v1/query`` path.
        timeout: Per-request timeout in seconds.
        session: Optional ``requests.Session`` to reuse (e.g. one with
            retry adapters mounted).  A private session is created when
            omitted and closed by :meth:`close`.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise InvalidArgumentError("An API key is required.", argument="api_key")
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @property
    def query_url(self) -> str:
        return f"{self.base_url}{QUERY_PATH}"

    async def execute(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._post, sql, list(params))

    def _post(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        headers = {"Content-Type": "application/json", "APIkey": self._api_key}
        body = {"query": sql, "parameters": params}
        logger.debug("POST %s query=%r params=%r", self.query_url, sql, params)

        try:
            resp = self._session.post(
                self.query_url, headers=headers, json=body, timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.warning("Request to %s failed: %s", self.query_url, exc)
            raise RemoteQueryError(f"Request to {self.query_url} failed: {exc}") from exc

        if not resp.ok:
            message = _error_message(resp)
            logger.warning("Query rejected with HTTP %s: %s", resp.status_code, message)
            raise RemoteQueryError(message, status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise RemoteQueryError(
                "Query API returned a body that is not valid JSON.",
                status_code=resp.status_code,
            ) from exc
        return _parse_result(payload, resp.status_code)

    def close(self) -> None:
        """Close the underlying session if this executor created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> HttpExecutor:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()


def _error_message(resp: requests.Response) -> str:
    """Return the remote ``statusMessage`` of a failed response, if any."""
    try:
        payload = resp.json()
    except ValueError:
        return GENERIC_FAILURE
    if isinstance(payload, dict) and payload.get("statusMessage"):
        return str(payload["statusMessage"])
    return GENERIC_FAILURE


def _parse_result(payload: Any, status_code: int) -> list[dict[str, Any]]:
    """Extract the row list from a successful response envelope."""
    if not isinstance(payload, dict):
        raise RemoteQueryError(
            f"Unexpected response envelope: {type(payload).__name__}.", status_code=status_code
        )
    result = payload.get("result")
    if result is None:
        return []
    if not isinstance(result, list):
        raise RemoteQueryError(
            f"Expected 'result' to be a list of rows, got {type(result).__name__}.",
            status_code=status_code,
        )
    return result
