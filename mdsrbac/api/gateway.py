"""HTTP access to the metadata service security API."""

from __future__ import annotations

import logging
from urllib.parse import quote, urlparse

import httpx

from mdsrbac.api.errors import TransportError
from mdsrbac.api.session import AuthSession

logger = logging.getLogger(__name__)

API_PREFIX = "/security/1.0/"

_POST_OK = (200, 299)


def path_segment(value: str) -> str:
    """Percent-encode one URL path segment.

    Principals such as ``User:CN=a/OU=b`` keep their ``:`` ``=`` and ``,``;
    ``/`` ``#`` ``?`` and the rest are escaped so they cannot change the endpoint.
    """
    return quote(value, safe=":=,")


def _validate_server_url(url: str) -> str:
    """Reject URLs that are not plain http(s) or that carry CRLF sequences."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"MDS server url must be http(s), got {url!r}")
    if "\r" in url or "\n" in url:
        raise ValueError("CRLF injection detected in MDS server url")
    if not parsed.hostname:
        raise ValueError(f"MDS server url has no host: {url!r}")
    return url.rstrip("/")


class ApiGateway:
    """Issues GET/POST/DELETE calls carrying the session's Basic credential.

    A client connection is opened and closed for each call. ``timeout`` is
    passed straight to httpx; ``None`` means a call waits for as long as the
    server takes. No call is ever retried.
    """

    def __init__(
        self,
        server: str,
        session: AuthSession,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.server = _validate_server_url(server)
        self.session = session
        self.timeout = timeout
        self._transport = transport

    def url_for(self, path: str) -> str:
        return f"{self.server}{API_PREFIX}{path.lstrip('/')}"

    def _headers(self, with_body: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Authorization": self.session.authorization_header(),
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _execute(
        self,
        method: str,
        path: str,
        ok: tuple[int, int],
        body: str | None = None,
    ) -> str:
        url = self.url_for(path)
        description = f"{method} {url}"
        headers = self._headers(with_body=body is not None)
        logger.debug("%s.request: %s", method, url)
        if body is not None:
            logger.debug("%s.entity: %s", method, body)

        try:
            with httpx.Client(transport=self._transport, timeout=self.timeout) as client:
                response = client.request(method, url, headers=headers, content=body)
        except httpx.HTTPError as e:
            logger.error("%s failed: %s", description, e)
            raise TransportError(description) from e

        logger.debug("%s.response: %s", method, response.status_code)
        low, high = ok
        if not low <= response.status_code <= high:
            logger.error("%s answered %s: %s", description, response.status_code, response.text)
            raise TransportError(description, status=response.status_code, body=response.text)
        return response.text

    def get(self, path: str, ok: tuple[int, int] = (200, 204)) -> str:
        return self._execute("GET", path, ok)

    def post(self, path: str, body: str) -> str:
        return self._execute("POST", path, _POST_OK, body)

    def delete(self, path: str, body: str) -> str:
        return self._execute("DELETE", path, _POST_OK, body)
