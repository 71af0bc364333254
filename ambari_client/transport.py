"""HTTP transport for the Ambari management API.

All requests go through one ``requests.Session`` carrying HTTP Basic
credentials. Reads are retried on connection failures and timeouts with
exponential backoff; creates, state changes and deletes are sent exactly once
so a lost response can never turn into a duplicate side effect.
"""

import logging
from typing import Any

import requests
from requests.auth import HTTPBasicAuth
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ambari_client.exceptions import NotFoundError, RemoteError, TransportError
from ambari_client.logging_config import get_logger
from ambari_client.models.config import ClientConfig
from ambari_client.models.request import RequestReceipt

logger = get_logger(__name__)

IDENTITY_HEADER = "X-Requested-By"
RETRYABLE_ERRORS = (requests.ConnectionError, requests.Timeout)


class AmbariTransport:
    """Issues requests against one Ambari server."""

    def __init__(self, config: ClientConfig, session: requests.Session | None = None):
        """Initialize the transport.

        Args:
            config: Connection settings
            session: Optional pre-built session (mainly for tests)
        """
        self.config = config
        self.session = session if session is not None else requests.Session()
        self.session.auth = HTTPBasicAuth(config.user, config.password)
        self.session.verify = config.verify_ssl

    def url_for(self, path: str) -> str:
        """Absolute URL of a path relative to the API root."""
        return self.config.base_url + path.lstrip("/")

    def get(self, url: str) -> dict[str, Any]:
        """GET a JSON document, retrying transient transport failures.

        Raises:
            NotFoundError: On 404
            RemoteError: On any other non-2xx status or a non-JSON body
            TransportError: If the server stays unreachable
        """
        retryer = Retrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            stop=stop_after_attempt(self.config.read_attempts),
            wait=wait_exponential(multiplier=self.config.retry_backoff, max=10),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            response = retryer(self._send, "GET", url)
        except RETRYABLE_ERRORS as e:
            raise self._transport_error("GET", url, e, self.config.read_attempts)
        return self._decode(response)

    def post(self, url: str) -> RequestReceipt:
        """Create the resource at ``url``."""
        return self._mutate("POST", url)

    def put(self, url: str, payload: dict[str, Any]) -> RequestReceipt:
        """Send a state-change envelope to ``url``."""
        return self._mutate("PUT", url, payload)

    def delete(self, url: str) -> RequestReceipt:
        """Delete the resource at ``url``."""
        return self._mutate("DELETE", url)

    def _mutate(
        self, method: str, url: str, payload: dict[str, Any] | None = None
    ) -> RequestReceipt:
        headers = {IDENTITY_HEADER: self.config.user}
        kwargs: dict[str, Any] = {"headers": headers}
        if payload is not None:
            kwargs["json"] = payload

        logger.info(f"{method} {url}")
        try:
            response = self._send(method, url, **kwargs)
        except RETRYABLE_ERRORS as e:
            raise self._transport_error(method, url, e, 1)

        receipt = RequestReceipt.from_response(response.status_code, self._decode(response))
        if receipt.accepted:
            logger.info(f"{method} {url} accepted as request {receipt.request_id}")
        return receipt

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug(f"Sending {method} {url}")
        response = self.session.request(method, url, timeout=self.config.timeout, **kwargs)
        logger.debug(f"{method} {url} returned {response.status_code}")

        if not 200 <= response.status_code < 300:
            raise self._remote_error(method, url, response)
        return response

    @staticmethod
    def _decode(response: requests.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            raise RemoteError(
                "Management API returned a non-JSON body",
                response.text[:200],
                method=response.request.method if response.request else None,
                url=response.url or None,
                status_code=response.status_code,
            )
        return body if isinstance(body, dict) else {"items": body}

    @staticmethod
    def _remote_error(method: str, url: str, response: requests.Response) -> RemoteError:
        details = None
        try:
            body = response.json()
            details = body.get("message") if isinstance(body, dict) else None
        except ValueError:
            pass
        if details is None and response.text:
            details = response.text[:200]

        error_cls = NotFoundError if response.status_code == 404 else RemoteError
        if response.status_code == 404:
            logger.warning(f"{method} {url}: resource not found")
        else:
            logger.error(f"{method} {url} failed with HTTP {response.status_code}: {details}")
        return error_cls(
            f"{method} {url} failed with HTTP {response.status_code}",
            details,
            method=method,
            url=url,
            status_code=response.status_code,
        )

    @staticmethod
    def _transport_error(
        method: str, url: str, error: Exception, attempts: int
    ) -> TransportError:
        kind = "timed out" if isinstance(error, requests.Timeout) else "could not connect"
        logger.error(f"{method} {url} {kind} after {attempts} attempt(s): {error}")
        return TransportError(
            f"{method} {url} {kind}",
            f"{error}\n\nCheck that the Ambari server is running and reachable, "
            "or raise the request timeout",
        )
