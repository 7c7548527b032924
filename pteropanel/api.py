"""Shared REST plumbing for the panel client API."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
import json
import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from .backend.sanitize import redact_text
from .codecs.panel_models import APIErrorPayload
from .config import DEFAULT_CONFIG, PanelConfig

_LOGGER = logging.getLogger(__name__)

# Toggle to preview bodies in debug logs (redacted). Leave False by default.
API_LOG_PREVIEW = False

NOT_FOUND_MESSAGE = "The requested resource could not be found."
SERVER_ERROR_MESSAGE = "An internal server error occurred."


class PanelError(Exception):
    """Base class for every error raised by the client."""


class RemoteError(PanelError):
    """The panel rejected a request with a status other than 404 or 500."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        detail: str | None = None,
        code: str | None = None,
    ) -> None:
        """Store the HTTP status and the first error entry of the payload."""

        super().__init__(message)
        self.status = status
        self.detail = detail if detail is not None else message
        self.code = code


class NotFoundError(PanelError):
    """HTTP 404 from the panel.

    Not a :class:`RemoteError`; ``except RemoteError`` does not catch it.
    """

    status = 404

    def __init__(self, message: str = NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)


class ServerError(PanelError):
    """HTTP 500 from the panel.

    Not a :class:`RemoteError`; ``except RemoteError`` does not catch it.
    """

    status = 500

    def __init__(self, message: str = SERVER_ERROR_MESSAGE) -> None:
        super().__init__(message)


class PanelResponseError(PanelError):
    """A successful response carried a body of an unexpected shape."""


class PanelRESTClient:
    """Bearer-token holder sharing one request helper across wrappers."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str | None = None,
        *,
        config: PanelConfig | None = None,
    ) -> None:
        """Initialise the client with a caller-owned aiohttp session."""
        self._session = session
        self._config = config or DEFAULT_CONFIG
        self._api_key: str | None = api_key or None

    @property
    def config(self) -> PanelConfig:
        """Return the connection settings used by this client."""

        return self._config

    @property
    def session(self) -> aiohttp.ClientSession:
        """Expose the HTTP session for auxiliary clients (e.g. sockets)."""

        return self._session

    @property
    def is_authorized(self) -> bool:
        """Return True when an API key is configured."""

        return bool(self._api_key)

    # ----------------- Credentials -----------------

    def authorize(self, api_key: str) -> None:
        """Use ``api_key`` as the bearer token for subsequent requests."""

        if not api_key:
            raise ValueError("api_key must be a non-empty string")
        self._api_key = api_key

    def unauthorize(self) -> None:
        """Forget the stored API key."""

        self._api_key = None

    def _share_credentials(self, other: PanelRESTClient) -> None:
        """Copy this client's API key onto ``other`` when one is set."""

        if self._api_key:
            other._api_key = self._api_key

    def _headers(self, *, json_body: bool = True, authed: bool = True) -> dict[str, str]:
        """Return request headers including the bearer token when required."""

        headers = {
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }
        if json_body:
            headers["Content-Type"] = "application/json"
        if authed:
            headers["Authorization"] = f"Bearer {self._api_key or ''}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        payload: Any = None,
        data: str | bytes | None = None,
        authed: bool = True,
        raw: bool = False,
    ) -> Any:
        """Perform one HTTP call and map its status code.

        2xx bodies are returned as parsed JSON (``raw=True`` returns text and
        204 returns ``True``). 404 raises :class:`NotFoundError`, 500 raises
        :class:`ServerError` and any other failure status raises
        :class:`RemoteError` carrying the first ``errors[].detail`` of the
        body. Transport errors propagate unchanged. Errors are logged WITHOUT
        secrets.
        """
        if authed and not self._api_key:
            _LOGGER.debug("HTTP %s %s without an API key", method, path)

        url = path if path.startswith("http") else f"{self._config.api_base}{path}"
        headers = self._headers(json_body=data is None, authed=authed)
        timeout = aiohttp.ClientTimeout(total=self._config.timeout)
        _LOGGER.debug("HTTP %s %s", method, url)

        try:
            async with self._session.request(
                method,
                url,
                headers=headers,
                params=params,
                json=payload,
                data=data,
                timeout=timeout,
            ) as resp:
                status = resp.status
                ctype = resp.headers.get("Content-Type", "")
                try:
                    body_text = await resp.text()
                except (aiohttp.ClientError, UnicodeDecodeError):
                    body_text = "<no body>"

                if status >= 400:
                    # Log a compact, redacted error; do not log repr(RequestInfo) which includes headers.
                    log_fn = _LOGGER.debug if status == 404 else _LOGGER.error
                    log_fn(
                        "HTTP error %s %s -> %s; body=%s",
                        method,
                        url,
                        status,
                        redact_text(body_text),
                    )
                elif API_LOG_PREVIEW:
                    _LOGGER.debug(
                        "HTTP %s -> %s, ctype=%s, body[0:200]=%r",
                        url,
                        status,
                        ctype,
                        (redact_text(body_text) or "")[:200],
                    )
                else:
                    _LOGGER.debug("HTTP %s -> %s, ctype=%s", url, status, ctype)

                if 200 <= status < 300:
                    return self._success_body(status, body_text, raw=raw)
                if status == 404:
                    raise NotFoundError()
                if status == 500:
                    raise ServerError()
                raise self._remote_error(status, body_text)
        except PanelError:
            raise
        except asyncio.CancelledError:
            raise
        except (aiohttp.ClientError, TimeoutError) as err:
            _LOGGER.error(
                "Request %s %s failed (sanitized): %s",
                method,
                url,
                redact_text(str(err)),
            )
            raise

    @staticmethod
    def _success_body(status: int, body_text: str, *, raw: bool) -> Any:
        """Return the parsed body of a 2xx response."""

        if status == 204:
            return True
        if raw:
            return body_text
        if not body_text:
            return None
        try:
            return json.loads(body_text)
        except ValueError as err:
            raise PanelResponseError("Response body is not valid JSON") from err

    @staticmethod
    def _remote_error(status: int, body_text: str) -> RemoteError:
        """Build a :class:`RemoteError` from a structured error body."""

        try:
            payload = APIErrorPayload.model_validate_json(body_text or "{}")
        except ValidationError:
            payload = None
        if payload is None or not payload.errors:
            message = f"Request failed with status {status}"
            return RemoteError(message, status=status, detail=redact_text(body_text) or message)
        first = payload.errors[0]
        detail = first.detail or f"Request failed with status {status}"
        return RemoteError(detail, status=status, detail=detail, code=first.code)
