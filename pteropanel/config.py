"""Client configuration for the pteropanel wrappers.

A :class:`PanelConfig` is immutable once created. Every wrapper accepts one
and falls back to :data:`DEFAULT_CONFIG`, which targets the MatHost panel.

    config = PanelConfig(api_base="https://panel.example.com")
    server = PanelServer(session, "1a2b3c4d", config=config)
"""

from __future__ import annotations

from dataclasses import dataclass

from .const import API_BASE, DEFAULT_TIMEOUT, PUBLIC_API_BASE, USER_AGENT


@dataclass(frozen=True)
class PanelConfig:
    """Immutable connection settings shared by REST wrappers and sockets.

    Attributes:
        api_base: Panel URL without a trailing slash.
        public_api_base: Host serving the unauthenticated server-info endpoint.
        origin: ``Origin`` header sent on the websocket upgrade. Defaults to
            ``api_base``.
        timeout: Total per-request timeout in seconds.
        user_agent: ``User-Agent`` header for REST calls and the socket.
    """

    api_base: str = API_BASE
    public_api_base: str = PUBLIC_API_BASE
    origin: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        """Validate and normalise the configured values.

        Raises:
            ValueError: If a URL is empty or the timeout is not positive.
        """
        if not self.api_base:
            raise ValueError("api_base cannot be empty")
        if not self.public_api_base:
            raise ValueError("public_api_base cannot be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be a positive number")

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "api_base", self.api_base.rstrip("/"))
        object.__setattr__(self, "public_api_base", self.public_api_base.rstrip("/"))
        origin = (self.origin or self.api_base).rstrip("/")
        object.__setattr__(self, "origin", origin)

    @property
    def web_origin(self) -> str:
        """Return the resolved websocket ``Origin`` header value."""

        return self.origin or self.api_base


DEFAULT_CONFIG = PanelConfig()
