"""Server endpoints of the panel client API."""

from __future__ import annotations

import logging

import aiohttp

from .api import PanelRESTClient
from .backend.sanitize import mask_identifier
from .codecs.panel_codec import (
    decode_activity,
    decode_attributes,
    decode_game_data,
    decode_meta,
    decode_model,
    decode_socket_token,
)
from .codecs.panel_models import (
    ActivityData,
    GameData,
    PublicServerData,
    ServerAccountData,
    ServerData,
    SocketToken,
    StatusData,
)
from .config import PanelConfig
from .const import (
    ACTIVITY_PATH_FMT,
    COMMAND_PATH_FMT,
    PLAYERS_PATH_FMT,
    POWER_PATH_FMT,
    PUBLIC_SERVER_PATH_FMT,
    RESOURCES_PATH_FMT,
    SERVER_PATH_FMT,
    WEBSOCKET_PATH_FMT,
    ensure_power_action,
)

_LOGGER = logging.getLogger(__name__)


class PanelServer(PanelRESTClient):
    """Client for a single server identified by its short identifier."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        server_id: str,
        api_key: str | None = None,
        *,
        config: PanelConfig | None = None,
    ) -> None:
        """Bind the client to ``server_id``."""
        if not server_id:
            raise ValueError("server_id must be a non-empty string")
        super().__init__(session, api_key, config=config)
        self._server_id = server_id

    @property
    def server_id(self) -> str:
        """Return the short server identifier."""

        return self._server_id

    def _path(self, fmt: str) -> str:
        return fmt.format(server_id=self._server_id)

    async def get_server_data(self) -> ServerData:
        """Return the server's configuration and relationships."""
        data = await self._request("GET", self._path(SERVER_PATH_FMT))
        return decode_attributes(ServerData, data, what="server")

    async def get_account_data(self) -> ServerAccountData:
        """Return the caller's ownership flag and permissions on the server."""
        data = await self._request("GET", self._path(SERVER_PATH_FMT))
        return decode_meta(ServerAccountData, data, what="server account")

    async def get_status_data(self) -> StatusData:
        """Return the current power state and resource usage."""
        data = await self._request("GET", self._path(RESOURCES_PATH_FMT))
        return decode_attributes(StatusData, data, what="resources")

    async def get_game_data(self) -> GameData:
        """Return live player information reported by the game query."""
        data = await self._request("GET", self._path(PLAYERS_PATH_FMT))
        return decode_game_data(data)

    async def get_public_data(self) -> PublicServerData:
        """Return the unauthenticated server summary from the public host.

        The default host (``PUBLIC_API_BASE``) is assumed, not documented by
        the panel; set ``PanelConfig.public_api_base`` if it differs.
        """
        url = f"{self._config.public_api_base}{self._path(PUBLIC_SERVER_PATH_FMT)}"
        data = await self._request("GET", url, authed=False)
        return decode_model(PublicServerData, data, what="public server")

    async def get_socket_token(self) -> SocketToken:
        """Issue a one-time websocket token and its endpoint."""
        data = await self._request("GET", self._path(WEBSOCKET_PATH_FMT))
        token = decode_socket_token(data)
        _LOGGER.debug(
            "Socket token issued for server %s", mask_identifier(self._server_id)
        )
        return token

    async def get_activity_data(self) -> ActivityData:
        """Return the first page of the server activity log."""
        data = await self._request("GET", self._path(ACTIVITY_PATH_FMT))
        return decode_activity(data)

    async def send_command(self, command: str) -> bool:
        """Send a console command through the REST API."""
        await self._request(
            "POST", self._path(COMMAND_PATH_FMT), payload={"command": command}
        )
        return True

    async def change_state(self, state: str) -> bool:
        """Send a power signal (start, stop, restart or kill)."""
        signal = ensure_power_action(state)
        await self._request("POST", self._path(POWER_PATH_FMT), payload={"signal": signal})
        _LOGGER.debug(
            "Power signal %s sent to server %s", signal, mask_identifier(self._server_id)
        )
        return True


class ServerScopedClient(PanelRESTClient):
    """Base for managers operating on the server of a :class:`PanelServer`.

    The manager shares the server's HTTP session and configuration and starts
    with the server's API key unless ``api_key`` is given explicitly.
    """

    def __init__(self, server: PanelServer, api_key: str | None = None) -> None:
        """Attach the manager to ``server``."""
        super().__init__(server.session, api_key, config=server.config)
        if not api_key:
            server._share_credentials(self)
        self._server = server

    @property
    def server(self) -> PanelServer:
        """Return the server this manager operates on."""

        return self._server

    def _path(self, fmt: str) -> str:
        return fmt.format(server_id=self._server.server_id)
