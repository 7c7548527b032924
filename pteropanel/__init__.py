"""Async client for a Pterodactyl-based game panel's client API and console socket."""

from __future__ import annotations

from .account import PanelAccount
from .api import (
    NotFoundError,
    PanelError,
    PanelResponseError,
    PanelRESTClient,
    RemoteError,
    ServerError,
)
from .backend.panel_ws import NotConnectedError, PanelSocket, TokenUnavailableError
from .backend.ws_client import SocketState, WSStats
from .codecs.panel_models import (
    AccountData,
    ActivityData,
    FileData,
    GameData,
    PublicServerData,
    ServerAccountData,
    ServerData,
    SocketFrame,
    SocketToken,
    StatusData,
    TwoFactorCodes,
    TwoFactorData,
)
from .config import DEFAULT_CONFIG, PanelConfig
from .files import PanelFileManager
from .server import PanelServer
from .settings import PanelSettingsManager

__version__ = "0.4.0"

__all__ = [
    "DEFAULT_CONFIG",
    "AccountData",
    "ActivityData",
    "FileData",
    "GameData",
    "NotConnectedError",
    "NotFoundError",
    "PanelAccount",
    "PanelConfig",
    "PanelError",
    "PanelFileManager",
    "PanelRESTClient",
    "PanelResponseError",
    "PanelServer",
    "PanelSettingsManager",
    "PanelSocket",
    "PublicServerData",
    "RemoteError",
    "ServerAccountData",
    "ServerData",
    "ServerError",
    "SocketFrame",
    "SocketState",
    "SocketToken",
    "StatusData",
    "TokenUnavailableError",
    "TwoFactorCodes",
    "TwoFactorData",
    "WSStats",
    "__version__",
]
