"""Constants for the pteropanel client."""

from __future__ import annotations

from typing import Final

# HTTP base & paths
API_BASE: Final = "https://ptero.mathost.eu"
# Assumed host of the unauthenticated server-info endpoint; override via PanelConfig.
PUBLIC_API_BASE: Final = "https://api.mathost.eu"

ACCOUNT_PATH: Final = "/api/client/account"
TWO_FACTOR_PATH: Final = "/api/client/account/two-factor"
SERVER_PATH_FMT: Final = "/api/client/servers/{server_id}"
RESOURCES_PATH_FMT: Final = "/api/client/servers/{server_id}/resources"
PLAYERS_PATH_FMT: Final = "/api/client/servers/{server_id}/players"
WEBSOCKET_PATH_FMT: Final = "/api/client/servers/{server_id}/websocket"
ACTIVITY_PATH_FMT: Final = "/api/client/servers/{server_id}/activity"
COMMAND_PATH_FMT: Final = "/api/client/servers/{server_id}/command"
POWER_PATH_FMT: Final = "/api/client/servers/{server_id}/power"
FILES_LIST_PATH_FMT: Final = "/api/client/servers/{server_id}/files/list"
FILES_CONTENTS_PATH_FMT: Final = "/api/client/servers/{server_id}/files/contents"
FILES_WRITE_PATH_FMT: Final = "/api/client/servers/{server_id}/files/write"
SETTINGS_RENAME_PATH_FMT: Final = "/api/client/servers/{server_id}/settings/rename"
SETTINGS_REINSTALL_PATH_FMT: Final = (
    "/api/client/servers/{server_id}/settings/reinstall"
)
SETTINGS_DOCKER_IMAGE_PATH_FMT: Final = (
    "/api/client/servers/{server_id}/settings/docker-image"
)
PUBLIC_SERVER_PATH_FMT: Final = "/servers/{server_id}"

USER_AGENT: Final = "pteropanel/0.4.0 (+aiohttp)"
DEFAULT_TIMEOUT: Final = 25.0

# Power signals accepted by both the REST power endpoint and the socket.
POWER_START: Final = "start"
POWER_STOP: Final = "stop"
POWER_RESTART: Final = "restart"
POWER_KILL: Final = "kill"
POWER_ACTIONS: Final = frozenset({POWER_START, POWER_STOP, POWER_RESTART, POWER_KILL})

# --- Socket frame names (panel -> client and client -> panel) ---

FRAME_AUTH: Final = "auth"
FRAME_SEND_COMMAND: Final = "send command"
FRAME_SET_STATE: Final = "set state"
FRAME_SEND_LOGS: Final = "send logs"
FRAME_SEND_STATS: Final = "send stats"
FRAME_STATS: Final = "stats"
FRAME_TOKEN_EXPIRING: Final = "token expiring"

# --- Notification names delivered to subscribers ---

EVENT_STATS: Final = "stats"
EVENT_TOKEN_EXPIRING: Final = "token_expiring"
EVENT_ERROR: Final = "error"
EVENT_CLOSE: Final = "close"

CLOSE_REASON_CALLER: Final = "closed by caller"


def normalize_event_name(event: str) -> str:
    """Return the subscriber-facing name for a raw frame event."""

    return event.replace(" ", "_")


def ensure_power_action(action: str) -> str:
    """Validate a power signal name."""

    if action not in POWER_ACTIONS:
        raise ValueError(
            f"Invalid power action: {action!r} "
            f"(expected one of {', '.join(sorted(POWER_ACTIONS))})"
        )
    return action
