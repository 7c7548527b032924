"""Pydantic models for panel REST and websocket payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class APIErrorDetail(BaseModel):
    """Single entry of the panel's ``errors`` array."""

    model_config = ConfigDict(extra="allow")

    code: str | None = None
    status: str | None = None
    detail: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _stringify_status(cls, value: Any) -> Any:
        """Panels disagree on whether ``status`` is a number or a string."""

        if isinstance(value, int):
            return str(value)
        return value


class APIErrorPayload(BaseModel):
    """Structured error body returned for non-2xx responses."""

    model_config = ConfigDict(extra="ignore")

    errors: list[APIErrorDetail] = Field(default_factory=list)


class Envelope(BaseModel):
    """Generic ``{object, attributes}`` wrapper used across the client API."""

    model_config = ConfigDict(extra="allow")

    object: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class ListEnvelope(BaseModel):
    """Generic ``{object, data: [...]}`` wrapper."""

    model_config = ConfigDict(extra="allow")

    object: str | None = None
    data: list[Envelope] | None = None


# ----------------- Account -----------------


class AccountData(BaseModel):
    """Attributes of ``GET /api/client/account``."""

    model_config = ConfigDict(extra="allow")

    id: int
    admin: bool = False
    username: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    language: str | None = None


class TwoFactorData(BaseModel):
    """QR payload used to enrol a TOTP device."""

    model_config = ConfigDict(extra="allow")

    image_url_data: str


class TwoFactorCodes(BaseModel):
    """Recovery tokens returned after enabling two-factor auth."""

    model_config = ConfigDict(extra="allow")

    tokens: list[str] = Field(default_factory=list)


# ----------------- Server -----------------


class SftpDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    ip: str | None = None
    port: int | None = None


class ServerLimits(BaseModel):
    model_config = ConfigDict(extra="allow")

    memory: int | None = None
    swap: int | None = None
    disk: int | None = None
    io: int | None = None
    cpu: int | None = None
    threads: str | None = None
    oom_disabled: bool | None = None


class FeatureLimits(BaseModel):
    model_config = ConfigDict(extra="allow")

    databases: int | None = None
    allocations: int | None = None
    backups: int | None = None


class ServerAllocation(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    ip: str
    ip_alias: str | None = None
    port: int
    notes: str | None = None
    is_default: bool = False


class ServerVariable(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    description: Any | None = None
    env_variable: str
    default_value: str | None = None
    server_value: str | None = None
    is_editable: bool = False
    rules: str | None = None


class ServerRelationships(BaseModel):
    """Unwrapped ``relationships`` block of a server payload."""

    model_config = ConfigDict(extra="allow")

    allocations: list[ServerAllocation] = Field(default_factory=list)
    variables: list[ServerVariable] = Field(default_factory=list)

    @field_validator("allocations", "variables", mode="before")
    @classmethod
    def _unwrap_list(cls, value: Any) -> Any:
        """Strip ``{object, data: [{object, attributes}]}`` wrappers."""

        if value is None:
            return []
        if isinstance(value, dict):
            value = value.get("data") or []
        if not isinstance(value, list):
            return value
        return [
            item.get("attributes", item) if isinstance(item, dict) else item
            for item in value
        ]


class ServerData(BaseModel):
    """Attributes of ``GET /api/client/servers/{id}``."""

    model_config = ConfigDict(extra="allow")

    server_owner: bool = False
    identifier: str
    internal_id: int | None = None
    uuid: str
    name: str
    node: str | None = None
    sftp_details: SftpDetails | None = None
    limits: ServerLimits | None = None
    invocation: str | None = None
    docker_image: str | None = None
    egg_features: list[str] | None = None
    feature_limits: FeatureLimits | None = None
    custom_text: str | None = None
    status: str | None = None
    is_suspended: bool = False
    is_installing: bool = False
    is_transferring: bool | None = None
    nest_id: int | None = None
    egg_id: int | None = None
    relationships: ServerRelationships = Field(default_factory=ServerRelationships)


class ServerAccountData(BaseModel):
    """``meta`` block describing the caller's rights on a server."""

    model_config = ConfigDict(extra="allow")

    is_server_owner: bool = False
    user_permissions: list[str] = Field(default_factory=list)


class ServerResources(BaseModel):
    model_config = ConfigDict(extra="allow")

    memory_bytes: int = 0
    cpu_absolute: float = 0.0
    disk_bytes: int = 0
    network_rx_bytes: int = 0
    network_tx_bytes: int = 0
    uptime: int = 0


class StatusData(BaseModel):
    """Attributes of ``GET /api/client/servers/{id}/resources``."""

    model_config = ConfigDict(extra="allow")

    current_state: str
    is_suspended: bool = False
    resources: ServerResources = Field(default_factory=ServerResources)


# ----------------- Activity -----------------


class ActivityActor(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    uuid: str | None = None
    username: str | None = None
    email: str | None = None
    image: str | None = None
    two_factor_enabled: bool | None = Field(default=None, alias="2fa_enabled")
    created_at: str | None = None


class ActivityRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    batch: str | None = None
    event: str
    is_api: bool = False
    ip: str | None = None
    description: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    has_additional_meta: bool = False
    timestamp: str
    actor: ActivityActor | None = None


class PaginationLinks(BaseModel):
    model_config = ConfigDict(extra="allow")

    previous: str | None = None
    next: str | None = None


class Pagination(BaseModel):
    model_config = ConfigDict(extra="allow")

    total: int = 0
    count: int = 0
    per_page: int = 0
    current_page: int = 1
    total_pages: int = 1
    links: PaginationLinks = Field(default_factory=PaginationLinks)


class ActivityData(BaseModel):
    """Activity log page with its pagination metadata."""

    model_config = ConfigDict(extra="allow")

    data: list[ActivityRecord] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


# ----------------- Files -----------------


class FileData(BaseModel):
    """Attributes of one ``file_object`` from the directory listing."""

    model_config = ConfigDict(extra="allow")

    name: str
    mode: str | None = None
    size: int = 0
    is_file: bool = True
    is_symlink: bool = False
    is_editable: bool = False
    mimetype: str | None = None
    created_at: str | None = None
    modified_at: str | None = None


# ----------------- Game / public data -----------------


class GameData(BaseModel):
    """Live player data; the ``info`` block is game specific."""

    model_config = ConfigDict(extra="allow")

    info: dict[str, Any] = Field(default_factory=dict)
    players: list[dict[str, Any]] = Field(default_factory=list)
    online_players: int | str | None = None
    max_players: int | str | None = None


class GameDataResponse(BaseModel):
    """``{success, data}`` wrapper of the players endpoint."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    data: dict[str, Any] = Field(default_factory=dict)


class PublicServerData(BaseModel):
    """Unauthenticated server summary served from the public host."""

    model_config = ConfigDict(extra="allow")


# ----------------- Websocket -----------------


class SocketToken(BaseModel):
    """One-time websocket credential and the endpoint it is valid for."""

    model_config = ConfigDict(extra="ignore")

    token: str
    socket: str


class SocketFrame(BaseModel):
    """Single ``{event, args}`` websocket message."""

    model_config = ConfigDict(extra="ignore")

    event: str
    args: list[Any] = Field(default_factory=list)

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, value: Any) -> Any:
        """Treat a missing or null ``args`` as an empty list."""

        if value is None:
            return []
        return value
