"""Codec helpers turning raw panel payloads into typed models."""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..api import PanelResponseError, RemoteError
from .panel_models import (
    ActivityData,
    Envelope,
    FileData,
    GameData,
    GameDataResponse,
    ListEnvelope,
    SocketFrame,
    SocketToken,
)

_LOGGER = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

UNKNOWN_GAME_DATA_ERROR = "An unknown error occurred."


def decode_model(model_cls: type[_ModelT], raw: Any, *, what: str) -> _ModelT:
    """Validate ``raw`` against ``model_cls`` or raise :class:`PanelResponseError`."""

    try:
        return model_cls.model_validate(raw)
    except ValidationError as err:
        _LOGGER.debug("Invalid %s payload: %s", what, err)
        raise PanelResponseError(f"Unexpected {what} payload") from err


def decode_attributes(model_cls: type[_ModelT], raw: Any, *, what: str) -> _ModelT:
    """Unwrap an ``{object, attributes}`` envelope and validate its attributes."""

    envelope = decode_model(Envelope, raw, what=what)
    return decode_model(model_cls, envelope.attributes, what=what)


def decode_meta(model_cls: type[_ModelT], raw: Any, *, what: str) -> _ModelT:
    """Validate the ``meta`` block that accompanies some envelopes."""

    meta = raw.get("meta") if isinstance(raw, dict) else None
    return decode_model(model_cls, meta, what=what)


def decode_data(model_cls: type[_ModelT], raw: Any, *, what: str) -> _ModelT:
    """Validate the ``data`` member of a ``{data: {...}}`` wrapper."""

    data = raw.get("data") if isinstance(raw, dict) else None
    return decode_model(model_cls, data, what=what)


def decode_file_list(raw: Any) -> list[FileData]:
    """Return the file objects of a directory listing."""

    envelope = decode_model(ListEnvelope, raw, what="file list")
    return [
        decode_model(FileData, item.attributes, what="file object")
        for item in envelope.data or []
    ]


def decode_activity(raw: Any) -> ActivityData:
    """Flatten activity records and their actor relationship."""

    if not isinstance(raw, dict):
        raise PanelResponseError("Unexpected activity payload")
    records: list[dict[str, Any]] = []
    for item in raw.get("data") or []:
        if not isinstance(item, dict):
            continue
        attributes = dict(item.get("attributes") or {})
        relationships = attributes.pop("relationships", None) or {}
        actor = relationships.get("actor") if isinstance(relationships, dict) else None
        if isinstance(actor, dict):
            attributes["actor"] = actor.get("attributes", actor)
        records.append(attributes)
    pagination = (raw.get("meta") or {}).get("pagination") or {}
    return decode_model(
        ActivityData,
        {"data": records, "pagination": pagination},
        what="activity",
    )


def decode_game_data(raw: Any) -> GameData:
    """Return player data, raising when the panel reports ``success: false``."""

    wrapper = decode_model(GameDataResponse, raw, what="game data")
    if not wrapper.success:
        message = wrapper.data.get("error") or UNKNOWN_GAME_DATA_ERROR
        raise RemoteError(str(message), status=200, detail=str(message))
    return decode_model(GameData, wrapper.data, what="game data")


def decode_socket_token(raw: Any) -> SocketToken:
    """Return the websocket credential from ``{data: {token, socket}}``."""

    return decode_data(SocketToken, raw, what="websocket token")


def decode_frame(data: str) -> SocketFrame | None:
    """Parse a websocket text frame; ``None`` when it is not a valid frame."""

    try:
        return SocketFrame.model_validate_json(data)
    except ValidationError:
        return None


def encode_frame(frame: SocketFrame) -> str:
    """Serialise a frame to the compact JSON sent on the wire."""

    return json.dumps(frame.model_dump(), separators=(",", ":"))


def decode_stats(raw: Any) -> dict[str, Any] | None:
    """Parse the JSON object carried by a ``stats`` frame argument."""

    if not isinstance(raw, str) or not raw.startswith("{"):
        return None
    try:
        parsed = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed
