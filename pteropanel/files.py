"""File manager endpoints of the panel client API."""

from __future__ import annotations

import logging

from .codecs.panel_codec import decode_file_list
from .codecs.panel_models import FileData
from .const import FILES_CONTENTS_PATH_FMT, FILES_LIST_PATH_FMT, FILES_WRITE_PATH_FMT
from .server import ServerScopedClient

_LOGGER = logging.getLogger(__name__)


class PanelFileManager(ServerScopedClient):
    """List, read and write files of a server."""

    async def get_files(self, directory: str | None = None) -> list[FileData]:
        """Return the entries of ``directory`` (the server root by default)."""
        params = {"directory": directory} if directory else None
        data = await self._request("GET", self._path(FILES_LIST_PATH_FMT), params=params)
        return decode_file_list(data)

    async def get_file(self, path: str) -> str:
        """Return the raw contents of the file at ``path``."""
        if not path:
            raise ValueError("path must be a non-empty string")
        return await self._request(
            "GET",
            self._path(FILES_CONTENTS_PATH_FMT),
            params={"file": path},
            raw=True,
        )

    async def write_file(self, path: str, content: str = "") -> bool:
        """Create or overwrite the file at ``path`` with ``content``."""
        if not path:
            raise ValueError("path must be a non-empty string")
        await self._request(
            "POST",
            self._path(FILES_WRITE_PATH_FMT),
            params={"file": path},
            data=content,
        )
        _LOGGER.debug("Wrote %d characters to %s", len(content), path)
        return True
