"""Server settings endpoints of the panel client API."""

from __future__ import annotations

from .const import (
    SETTINGS_DOCKER_IMAGE_PATH_FMT,
    SETTINGS_REINSTALL_PATH_FMT,
    SETTINGS_RENAME_PATH_FMT,
)
from .server import ServerScopedClient


class PanelSettingsManager(ServerScopedClient):
    """Rename, reinstall or retarget the Docker image of a server."""

    async def rename_server(self, name: str) -> bool:
        """Change the display name of the server."""
        if not name or not name.strip():
            raise ValueError("name must be a non-empty string")
        await self._request(
            "POST", self._path(SETTINGS_RENAME_PATH_FMT), payload={"name": name}
        )
        return True

    async def reinstall_server(self) -> bool:
        """Trigger a reinstall of the server."""
        await self._request("POST", self._path(SETTINGS_REINSTALL_PATH_FMT))
        return True

    async def set_docker_image(self, docker_image: str) -> bool:
        """Switch the server to one of the egg's allowed Docker images.

        Sent as ``PUT``, which is how the Pterodactyl client API routes this
        path. Earlier clients of this panel sent ``POST``.
        """
        if not docker_image:
            raise ValueError("docker_image must be a non-empty string")
        await self._request(
            "PUT",
            self._path(SETTINGS_DOCKER_IMAGE_PATH_FMT),
            payload={"docker_image": docker_image},
        )
        return True
