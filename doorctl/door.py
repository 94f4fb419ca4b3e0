"""Door control commands for the access-control device."""

import logging
from typing import Optional
from xml.sax.saxutils import escape

import httpx

from .config import get_settings
from .digest import DigestAuthClient

logger = logging.getLogger(__name__)


class DoorControlError(Exception):
    """Door control operation error."""
    pass


class ConfigurationError(DoorControlError):
    """Device URL or credentials are not configured."""
    pass


class DoorCommandError(DoorControlError):
    """Device rejected a door command."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


def build_door_command(command: str) -> str:
    """Build RemoteControlDoor XML body."""
    return f"<RemoteControlDoor><cmd>{escape(command)}</cmd></RemoteControlDoor>"


class DoorControlClient:
    """Sends remote control commands to the device over Digest auth."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        probe_timeout: float = 5.0,
        request_timeout: float = 10.0,
        max_nonce_count: int = 9999,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        # One long-lived auth client so the challenge is reused across commands
        self._auth_client = DigestAuthClient(
            username=username,
            password=password,
            base_url=self.base_url,
            probe_timeout=probe_timeout,
            request_timeout=request_timeout,
            max_nonce_count=max_nonce_count,
            transport=transport,
        )

    @property
    def auth_client(self) -> DigestAuthClient:
        return self._auth_client

    def door_url(self, door_id: int) -> str:
        """URL of the remote control resource for a door."""
        return f"{self.base_url}/AccessControl/RemoteControl/door/{door_id}"

    async def control_door(self, door_id: int, command: str) -> str:
        """
        Send a remote control command to a door.

        Returns the device response body. Raises DoorCommandError on a
        non-2xx response; a 401 also clears the cached challenge.
        """
        response = await self._auth_client.request(
            "PUT",
            self.door_url(door_id),
            content=build_door_command(command),
            headers={"Content-Type": "application/xml"},
        )

        if not response.is_success:
            logger.warning(f"Door {door_id} command '{command}' rejected with {response.status_code}")
            raise DoorCommandError(
                response.status_code,
                f"Device returned {response.status_code} for door {door_id}",
            )

        logger.info(f"Door {door_id} command '{command}' accepted")
        return response.text

    async def aclose(self) -> None:
        await self._auth_client.aclose()


# Global door client instance
_door_client: Optional[DoorControlClient] = None


def get_door_client() -> DoorControlClient:
    """Get door client instance built from settings."""
    global _door_client
    if _door_client is None:
        settings = get_settings()
        if not settings.device_configured:
            raise ConfigurationError("Missing required environment variables")
        _door_client = DoorControlClient(
            base_url=settings.get_base_url(),
            username=settings.username,
            password=settings.password,
            probe_timeout=settings.probe_timeout,
            request_timeout=settings.request_timeout,
            max_nonce_count=settings.max_nonce_count,
        )
    return _door_client


async def close_door_client() -> None:
    """Close and forget the global door client."""
    global _door_client
    if _door_client is not None:
        await _door_client.aclose()
        _door_client = None
