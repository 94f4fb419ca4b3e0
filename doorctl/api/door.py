"""Door control endpoints."""

import logging

import httpx
from fastapi import APIRouter, Response

from ..digest import DigestAuthError
from ..door import DoorControlError, get_door_client
from ..models import DoorCommand, DoorControlResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/door", tags=["door"])


@router.post("/control", response_model=DoorControlResponse, response_model_exclude_none=True)
async def control_door(payload: DoorCommand, response: Response):
    """
    Send a remote control command to a door on the device.

    - doorId: door number (positive integer)
    - command: open, close, temporaryOpen or temporaryClose
    """
    try:
        door_client = get_door_client()
        result = await door_client.control_door(payload.door_id, payload.command.value)
    except (DoorControlError, DigestAuthError, httpx.HTTPError) as e:
        logger.error(f"Error controlling door {payload.door_id}: {e}")
        response.status_code = 500
        return DoorControlResponse(success=False, error="Failed to control door")

    return DoorControlResponse(success=True, result=result)
