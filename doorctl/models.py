"""Pydantic models for door control requests."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DoorCommandType(str, Enum):
    """Remote control commands accepted by the device."""
    OPEN = "open"
    CLOSE = "close"
    TEMPORARY_OPEN = "temporaryOpen"
    TEMPORARY_CLOSE = "temporaryClose"


class DoorCommand(BaseModel):
    """Door control request body."""

    model_config = ConfigDict(populate_by_name=True)

    door_id: int = Field(..., alias="doorId", gt=0, description="Door number on the device")
    command: DoorCommandType = Field(..., description="Remote control command")


class DoorControlResponse(BaseModel):
    """Response model for door control operations."""

    success: bool = Field(..., description="Whether the device accepted the command")
    result: Optional[str] = Field(None, description="Device response body")
    error: Optional[Any] = Field(None, description="Error details")
