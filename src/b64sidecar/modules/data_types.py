"""
Data types for the sidecar request/response exchange.

Both models are transient: built from stdin, used once, and discarded when
the process exits.
"""

import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class SidecarRequest(BaseModel):
    """Request read from stdin."""

    model_config = ConfigDict(extra="ignore")

    action: StrictStr = Field(default="", description="Name of the action to run")
    data: StrictStr = Field(
        default="",
        description="Operand: raw text for encode, base64 text for decode",
    )

    @field_validator("action", "data", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        # JSON null reads as an empty string
        return "" if value is None else value


class SidecarResponse(BaseModel):
    """Response written to stdout."""

    success: bool = Field(description="Whether the action completed successfully")
    result: Optional[str] = Field(default=None, description="Action result")
    error: Optional[str] = Field(default=None, description="Error message if failed")

    @classmethod
    def ok(cls, result: str) -> "SidecarResponse":
        return cls(success=True, result=result)

    @classmethod
    def fail(cls, error: str) -> "SidecarResponse":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        """Serializable form with the unused field left out."""
        if self.success:
            return {"success": True, "result": self.result or ""}
        return {"success": False, "error": self.error or ""}

    def to_json(self) -> str:
        """Compact JSON text, without the trailing newline."""
        return json.dumps(self.to_dict(), separators=(",", ":"))
