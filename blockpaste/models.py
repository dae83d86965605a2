"""
Pydantic models for pastes and their structured wire representation.
"""
import re
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

# Names are restricted to letters, digits and dots
NAME_PATTERN = r"^[A-Za-z0-9.]+$"
NAME_RE = re.compile(NAME_PATTERN)
MAX_NAME_LENGTH = 100


def is_valid_name(name: str) -> bool:
    """Check a paste name against the allowed character set and length."""
    return len(name.encode("utf-8")) <= MAX_NAME_LENGTH and NAME_RE.fullmatch(name) is not None


class Paste(BaseModel):
    """A unit of user-submitted text, optionally named."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    text: bytes = Field(b"", description="Raw paste body")
    name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        pattern=NAME_PATTERN,
        description="Optional title, [A-Za-z0-9.] only",
    )


class PasteEnvelope(BaseModel):
    """Structured storage/response format: JSON object with `name` and `text`.

    `text` is base64 so that encrypted (binary) pastes survive JSON.
    """
    model_config = ConfigDict(extra="forbid", strict=True)

    name: Optional[str] = Field(None, description="Paste name, null if unnamed")
    text: str = Field(..., description="Base64-encoded paste body")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the application healthy?")
