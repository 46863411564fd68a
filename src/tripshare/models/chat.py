"""Chat message model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tripshare.ingestion.normalize import now_ms


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = "Guest"
    text: str = ""
    ts: int = Field(default_factory=now_ms)
    """Epoch milliseconds when the server accepted the message."""
