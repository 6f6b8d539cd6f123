"""Metrics models for imageedit."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class EditMetrics(BaseModel):
    """Tracking data for a single image edit call."""

    duration_ms: int = Field(..., ge=0, description="Total call time in milliseconds")
    image_bytes: int = Field(..., ge=0, description="Size of the decoded output image")
    deployment: Optional[str] = Field(None, description="Azure OpenAI deployment used")
    timestamp: Optional[datetime] = Field(None, description="When the edit completed (UTC)")
    input: Optional[str] = Field(None, description="Input parameters as JSON string (for observability)")

    @property
    def size_mb(self) -> float:
        return self.image_bytes / (1024 * 1024)
