"""Image generation request options."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageGenerationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: Optional[str] = None
    n: int = Field(default=1, ge=1, le=10)
    size: str = "1024x1024"
    quality: Literal["standard", "hd"] = "standard"
    style: Literal["vivid", "natural"] = "vivid"
    response_format: Literal["url", "b64_json"] = "url"


__all__ = ["ImageGenerationOptions"]
