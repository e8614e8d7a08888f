"""Built-in ``generate_image`` tool.

Routes model-initiated image requests to the provider's
``get_image_generation``. Its argument schema is the pydantic model below, so
the definition advertised to the backend and the validation applied on
execution cannot drift apart.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from ..constants import IMAGE_GENERATION_TOOL_NAME
from ..dto.image_generation import ImageGenerationOptions
from .base import TypedTool

ImageGenerator = Callable[[str, Optional[ImageGenerationOptions]], Awaitable[List[str]]]


class ImageGenerationArgs(BaseModel):
    prompt: str = Field(min_length=1, description="Description of the image to generate.")
    size: Optional[str] = Field(default=None, description="Image size such as 1024x1024.")
    n: Optional[int] = Field(default=None, ge=1, le=10, description="Number of images.")


class ImageGenerationTool(TypedTool[ImageGenerationArgs]):
    name = IMAGE_GENERATION_TOOL_NAME
    description = "Generate images from a text prompt."
    args_model = ImageGenerationArgs

    def __init__(self, generator: ImageGenerator) -> None:
        self._generator = generator

    async def run(self, args: ImageGenerationArgs) -> Dict[str, Any]:
        overrides = args.model_dump(exclude={"prompt"}, exclude_none=True)
        options = ImageGenerationOptions(**overrides) if overrides else None
        images = await self._generator(args.prompt, options)
        return {"images": list(images)}


__all__ = ["ImageGenerationArgs", "ImageGenerationTool", "ImageGenerator"]
