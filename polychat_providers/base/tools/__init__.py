"""Tool interface, built-in tools and the name-keyed registry."""

from .base import FunctionTool, Tool, ToolFunction, TypedTool
from .image_generation import ImageGenerationArgs, ImageGenerationTool, ImageGenerator
from .registry import ToolRegistry

__all__ = [
    "Tool",
    "TypedTool",
    "FunctionTool",
    "ToolFunction",
    "ToolRegistry",
    "ImageGenerationArgs",
    "ImageGenerationTool",
    "ImageGenerator",
]
