"""Pydantic DTOs crossing the package boundary."""

from .completion_options import CompletionOptions, ToolDefinition
from .image_generation import ImageGenerationOptions
from .provider_settings import ModelSettings, ProviderSettings
from .tool_result import ToolResultDTO

__all__ = [
    "CompletionOptions",
    "ToolDefinition",
    "ImageGenerationOptions",
    "ModelSettings",
    "ProviderSettings",
    "ToolResultDTO",
]
