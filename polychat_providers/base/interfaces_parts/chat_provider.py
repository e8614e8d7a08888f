"""ChatProvider Protocol (single-class module).

The contract every backend integration satisfies; callers (registry, UI
orchestration) depend on this, never on concrete provider classes.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional, Protocol, runtime_checkable

from ..capabilities import Capability
from ..dto.completion_options import CompletionOptions
from ..dto.image_generation import ImageGenerationOptions
from ..models import Message, ModelInfo, RateLimitInfo
from ..streaming.stream_controller import StreamControlHandler
from ..tools import ToolRegistry


@runtime_checkable
class ChatProvider(Protocol):
    """Uniform chat-completion contract across backends."""

    @property
    def id(self) -> str:
        """Stable identity; registry key and error-message prefix."""
        ...

    @property
    def name(self) -> str:
        """Display name."""
        ...

    @property
    def available_models(self) -> List[ModelInfo]:
        """Current catalog; may be empty until fetched."""
        ...

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        ...

    async def fetch_available_models(self) -> List[ModelInfo]:
        """Refresh the catalog; never raises (returns the previous catalog on failure)."""
        ...

    def update_api_key(self, api_key: str) -> None:
        """Replace the credential and rebuild the transport."""
        ...

    def has_valid_api_key(self) -> bool:
        ...

    async def get_chat_completion(
        self,
        messages: Iterable[Message],
        options: CompletionOptions,
        handler: StreamControlHandler,
        *,
        tools: Optional[ToolRegistry] = None,
    ) -> Message:
        """Single entry point for completions; streaming is read from ``options``."""
        ...

    async def get_image_generation(
        self, prompt: str, options: Optional[ImageGenerationOptions] = None
    ) -> List[str]:
        """Generate images; raises an UNSUPPORTED ``ProviderError`` when not capable."""
        ...

    def get_model_capabilities(self, model_id: str) -> FrozenSet[Capability]:
        ...

    def get_rate_limit_info(self) -> Optional[RateLimitInfo]:
        ...

    async def aclose(self) -> None:
        ...

    async def aclose_when_idle(self) -> None:
        """Wait for in-flight calls to finish, then close."""
        ...


__all__ = ["ChatProvider"]
