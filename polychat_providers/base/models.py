"""
Provider-agnostic domain models public surface.

Re-exports the implementations under ``polychat_providers.base.models_parts``.
"""

from .models_parts.content_part import ContentPart, ContentPartType
from .models_parts.message import Message, Role, new_message_id, new_streaming_placeholder
from .models_parts.message_tree import MessageTree
from .models_parts.conversation import Conversation
from .models_parts.token_usage import TokenUsage
from .models_parts.rate_limit_info import RateLimitInfo
from .models_parts.model_info import ModelInfo
from .models_parts.tool_call import ToolCall, ToolCallStatus

__all__ = [
    "ContentPart",
    "ContentPartType",
    "Message",
    "Role",
    "new_message_id",
    "new_streaming_placeholder",
    "MessageTree",
    "Conversation",
    "TokenUsage",
    "RateLimitInfo",
    "ModelInfo",
    "ToolCall",
    "ToolCallStatus",
]
