"""Capability enumeration and mapping utilities.

A capability is a plain enumerated tag attached to a provider or a model.
Callers ask "does X support Y" through :func:`supports` instead of checking
provider classes. Catalog entries coming from configuration are parsed with
:func:`parse_capabilities`, which accepts both enum values and the loose
modality names used by model listings (``image``, ``vision``, ``tools``...).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, FrozenSet, Iterable


class Capability(str, Enum):
    """Closed set of features a provider or model may support."""

    TEXT_COMPLETION = "text_completion"
    CHAT_COMPLETION = "chat_completion"
    STREAMING_COMPLETION = "streaming_completion"
    REASONING = "reasoning"
    IMAGE_GENERATION = "image_generation"
    IMAGE_EDITING = "image_editing"
    AUDIO_TRANSCRIPTION = "audio_transcription"
    AUDIO_GENERATION = "audio_generation"
    EMBEDDING = "embedding"
    FUNCTION_CALLING = "function_calling"
    TOOL_USAGE = "tool_usage"
    VISION_ANALYSIS = "vision_analysis"
    FINE_TUNING = "fine_tuning"
    WEB_SEARCH = "web_search"
    OBJECT_GENERATION = "object_generation"


BASELINE_CAPABILITIES: FrozenSet[Capability] = frozenset(
    {Capability.TEXT_COMPLETION, Capability.STREAMING_COMPLETION}
)

# Loose names seen in model listings and config files.
_ALIASES = {
    "image": Capability.VISION_ANALYSIS,
    "images": Capability.VISION_ANALYSIS,
    "vision": Capability.VISION_ANALYSIS,
    "audio": Capability.AUDIO_TRANSCRIPTION,
    "tools": Capability.TOOL_USAGE,
    "tool_use": Capability.TOOL_USAGE,
    "json": Capability.OBJECT_GENERATION,
    "json_output": Capability.OBJECT_GENERATION,
    "structured_output": Capability.OBJECT_GENERATION,
    "streaming": Capability.STREAMING_COMPLETION,
    "chat": Capability.CHAT_COMPLETION,
    "search": Capability.WEB_SEARCH,
}


def map_model_capabilities(
    *,
    images: bool = False,
    audio: bool = False,
    object_generation: bool = False,
    tool_usage: bool = False,
    web_search: bool = False,
) -> FrozenSet[Capability]:
    """Map raw backend feature flags to a capability set.

    Total and side-effect free. The result always contains text completion
    and streaming completion.
    """
    caps = set(BASELINE_CAPABILITIES)
    if images:
        caps.add(Capability.VISION_ANALYSIS)
    if audio:
        caps.add(Capability.AUDIO_TRANSCRIPTION)
    if object_generation:
        caps.add(Capability.OBJECT_GENERATION)
    if tool_usage:
        caps.update({Capability.TOOL_USAGE, Capability.FUNCTION_CALLING})
    if web_search:
        caps.add(Capability.WEB_SEARCH)
    return frozenset(caps)


def supports(capabilities: Iterable[Capability], capability: Capability) -> bool:
    """Return True when ``capability`` is part of ``capabilities``."""
    return capability in frozenset(capabilities)


def parse_capabilities(values: Any) -> FrozenSet[Capability]:
    """Parse capability names from configuration.

    Accepts :class:`Capability` members, enum values, enum member names and
    the modality aliases above. Unknown entries and non-iterable input are
    ignored; the baseline set is always included.
    """
    caps = set(BASELINE_CAPABILITIES)
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        return frozenset(caps)
    for raw in values:
        if isinstance(raw, Capability):
            caps.add(raw)
            continue
        key = str(raw).strip().lower()
        if key in _ALIASES:
            caps.add(_ALIASES[key])
            continue
        try:
            caps.add(Capability(key))
        except ValueError:
            continue
    return frozenset(caps)


def merge_capabilities(*sets: Iterable[Capability]) -> FrozenSet[Capability]:
    """Union of several capability sets."""
    merged: set[Capability] = set()
    for caps in sets:
        merged.update(caps)
    return frozenset(merged)


__all__ = [
    "Capability",
    "BASELINE_CAPABILITIES",
    "map_model_capabilities",
    "supports",
    "parse_capabilities",
    "merge_capabilities",
]
