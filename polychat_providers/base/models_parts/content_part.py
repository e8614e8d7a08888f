"""
Message content part model.

A message carries an ordered tuple of `ContentPart` objects. Text parts hold
their value in ``text``; file, image, audio and reference parts keep a
provider-agnostic descriptor in ``data`` (for example ``url``, ``base64``,
``mime_type`` or ``name``) that transports translate to their wire shape.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional


ContentPartType = Literal[
    "text",       # Plain text
    "file",       # Uploaded document; data carries name/mime_type/content
    "image",      # Image; data carries url or base64 + mime_type
    "audio",      # Audio clip; data carries base64 + mime_type
    "reference",  # Pointer to another message or external resource
]


@dataclass(frozen=True)
class ContentPart:
    """A single piece of message content.

    Attributes:
        type: The semantic kind of the part.
        text: Textual content for ``text`` parts (and optional captions).
        data: Descriptor for non-text parts.
    """

    type: ContentPartType
    text: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def of_text(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the part."""
        return asdict(self)


__all__ = [
    "ContentPart",
    "ContentPartType",
]
