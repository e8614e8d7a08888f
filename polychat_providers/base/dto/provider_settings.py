"""Provider settings supplied by the settings collaborator.

Purpose
-------
Typed view of ``get_provider_settings(provider_id)``: API key, base URL,
configured model catalog and API version, plus the optional organization,
display name, timeout and static headers some providers use. The package
never persists these values.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation of loosely-typed config files.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ModelSettings(BaseModel):
    """One configured model entry; ``capabilities`` holds capability names."""

    id: str
    name: Optional[str] = None
    capabilities: List[str] = Field(default_factory=list)


class ProviderSettings(BaseModel):
    api_key: str = ""
    base_url: Optional[str] = None
    models: List[ModelSettings] = Field(default_factory=list)
    api_version: Optional[str] = None
    organization: Optional[str] = None
    name: Optional[str] = None
    timeout_seconds: Optional[float] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)


__all__ = ["ModelSettings", "ProviderSettings"]
