"""
Model catalog entry.

Providers expose their catalog as a list of `ModelInfo`; the capability set
drives ``get_model_capabilities`` for model pickers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..capabilities import BASELINE_CAPABILITIES, Capability


@dataclass(frozen=True)
class ModelInfo:
    id: str
    provider: str
    name: Optional[str] = None
    capabilities: FrozenSet[Capability] = field(default=BASELINE_CAPABILITIES)


__all__ = ["ModelInfo"]
