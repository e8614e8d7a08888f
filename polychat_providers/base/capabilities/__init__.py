"""Capabilities package.

Exports the capability enum and the pure mapping helpers.
"""

from .core import (
    BASELINE_CAPABILITIES,
    Capability,
    map_model_capabilities,
    merge_capabilities,
    parse_capabilities,
    supports,
)

__all__ = [
    "Capability",
    "BASELINE_CAPABILITIES",
    "map_model_capabilities",
    "supports",
    "parse_capabilities",
    "merge_capabilities",
]
