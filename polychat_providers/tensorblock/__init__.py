"""TensorBlock Forge provider package."""

from .client import TensorBlockProvider

__all__ = ["TensorBlockProvider"]
