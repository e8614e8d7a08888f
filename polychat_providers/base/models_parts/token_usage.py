"""Token usage reported by a completion."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_counts(
        cls,
        prompt: Optional[int],
        completion: Optional[int],
        total: Optional[int] = None,
    ) -> "TokenUsage":
        """Build usage from possibly-missing counts; ``total`` defaults to the sum."""
        p = int(prompt or 0)
        c = int(completion or 0)
        return cls(prompt_tokens=p, completion_tokens=c, total_tokens=int(total) if total else p + c)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["TokenUsage"]
