"""Selection result shared by every selector."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


@dataclass
class SelectionResult:
    """Container for one selector's output."""

    method: str
    selected: List[str]
    ranking: List[str]
    scores: Dict[str, float] = field(default_factory=dict)
    details: Dict[str, Any] = field(default_factory=dict)

    def rank_of(self, predictor: str) -> Optional[int]:
        """1-based rank of ``predictor``, or None when it was not selected."""
        order = self.top(len(self.selected))
        if predictor not in order:
            return None
        return order.index(predictor) + 1

    def top(self, n: int) -> List[str]:
        return [p for p in self.ranking if p in self.selected][:n]

    def to_dict(self) -> Dict:
        """Convert dataclass to plain dictionary."""
        return asdict(self)
