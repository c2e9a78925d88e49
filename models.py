"""Record types shared by the parser, analytics and report assembly."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class Transaction:
    """One statement line.

    ``date`` is kept verbatim, ``amount`` is always the absolute value of the
    parsed token and ``category`` stays ``None`` until categorization.
    """

    date: str
    description: str
    amount: float
    category: Optional[str] = None


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float
    percentage: float


@dataclass(frozen=True)
class MerchantTotal:
    merchant: str
    total: float
    count: int


@dataclass(frozen=True)
class AnalysisResult:
    """Complete report returned to hosts."""

    spending_categories: list[CategoryTotal] = field(default_factory=list)
    top_merchants: list[MerchantTotal] = field(default_factory=list)
    monthly_total: float = 0.0
    insights: list[str] = field(default_factory=list)
    transaction_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int | None = None) -> str:
        """Strict JSON; non-finite totals and percentages become ``null``."""
        return json.dumps(_finite_or_none(self.to_dict()), indent=indent, allow_nan=False)


def _finite_or_none(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _finite_or_none(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_finite_or_none(item) for item in value]
    return value
