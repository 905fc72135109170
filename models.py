"""
Typed records produced by the loaders and consumed by the chart builders.

Returns are kept in percentage points (12.3 means 12.3%); weights are
fractions in [0, 1].
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CompanyRecord:
    name: str
    symbol: str
    weight: float
    price: str = ""
    ytd_return: Optional[float] = None

    @property
    def has_return(self) -> bool:
        return self.ytd_return is not None


@dataclass(frozen=True)
class PricePoint:
    date: datetime
    value: float


@dataclass(frozen=True)
class PerformanceEntry:
    year: int
    performance: float


@dataclass(frozen=True)
class InvestmentPoint:
    year: datetime
    value: float
