"""
Forecast output shapes.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ForecastMethod(str, Enum):
    """Smoothing model used to fit the observed series."""
    MOVING_AVERAGE = "ma"
    EXPONENTIAL_SMOOTHING = "es"


class ForecastPoint(BaseModel):
    """A fitted (history) or predicted (future) point with its band."""

    date: date
    actual: Optional[float] = None  # history points only
    predicted: float
    lower: float
    upper: float


class ForecastSeries(BaseModel):
    """History with fitted values, followed by the flat extension."""

    method: ForecastMethod
    history: List[ForecastPoint] = Field(default_factory=list)
    future: List[ForecastPoint] = Field(default_factory=list)
    residual_std: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.history and not self.future
