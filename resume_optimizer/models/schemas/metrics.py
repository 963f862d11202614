"""Quantified facts extracted from a resume bullet."""

from enum import Enum

from pydantic import BaseModel


class MetricType(str, Enum):
    PERCENTAGE = "percentage"
    CURRENCY = "currency"
    SCALE = "scale"
    TIMEFRAME = "timeframe"
    NUMBER = "number"
    MULTIPLIER = "multiplier"


class ExtractedMetric(BaseModel):
    value: str  # matched text, e.g. "$1.5M"
    type: MetricType
    context: str = ""  # +/-20 characters around the match
    normalized: float | None = None  # numeric value with K/M/B expanded

    model_config = {"frozen": True}


class MetricExtraction(BaseModel):
    bullet: str
    metrics: list[ExtractedMetric] = []

    model_config = {"frozen": True}

    @property
    def has_quantification(self) -> bool:
        return bool(self.metrics)
