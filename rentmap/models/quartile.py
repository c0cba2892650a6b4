"""Quartile ranking data types."""

from dataclasses import dataclass
from enum import Enum


class Metric(Enum):
    CRIME = "crime"
    SCHOOLS = "schools"
    PARKS = "parks"


class Orientation(Enum):
    LOWER_IS_BETTER = "lower_is_better"  # crime
    HIGHER_IS_BETTER = "higher_is_better"  # schools, parks


@dataclass(frozen=True)
class QuartileThresholds:
    q1: float = 0
    q2: float = 0
    q3: float = 0


@dataclass(frozen=True)
class QuartileDescriptor:
    emoji: str
    label: str
    description: str


@dataclass(frozen=True)
class QuartileTier:
    tier: int  # 1 (best) - 4 (worst)
    emoji: str
    label: str
    description: str
    value: float
