import numbers
from enum import IntEnum

import numpy as np

MIN_SERVICE_TIME = 3  # minutes on scene, inclusive lower bound
MAX_SERVICE_TIME = 8  # inclusive upper bound


class Disease(IntEnum):
    """ Disease categories, valued by severity rank. """
    GENERAL = 1
    INFECTION = 2
    RESPIRATORY = 3
    TRAUMA = 4
    CARDIAC = 5

    @classmethod
    def from_code(cls, code) -> "Disease":
        """
        Parse a call-taker code ('C', 'T', 'R', 'I', 'G') or a full name.
        Anything unrecognised is treated as GENERAL.
        """
        if isinstance(code, cls):
            return code
        if isinstance(code, numbers.Integral):
            return cls(code)
        text = str(code).strip().upper()
        for disease in cls:
            if text == disease.name or (len(text) == 1 and disease.name.startswith(text)):
                return disease
        return cls.GENERAL


def priority(disease: Disease, age: int) -> int:
    """Urgency score; higher is more urgent."""
    disease = Disease(disease)
    score = disease.value * 3
    if disease == Disease.CARDIAC and age >= 60:
        score += 3
    if disease == Disease.RESPIRATORY and (age <= 10 or age >= 60):
        score += 2
    return score


class PriorityCalculator:
    """
    Derives urgency and on-scene service time for a case.

    `rng` only needs an `integers(low, high)` method with numpy's exclusive
    upper bound, so tests can pass a scripted source in place of a Generator.
    """

    def __init__(self,
                 rng=None,
                 *,
                 seed=None,
                 min_service_time: int = MIN_SERVICE_TIME,
                 max_service_time: int = MAX_SERVICE_TIME) -> None:
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.min_service_time = min_service_time
        self.max_service_time = max_service_time

    def priority(self, disease: Disease, age: int) -> int:
        return priority(disease, age)

    def service_duration(self, disease: Disease, age: int) -> int:
        base = int(self.rng.integers(self.min_service_time, self.max_service_time + 1))
        if disease == Disease.TRAUMA:
            base += 2
        if disease == Disease.CARDIAC and age >= 60:
            base += 1
        if age >= 80:
            base += 1
        return base
