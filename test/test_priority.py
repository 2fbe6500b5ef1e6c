"""
Tests for urgency scoring and service-time estimation.
"""

import pytest

from conftest import FixedRng
from ems_dispatch import Disease, PriorityCalculator, priority
from ems_dispatch.priority import MAX_SERVICE_TIME, MIN_SERVICE_TIME


@pytest.mark.parametrize("disease, age, expected", [
    (Disease.CARDIAC, 65, 18),
    (Disease.CARDIAC, 59, 15),
    (Disease.RESPIRATORY, 8, 11),
    (Disease.RESPIRATORY, 10, 11),
    (Disease.RESPIRATORY, 60, 11),
    (Disease.RESPIRATORY, 30, 9),
    (Disease.GENERAL, 30, 3),
    (Disease.GENERAL, 90, 3),
    (Disease.INFECTION, 5, 6),
    (Disease.TRAUMA, 70, 12),
])
def test_priority_formula(disease, age, expected):
    assert priority(disease, age) == expected


@pytest.mark.parametrize("disease, age, base, expected", [
    (Disease.GENERAL, 30, 3, 3),
    (Disease.TRAUMA, 30, 3, 5),
    (Disease.CARDIAC, 60, 5, 6),
    (Disease.CARDIAC, 85, 8, 10),
    (Disease.GENERAL, 80, 4, 5),
    (Disease.TRAUMA, 81, 8, 11),
])
def test_service_duration_adjustments(disease, age, base, expected):
    calculator = PriorityCalculator(FixedRng(base))
    assert calculator.service_duration(disease, age) == expected


def test_service_duration_draws_inclusive_range():
    rng = FixedRng(MIN_SERVICE_TIME)
    PriorityCalculator(rng).service_duration(Disease.GENERAL, 30)
    assert rng.calls == [(MIN_SERVICE_TIME, MAX_SERVICE_TIME + 1)]


def test_default_rng_stays_in_range():
    calculator = PriorityCalculator(seed=42)
    draws = {calculator.service_duration(Disease.GENERAL, 30) for _ in range(300)}
    assert draws == set(range(MIN_SERVICE_TIME, MAX_SERVICE_TIME + 1))


def test_seeded_calculators_agree():
    a = PriorityCalculator(seed=7)
    b = PriorityCalculator(seed=7)
    assert [a.service_duration(Disease.TRAUMA, 40) for _ in range(20)] == \
        [b.service_duration(Disease.TRAUMA, 40) for _ in range(20)]


@pytest.mark.parametrize("code, expected", [
    ("C", Disease.CARDIAC),
    ("t", Disease.TRAUMA),
    ("R", Disease.RESPIRATORY),
    ("i", Disease.INFECTION),
    ("G", Disease.GENERAL),
    ("X", Disease.GENERAL),
    ("cardiac", Disease.CARDIAC),
    (" Trauma ", Disease.TRAUMA),
    (3, Disease.RESPIRATORY),
    (Disease.INFECTION, Disease.INFECTION),
])
def test_disease_from_code(code, expected):
    assert Disease.from_code(code) == expected


def test_severity_order():
    assert Disease.GENERAL < Disease.INFECTION < Disease.RESPIRATORY < Disease.TRAUMA < Disease.CARDIAC
