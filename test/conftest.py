"""
Shared fixtures for the dispatch simulator tests.
"""

import pytest

from ems_dispatch import Disease, DispatchSimulator, Location


class FixedRng:
    """Stand-in for numpy's Generator that always draws the same value."""

    def __init__(self, value):
        self.value = value
        self.calls = []

    def integers(self, low, high):
        self.calls.append((low, high))
        return self.value


def line_city():
    """
    Depot(0) --4-- Scene(1) --3-- Heart(2)

    One ambulance parked at the depot, whose base is the General hospital
    also at the depot; the Heart Center sits 3 minutes past the scene.
    """
    return {
        "locations": [Location("Depot", 0, 0), Location("Scene", 4, 0), Location("Heart", 7, 0)],
        "roads": [(0, 1, 4), (1, 2, 3)],
        "hospitals": [("Heart Center", 2, 5, Disease.CARDIAC), ("General", 0, 5, Disease.GENERAL)],
        "ambulances": [(0, 1)],
    }


@pytest.fixture
def fixed_rng():
    return FixedRng(4)


@pytest.fixture
def line_sim(fixed_rng):
    return DispatchSimulator.from_config(line_city(), rng=fixed_rng)
