"""
Default city: ten locations along two corridors, four hospitals, five units.
"""

from typing import Dict

from ems_dispatch.network import Location
from ems_dispatch.priority import Disease


def default_city() -> Dict:
    locations = [
        Location("City Center", 0, 0),
        Location("Main Street", 4, 0),
        Location("Park Avenue", 10, 0),
        Location("Shopping Mall", 15, 0),
        Location("University", 18, 0),
        Location("Airport", 25, 0),
        Location("North Market", 0, 8),
        Location("Residential", 4, 8),
        Location("Industrial Zone", 30, 0),
        Location("Tech Park", 33, 0),
    ]
    roads = [
        (0, 1, 4), (1, 2, 6), (2, 3, 5),
        (3, 4, 3), (4, 5, 7), (1, 5, 10),
        (0, 6, 8), (6, 7, 4), (7, 3, 6),
        (5, 8, 5), (8, 9, 3),
    ]
    hospitals = [
        ("City General", 0, 10, Disease.GENERAL),
        ("Heart Center", 5, 5, Disease.CARDIAC),
        ("Trauma Unit", 9, 8, Disease.TRAUMA),
        ("Children's Hospital", 6, 6, Disease.RESPIRATORY),
    ]
    # (starting location, base hospital index)
    ambulances = [(1, 0), (4, 0), (7, 0), (2, 1), (5, 1)]
    return {
        "locations": locations,
        "roads": roads,
        "hospitals": hospitals,
        "ambulances": ambulances,
    }
