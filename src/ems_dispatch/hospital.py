"""
Hospitals, bed bookkeeping and hospital selection for a case.
"""

import math
from typing import List, Optional, Sequence, Tuple

from ems_dispatch.exceptions import ConfigurationError, NoHospitalAvailable
from ems_dispatch.network import RoadNetwork, RoutingEngine, is_index
from ems_dispatch.priority import Disease

SPECIALTY_BONUS = 50  # score reduction when the specialty matches the case
DISTANCE_WEIGHT = 10


class Hospital:
    def __init__(self, name: str, location: int, capacity: int, specialty: Disease) -> None:
        self.name = name
        self.location = location
        self.capacity = capacity
        self.occupied = 0
        self.specialty = Disease(specialty)

    def has_capacity(self) -> bool:
        return self.occupied < self.capacity

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "location": self.location,
            "capacity": self.capacity,
            "occupied": self.occupied,
            "specialty": self.specialty.name,
        }


class HospitalRegistry:
    """
    Ordered roster of hospitals. Occupancy only changes through admit() and
    discharge_one(), which keep 0 <= occupied <= capacity.
    """

    def __init__(self,
                 hospitals: Sequence[Tuple[str, int, int, Disease]],
                 network: RoadNetwork) -> None:
        self.hospitals: List[Hospital] = []
        for entry in hospitals:
            name, location, capacity, specialty = entry
            if not network.is_valid(location):
                raise ConfigurationError(f"Hospital {name!r} is at unknown location {location}")
            if not is_index(capacity) or capacity <= 0:
                raise ConfigurationError(f"Hospital {name!r} needs a positive bed capacity")
            self.hospitals.append(Hospital(name, location, capacity, Disease.from_code(specialty)))

    def __len__(self) -> int:
        return len(self.hospitals)

    def __getitem__(self, index: int) -> Hospital:
        return self.hospitals[index]

    def __iter__(self):
        return iter(self.hospitals)

    def available(self) -> List[int]:
        return [i for i, h in enumerate(self.hospitals) if h.has_capacity()]

    def admit(self, index: int) -> None:
        """ Reserve one bed. """
        hospital = self.hospitals[index]
        if not hospital.has_capacity():
            raise NoHospitalAvailable(f"{hospital.name} is full ({hospital.capacity} beds)")
        hospital.occupied += 1

    def release(self, index: int) -> None:
        """ Hand back a reservation that was never used. """
        self.discharge_one(index)

    def discharge_one(self, index: int) -> bool:
        hospital = self.hospitals[index]
        if hospital.occupied == 0:
            return False
        hospital.occupied -= 1
        return True

    @property
    def total_beds(self) -> int:
        return sum(h.capacity for h in self.hospitals)

    @property
    def used_beds(self) -> int:
        return sum(h.occupied for h in self.hospitals)

    def snapshot(self) -> List[dict]:
        return [h.to_dict() for h in self.hospitals]


class HospitalSelector:
    """
    Picks the hospital with the lowest score, where
    score = 10 * distance - 50 if the specialty matches the disease.
    Full or unreachable hospitals are skipped; ties keep registry order.
    """

    def __init__(self, registry: HospitalRegistry, routing: RoutingEngine) -> None:
        self.registry = registry
        self.routing = routing

    def score(self, location: int, index: int, disease: Disease) -> float:
        hospital = self.registry[index]
        distance = self.routing.shortest_distance(location, hospital.location)
        if math.isinf(distance):
            return math.inf
        score = distance * DISTANCE_WEIGHT
        if hospital.specialty == disease:
            score -= SPECIALTY_BONUS
        return score

    def best_hospital(self, location: int, disease: Disease) -> Optional[int]:
        """ Index of the best hospital with a free bed, or None. """
        best, best_score = None, math.inf
        for index in self.registry.available():
            score = self.score(location, index, disease)
            if score < best_score:
                best, best_score = index, score
        return best
