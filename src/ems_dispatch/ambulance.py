from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ems_dispatch.exceptions import ConfigurationError
from ems_dispatch.network import is_index


class AmbulanceStatus(Enum):
    """ Enum representing all possible states of an ambulance. """
    IDLE = 0  # Available for dispatch
    EN_ROUTE_TO_EMERGENCY = 1  # Driving to the scene; may still be reassigned
    AT_SCENE = 2  # Treating patient on-scene
    EN_ROUTE_TO_HOSPITAL = 3  # Transporting patient
    RETURNING = 4  # Driving back to base hospital


class Ambulance:
    """
    Represents an ambulance unit with its current state and properties.
    """
    def __init__(self,
                 amb_id: int,
                 location: int,
                 base_hospital: int) -> None:

        self.id = amb_id
        self.location = location
        self.base_hospital = base_hospital
        self.status = AmbulanceStatus.IDLE

        # Call specific
        self.target_emergency: Optional[int] = None
        self.target_hospital: Optional[int] = None

        # Time tracking
        self.available_at = 0  # Tick at which the current state ends
        self.estimated_arrival = 0  # Scene ETA frozen at dispatch
        self.dispatch_time = 0

        # Statistics
        self.calls_responded = 0

    # ---------------------------------------------------------------------
    # State transitions (DISPATCH CYCLE)
    # ---------------------------------------------------------------------

    def _expect(self, status: AmbulanceStatus) -> None:
        if self.status != status:
            raise RuntimeError(
                f"Unit-{self.id} is {self.status.name}, expected {status.name}"
            )

    def dispatch_to_call(self, emergency_id: int, hospital: int,
                         travel_time: int, current_time: int) -> None:
        """Move from IDLE → EN_ROUTE_TO_EMERGENCY."""
        self._expect(AmbulanceStatus.IDLE)
        self.status = AmbulanceStatus.EN_ROUTE_TO_EMERGENCY
        self.target_emergency = emergency_id
        self.target_hospital = hospital
        self.dispatch_time = current_time
        self.available_at = current_time + travel_time
        self.estimated_arrival = current_time + travel_time
        self.calls_responded += 1

    def stand_down(self, current_time: int) -> None:
        """Release an en-route unit whose call was handed to another ambulance."""
        self._expect(AmbulanceStatus.EN_ROUTE_TO_EMERGENCY)
        self.status = AmbulanceStatus.IDLE
        self.target_emergency = None
        self.target_hospital = None
        self.available_at = current_time
        self.calls_responded -= 1

    def arrive_at_scene(self, scene: int, service_time: int, current_time: int) -> None:
        """Move from EN_ROUTE_TO_EMERGENCY → AT_SCENE."""
        self._expect(AmbulanceStatus.EN_ROUTE_TO_EMERGENCY)
        self.status = AmbulanceStatus.AT_SCENE
        self.location = scene
        self.available_at = current_time + service_time

    def begin_transport(self, travel_time: int, current_time: int) -> None:
        """Move from AT_SCENE → EN_ROUTE_TO_HOSPITAL."""
        self._expect(AmbulanceStatus.AT_SCENE)
        self.status = AmbulanceStatus.EN_ROUTE_TO_HOSPITAL
        self.available_at = current_time + travel_time

    def arrive_at_hospital(self, hospital_location: int, return_time: int,
                           current_time: int) -> None:
        """Move from EN_ROUTE_TO_HOSPITAL → RETURNING."""
        self._expect(AmbulanceStatus.EN_ROUTE_TO_HOSPITAL)
        self.status = AmbulanceStatus.RETURNING
        self.location = hospital_location
        self.available_at = current_time + return_time
        self.target_emergency = None
        self.target_hospital = None

    def finish_return(self, base_location: int) -> None:
        """Move from RETURNING → IDLE."""
        self._expect(AmbulanceStatus.RETURNING)
        self.status = AmbulanceStatus.IDLE
        self.location = base_location

    # ------------------------------------------------------------------
    # Helper functions
    # ------------------------------------------------------------------
    def is_available(self) -> bool:
        return self.status == AmbulanceStatus.IDLE

    def is_due(self, current_time: int) -> bool:
        return not self.is_available() and current_time >= self.available_at

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status.name,
            "location": self.location,
            "available_at": None if self.is_available() else self.available_at,
            "target_emergency": self.target_emergency,
            "target_hospital": self.target_hospital,
            "base_hospital": self.base_hospital,
        }


class Fleet:
    """ Owns every ambulance; ids are 1-based in roster order. """

    def __init__(self,
                 roster: Sequence[Tuple[int, int]],
                 *,
                 location_count: int,
                 hospital_count: int) -> None:
        self.ambulances: List[Ambulance] = []
        for amb_id, (location, base_hospital) in enumerate(roster, start=1):
            if not is_index(location) or not 0 <= location < location_count:
                raise ConfigurationError(f"Unit-{amb_id} starts at unknown location {location}")
            if not is_index(base_hospital) or not 0 <= base_hospital < hospital_count:
                raise ConfigurationError(f"Unit-{amb_id} has unknown base hospital {base_hospital}")
            self.ambulances.append(Ambulance(amb_id, location, base_hospital))
        self._by_id: Dict[int, Ambulance] = {amb.id: amb for amb in self.ambulances}

    def __len__(self) -> int:
        return len(self.ambulances)

    def __iter__(self):
        return iter(self.ambulances)

    def get(self, amb_id: int) -> Ambulance:
        return self._by_id[amb_id]

    def idle(self) -> List[Ambulance]:
        return [amb for amb in self.ambulances if amb.is_available()]

    def busy(self) -> List[Ambulance]:
        return [amb for amb in self.ambulances if not amb.is_available()]

    def snapshot(self) -> List[dict]:
        return [amb.to_dict() for amb in self.ambulances]
