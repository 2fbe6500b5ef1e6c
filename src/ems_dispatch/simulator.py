"""
Tick-driven emergency dispatch simulator.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ems_dispatch.ambulance import Ambulance, AmbulanceStatus, Fleet
from ems_dispatch.emergency import MAX_EMERGENCIES, Emergency, EmergencyQueue
from ems_dispatch.exceptions import ActiveSetFull, ConfigurationError, InvalidLocationIndex, QueueFull
from ems_dispatch.hospital import HospitalRegistry, HospitalSelector
from ems_dispatch.network import Location, RoadNetwork, RoutingEngine
from ems_dispatch.policies import REASSIGN_THRESHOLD, NearestDispatchPolicy, ReassignmentPolicy
from ems_dispatch.priority import MAX_SERVICE_TIME, MIN_SERVICE_TIME, Disease, PriorityCalculator

DISCHARGE_INTERVAL = 15  # every N ticks each occupied hospital discharges one patient

DELIVERY_COLUMNS = ["emergency_id", "ambulance_id", "hospital", "report_time",
                    "delivery_time", "response_time", "priority", "disease"]


class DispatchSimulator:
    """
    Owns all mutable state of one dispatch operation: pending queue, active
    calls, fleet, hospital beds, the tick counter and running totals.

    Time only moves inside advance_time(); each tick applies due ambulance
    transitions, then dispatches at most one pending call, then (every
    DISCHARGE_INTERVAL ticks) frees one bed per occupied hospital.
    """

    def __init__(
        self,
        locations: Sequence[Location],
        roads: Sequence[Tuple[int, int, int]],
        hospitals: Sequence[Tuple[str, int, int, Disease]],
        ambulances: Sequence[Tuple[int, int]],
        *,
        rng=None,
        seed: Optional[int] = None,
        queue_capacity: int = MAX_EMERGENCIES,
        active_capacity: int = MAX_EMERGENCIES,
        reassign_threshold: int = REASSIGN_THRESHOLD,
        discharge_interval: int = DISCHARGE_INTERVAL,
        min_service_time: int = MIN_SERVICE_TIME,
        max_service_time: int = MAX_SERVICE_TIME,
        verbose: bool = False,
    ) -> None:
        if discharge_interval <= 0:
            raise ValueError("Discharge interval must be positive")
        if reassign_threshold < 0:
            raise ValueError("Reassignment threshold must be non-negative")

        # Static inputs
        self.network = RoadNetwork(locations, roads)
        self.routing = RoutingEngine(self.network)
        self.registry = HospitalRegistry(hospitals, self.network)
        self.selector = HospitalSelector(self.registry, self.routing)
        self.fleet = Fleet(ambulances,
                           location_count=len(self.network),
                           hospital_count=len(self.registry))
        self._check_return_routes()
        self.calculator = PriorityCalculator(rng, seed=seed,
                                             min_service_time=min_service_time,
                                             max_service_time=max_service_time)
        self.dispatch_policy = NearestDispatchPolicy(self.routing)
        self.reassignment_policy = ReassignmentPolicy(self.dispatch_policy, reassign_threshold)
        self.active_capacity = active_capacity
        self.discharge_interval = discharge_interval
        self.verbose = verbose

        # Runtime state
        self.current_time = 0
        self.next_emergency_id = 0
        self.pending = EmergencyQueue(queue_capacity)
        self.active: Dict[int, Emergency] = {}  # emergency_id → emergency, in dispatch order

        # Running totals
        self.total_handled = 0
        self.total_response_time = 0
        self.requeued_calls = 0
        self.reassignments = 0

        self.completed_deliveries: List[Dict] = []
        self.dispatch_log: List[Dict] = []

        self._transitions = {
            AmbulanceStatus.EN_ROUTE_TO_EMERGENCY: self._on_scene_arrival,
            AmbulanceStatus.AT_SCENE: self._on_service_complete,
            AmbulanceStatus.EN_ROUTE_TO_HOSPITAL: self._on_hospital_arrival,
            AmbulanceStatus.RETURNING: self._on_return_complete,
        }

    def _check_return_routes(self) -> None:
        """Every unit must be able to drive home from any hospital it may deliver to."""
        for amb in self.fleet:
            base = self.registry[amb.base_hospital]
            for hospital in self.registry:
                if math.isinf(self.routing.shortest_distance(hospital.location, base.location)):
                    raise ConfigurationError(
                        f"Unit-{amb.id} cannot return from {hospital.name} to base {base.name}"
                    )

    @classmethod
    def from_config(cls, config: Dict, **kwargs) -> "DispatchSimulator":
        """ Build from a dict with locations/roads/hospitals/ambulances keys. """
        return cls(config["locations"], config["roads"], config["hospitals"],
                   config["ambulances"], **kwargs)

    # ------------------------------------------------------------------
    # Call intake
    # ------------------------------------------------------------------

    def report_emergency(self, caller: str, location: int, disease, age: int) -> int:
        """Queue a new emergency and return its id."""
        if not self.network.is_valid(location):
            raise InvalidLocationIndex(location, len(self.network))
        if age < 0:
            raise ValueError(f"Age must be non-negative, got {age}")
        if self.pending.is_full():
            raise QueueFull(f"Pending queue is full ({self.pending.capacity} emergencies)")

        disease = Disease.from_code(disease)
        emergency = Emergency(
            emergency_id=self.next_emergency_id,
            caller=caller,
            location=int(location),
            disease=disease,
            age=age,
            priority=self.calculator.priority(disease, age),
            report_time=self.current_time,
            service_time=self.calculator.service_duration(disease, age),
        )
        self.pending.enqueue(emergency)
        self.next_emergency_id += 1

        if self.verbose:
            print(f"📞 [Time {self.current_time}] Call #{emergency.emergency_id:03d} from {caller} "
                  f"at {self.network.name(emergency.location)} (priority {emergency.priority})")
        return emergency.emergency_id

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def attempt_dispatch(self, amb: Ambulance, emergency: Emergency) -> bool:
        """
        Send `amb` to `emergency` and reserve a bed at the best hospital.

        Returns False, with the emergency back in the pending queue, when no
        hospital has a free bed.
        """
        if emergency.emergency_id not in self.active and len(self.active) >= self.active_capacity:
            raise ActiveSetFull(f"Active roster is full ({self.active_capacity} emergencies)")

        travel_time = self.routing.shortest_distance(amb.location, emergency.location)
        if math.isinf(travel_time):
            raise ValueError(f"Unit-{amb.id} cannot reach location {emergency.location}")

        hospital = self.selector.best_hospital(emergency.location, emergency.disease)
        if hospital is None:
            self.active.pop(emergency.emergency_id, None)
            emergency.assigned_ambulance = None
            self.pending.enqueue(emergency)
            self.requeued_calls += 1
            self._log("requeued", emergency, amb)
            if self.verbose:
                print(f"⚠️  [Time {self.current_time}] No hospital available, "
                      f"emergency #{emergency.emergency_id} re-queued")
            return False

        amb.dispatch_to_call(emergency.emergency_id, hospital, travel_time, self.current_time)

        emergency.assigned_ambulance = amb.id
        emergency.reassignable = True
        emergency.response_time = travel_time
        self.active[emergency.emergency_id] = emergency

        self.registry.admit(hospital)
        self.total_response_time += travel_time
        self._log("dispatched", emergency, amb, hospital=hospital, eta=travel_time)

        if self.verbose:
            print(f"🚑 [Time {self.current_time}] Unit-{amb.id} dispatched to {emergency.caller} "
                  f"at {self.network.name(emergency.location)} → {self.registry[hospital].name} "
                  f"(ETA {travel_time} min)")
        return True

    def service_nearest_pending(self) -> bool:
        """Dispatch the most urgent pending call if an idle unit can reach it."""
        top = self.pending.peek()
        if top is None:
            return False

        amb = self.dispatch_policy.select_ambulance(self.fleet.idle(), top.location)
        if amb is None:
            return False

        if len(self.active) >= self.active_capacity:
            if self.verbose:
                print(f"⚠️  [Time {self.current_time}] Active roster full, "
                      f"emergency #{top.emergency_id} stays queued")
            return False

        return self.attempt_dispatch(amb, self.pending.dequeue())

    # ------------------------------------------------------------------
    # Ambulance state transitions
    # ------------------------------------------------------------------

    def _update_ambulances(self) -> None:
        for amb in self.fleet:
            if amb.is_due(self.current_time):
                self._transitions[amb.status](amb)

    def _on_scene_arrival(self, amb: Ambulance) -> None:
        emergency = self.active[amb.target_emergency]
        amb.arrive_at_scene(emergency.location, emergency.service_time, self.current_time)
        emergency.reassignable = False
        if self.verbose:
            print(f"  [Time {self.current_time}] Unit-{amb.id} arrived at scene "
                  f"(service time: {emergency.service_time} min)")

    def _on_service_complete(self, amb: Ambulance) -> None:
        hospital = self.registry[amb.target_hospital]
        travel_time = self.routing.shortest_distance(amb.location, hospital.location)
        amb.begin_transport(travel_time, self.current_time)
        if self.verbose:
            print(f"  [Time {self.current_time}] Unit-{amb.id} transporting to {hospital.name} "
                  f"(ETA: {travel_time} min)")

    def _on_hospital_arrival(self, amb: Ambulance) -> None:
        hospital = self.registry[amb.target_hospital]
        emergency = self.active.pop(amb.target_emergency)
        self.total_handled += 1

        base = self.registry[amb.base_hospital]
        return_time = self.routing.shortest_distance(hospital.location, base.location)

        self.completed_deliveries.append({
            "emergency_id": emergency.emergency_id,
            "ambulance_id": amb.id,
            "hospital": hospital.name,
            "report_time": emergency.report_time,
            "delivery_time": self.current_time,
            "response_time": emergency.response_time,
            "priority": emergency.priority,
            "disease": emergency.disease.name,
        })
        amb.arrive_at_hospital(hospital.location, return_time, self.current_time)

        if self.verbose:
            print(f"🏥 [Time {self.current_time}] Unit-{amb.id} delivered patient to {hospital.name}, "
                  f"returning to base ({return_time} min)")

    def _on_return_complete(self, amb: Ambulance) -> None:
        amb.finish_return(self.registry[amb.base_hospital].location)
        if self.verbose:
            print(f"  [Time {self.current_time}] Unit-{amb.id} back at base and available")
        self._check_reassignment()

    # ------------------------------------------------------------------
    # Reassignment
    # ------------------------------------------------------------------

    def _check_reassignment(self) -> bool:
        swap = self.reassignment_policy.find_swap(
            list(self.active.values()), self.fleet, self.current_time
        )
        if swap is None:
            return False

        emergency, incumbent, candidate, saved = swap
        if self.verbose:
            print(f"🔁 [Time {self.current_time}] Reassignment for emergency #{emergency.emergency_id}: "
                  f"Unit-{incumbent.id} (ETA {incumbent.estimated_arrival - self.current_time}) → "
                  f"Unit-{candidate.id}, saves {saved} min")

        # The incumbent's bed and response leg are handed back before re-dispatch
        self.registry.release(incumbent.target_hospital)
        self.total_response_time -= emergency.response_time
        incumbent.stand_down(self.current_time)

        self.reassignments += 1
        self._log("reassigned", emergency, candidate, replaced=incumbent.id, saved=saved)
        return self.attempt_dispatch(candidate, emergency)

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def advance_time(self, minutes: int) -> None:
        if minutes < 0:
            raise ValueError(f"Cannot advance time by {minutes} minutes")
        for _ in range(minutes):
            self.current_time += 1
            self._update_ambulances()
            self.service_nearest_pending()
            if self.current_time % self.discharge_interval == 0:
                self._discharge_patients()

    def _discharge_patients(self) -> None:
        for index, hospital in enumerate(self.registry):
            if self.registry.discharge_one(index) and self.verbose:
                print(f"  [Time {self.current_time}] Patient discharged from {hospital.name}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_emergency(self, emergency_id: int) -> Optional[Emergency]:
        if emergency_id in self.active:
            return self.active[emergency_id]
        return self.pending.get(emergency_id)

    def idle_ambulances(self) -> List[Ambulance]:
        return self.fleet.idle()

    def available_hospitals(self) -> List[int]:
        return self.registry.available()

    def fleet_snapshot(self) -> List[Dict]:
        return self.fleet.snapshot()

    def active_snapshot(self) -> List[Dict]:
        return [e.to_dict() for e in self.active.values()]

    def pending_snapshot(self) -> List[Dict]:
        return [e.to_dict() for e in self.pending.snapshot()]

    def hospital_snapshot(self) -> List[Dict]:
        return self.registry.snapshot()

    @property
    def average_response_time(self) -> float:
        if self.total_handled == 0:
            return 0.0
        return self.total_response_time / self.total_handled

    def statistics(self) -> Dict:
        return {
            "current_time": self.current_time,
            "handled": self.total_handled,
            "active": len(self.active),
            "pending": len(self.pending),
            "average_response_time": self.average_response_time,
            "idle_ambulances": len(self.fleet.idle()),
            "total_ambulances": len(self.fleet),
            "total_beds": self.registry.total_beds,
            "used_beds": self.registry.used_beds,
            "requeued": self.requeued_calls,
            "reassignments": self.reassignments,
        }

    def deliveries_frame(self) -> pd.DataFrame:
        """ Completed hospital deliveries, one row per handled emergency. """
        return pd.DataFrame(self.completed_deliveries, columns=DELIVERY_COLUMNS)

    def _log(self, event: str, emergency: Emergency, amb: Ambulance, **extra) -> None:
        self.dispatch_log.append({
            "time": self.current_time,
            "event": event,
            "emergency_id": emergency.emergency_id,
            "ambulance_id": amb.id,
            **extra,
        })
