import math
from typing import Iterable, List, Optional, Tuple

from ems_dispatch.ambulance import Ambulance, AmbulanceStatus, Fleet
from ems_dispatch.emergency import Emergency
from ems_dispatch.network import RoutingEngine

REASSIGN_THRESHOLD = 5  # minutes an idle unit must save before it takes over a call

# ---------------------------------------------------------------------------
#  Dispatch Policies
# ---------------------------------------------------------------------------

class NearestDispatchPolicy:
    def __init__(self, routing: RoutingEngine):
        self.routing = routing

    def travel_time(self, from_node: int, to_node: int) -> float:
        return self.routing.shortest_distance(from_node, to_node)

    def select_ambulance(self, available_ambulances: List[Ambulance], location: int) -> Optional[Ambulance]:
        """Select the nearest available ambulance to the call location.

        Units that cannot reach the location are skipped; ties go to the
        earlier unit in the roster.
        """
        best, best_time = None, math.inf
        for amb in available_ambulances:
            travel_time = self.travel_time(amb.location, location)
            if travel_time < best_time:
                best, best_time = amb, travel_time
        return best


class ReassignmentPolicy:
    """
    Looks for an en-route call that a newly idle unit could reach at least
    `threshold` minutes sooner than the unit already assigned.

    Only one swap is proposed per pass: the first qualifying call in active
    order.
    """

    def __init__(self, dispatch_policy: NearestDispatchPolicy, threshold: int = REASSIGN_THRESHOLD):
        self.dispatch_policy = dispatch_policy
        self.threshold = threshold

    def find_swap(self,
                  active_emergencies: Iterable[Emergency],
                  fleet: Fleet,
                  current_time: int) -> Optional[Tuple[Emergency, Ambulance, Ambulance, int]]:
        """
        Returns (emergency, incumbent, candidate, minutes_saved) or None.
        """
        for emergency in active_emergencies:
            if not emergency.reassignable or emergency.assigned_ambulance is None:
                continue

            incumbent = fleet.get(emergency.assigned_ambulance)
            if incumbent.status != AmbulanceStatus.EN_ROUTE_TO_EMERGENCY:
                continue

            candidate = self.dispatch_policy.select_ambulance(fleet.idle(), emergency.location)
            if candidate is None or candidate.id == incumbent.id:
                continue

            candidate_eta = current_time + self.dispatch_policy.travel_time(
                candidate.location, emergency.location
            )
            saved = incumbent.estimated_arrival - candidate_eta
            if saved >= self.threshold:
                return emergency, incumbent, candidate, saved
        return None
