import heapq
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ems_dispatch.exceptions import EmptyQueueDequeue, QueueFull
from ems_dispatch.priority import Disease

MAX_EMERGENCIES = 20


@dataclass
class Emergency:
    emergency_id: int
    caller: str
    location: int
    disease: Disease
    age: int
    priority: int
    report_time: int
    service_time: int  # minutes on scene
    assigned_ambulance: Optional[int] = None
    reassignable: bool = True
    # travel minutes counted toward the response total at the last dispatch
    response_time: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.emergency_id,
            "caller": self.caller,
            "location": self.location,
            "disease": self.disease.name,
            "age": self.age,
            "priority": self.priority,
            "report_time": self.report_time,
            "service_time": self.service_time,
            "assigned_ambulance": self.assigned_ambulance,
            "reassignable": self.reassignable,
        }


class EmergencyQueue:
    """
    Bounded max-priority queue of emergencies awaiting dispatch.

    Backed by a binary heap on (-priority, emergency_id): the most urgent case
    comes out first and equal priorities leave in report order.
    """

    def __init__(self, capacity: int = MAX_EMERGENCIES) -> None:
        if capacity <= 0:
            raise ValueError("Queue capacity must be positive")
        self.capacity = capacity
        self._heap: List[Tuple[int, int, Emergency]] = []

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, emergency_id: int) -> bool:
        return any(entry[1] == emergency_id for entry in self._heap)

    def is_full(self) -> bool:
        return len(self._heap) >= self.capacity

    def enqueue(self, emergency: Emergency) -> None:
        if self.is_full():
            raise QueueFull(f"Pending queue is full ({self.capacity} emergencies)")
        heapq.heappush(self._heap, (-emergency.priority, emergency.emergency_id, emergency))

    def dequeue(self) -> Emergency:
        if not self._heap:
            raise EmptyQueueDequeue("dequeue from an empty emergency queue")
        return heapq.heappop(self._heap)[2]

    def peek(self) -> Optional[Emergency]:
        return self._heap[0][2] if self._heap else None

    def get(self, emergency_id: int) -> Optional[Emergency]:
        for _, eid, emergency in self._heap:
            if eid == emergency_id:
                return emergency
        return None

    def snapshot(self) -> List[Emergency]:
        """ Pending emergencies in heap order (not sorted). """
        return [entry[2] for entry in self._heap]
