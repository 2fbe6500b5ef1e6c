"""
EMS Dispatch Simulator Package

This package simulates an emergency medical dispatch operation minute by
minute: emergencies are prioritised, matched to the nearest idle ambulance
and the best hospital, routed over a road network, and ambulances cycle
back to their base hospital.

Main Components:
- DispatchSimulator: Simulation context, dispatch engine and clock
- Ambulance / Fleet: Ambulance units and their state machine
- AmbulanceStatus: States an ambulance can be in
- EmergencyQueue: Max-priority queue of pending emergencies
- HospitalRegistry / HospitalSelector: Bed tracking and hospital choice
- RoadNetwork / RoutingEngine: Road graph and shortest-path queries
- Policy classes: Nearest-unit dispatch and dynamic reassignment
"""

from ems_dispatch.ambulance import Ambulance, AmbulanceStatus, Fleet
from ems_dispatch.city import default_city
from ems_dispatch.emergency import Emergency, EmergencyQueue
from ems_dispatch.exceptions import (
    ActiveSetFull,
    ConfigurationError,
    DispatchError,
    EmptyQueueDequeue,
    InvalidLocationIndex,
    NoHospitalAvailable,
    QueueFull,
)
from ems_dispatch.hospital import Hospital, HospitalRegistry, HospitalSelector
from ems_dispatch.network import UNREACHABLE, Location, RoadNetwork, RoutingEngine
from ems_dispatch.policies import NearestDispatchPolicy, ReassignmentPolicy
from ems_dispatch.priority import Disease, PriorityCalculator, priority
from ems_dispatch.simulator import DispatchSimulator

__version__ = '1.0.0'

__all__ = [
    'DispatchSimulator',
    'Ambulance',
    'AmbulanceStatus',
    'Fleet',
    'Emergency',
    'EmergencyQueue',
    'Hospital',
    'HospitalRegistry',
    'HospitalSelector',
    'Location',
    'RoadNetwork',
    'RoutingEngine',
    'UNREACHABLE',
    'NearestDispatchPolicy',
    'ReassignmentPolicy',
    'Disease',
    'PriorityCalculator',
    'priority',
    'default_city',
    'DispatchError',
    'InvalidLocationIndex',
    'QueueFull',
    'ActiveSetFull',
    'NoHospitalAvailable',
    'EmptyQueueDequeue',
    'ConfigurationError',
]
