"""
Tests for the ambulance state machine and fleet roster.
"""

import pytest

from ems_dispatch import Ambulance, AmbulanceStatus, ConfigurationError, Fleet


def test_full_cycle():
    amb = Ambulance(1, location=0, base_hospital=0)
    assert amb.is_available()

    amb.dispatch_to_call(emergency_id=7, hospital=2, travel_time=4, current_time=10)
    assert amb.status == AmbulanceStatus.EN_ROUTE_TO_EMERGENCY
    assert (amb.available_at, amb.estimated_arrival) == (14, 14)
    assert (amb.target_emergency, amb.target_hospital) == (7, 2)
    assert not amb.is_due(13)
    assert amb.is_due(14)

    amb.arrive_at_scene(scene=5, service_time=6, current_time=14)
    assert amb.status == AmbulanceStatus.AT_SCENE
    assert amb.location == 5
    assert amb.available_at == 20
    assert amb.estimated_arrival == 14

    amb.begin_transport(travel_time=3, current_time=20)
    assert amb.status == AmbulanceStatus.EN_ROUTE_TO_HOSPITAL
    assert amb.available_at == 23

    amb.arrive_at_hospital(hospital_location=8, return_time=9, current_time=23)
    assert amb.status == AmbulanceStatus.RETURNING
    assert amb.location == 8
    assert amb.available_at == 32
    assert amb.target_emergency is None and amb.target_hospital is None

    amb.finish_return(base_location=0)
    assert amb.status == AmbulanceStatus.IDLE
    assert amb.location == 0
    assert amb.calls_responded == 1


def test_stand_down_releases_unit():
    amb = Ambulance(2, location=3, base_hospital=0)
    amb.dispatch_to_call(emergency_id=1, hospital=0, travel_time=12, current_time=5)
    amb.stand_down(current_time=7)
    assert amb.is_available()
    assert amb.location == 3
    assert amb.target_emergency is None
    assert amb.calls_responded == 0


@pytest.mark.parametrize("transition", [
    lambda amb: amb.arrive_at_scene(1, 3, 0),
    lambda amb: amb.begin_transport(3, 0),
    lambda amb: amb.arrive_at_hospital(1, 3, 0),
    lambda amb: amb.finish_return(0),
    lambda amb: amb.stand_down(0),
])
def test_out_of_order_transitions_rejected(transition):
    amb = Ambulance(1, location=0, base_hospital=0)
    with pytest.raises(RuntimeError):
        transition(amb)
    assert amb.status == AmbulanceStatus.IDLE


def test_cannot_dispatch_busy_unit():
    amb = Ambulance(1, location=0, base_hospital=0)
    amb.dispatch_to_call(1, 0, 4, 0)
    with pytest.raises(RuntimeError):
        amb.dispatch_to_call(2, 0, 4, 0)


def test_snapshot_hides_available_at_when_idle():
    amb = Ambulance(1, location=4, base_hospital=0)
    assert amb.to_dict()["available_at"] is None
    amb.dispatch_to_call(3, 1, 6, 2)
    assert amb.to_dict() == {
        "id": 1,
        "status": "EN_ROUTE_TO_EMERGENCY",
        "location": 4,
        "available_at": 8,
        "target_emergency": 3,
        "target_hospital": 1,
        "base_hospital": 0,
    }


def test_fleet_roster():
    fleet = Fleet([(1, 0), (4, 0), (7, 1)], location_count=10, hospital_count=2)
    assert [amb.id for amb in fleet] == [1, 2, 3]
    assert fleet.get(3).base_hospital == 1
    assert len(fleet.idle()) == 3

    fleet.get(2).dispatch_to_call(0, 0, 5, 0)
    assert [amb.id for amb in fleet.idle()] == [1, 3]
    assert [amb.id for amb in fleet.busy()] == [2]
    assert fleet.snapshot()[1]["status"] == "EN_ROUTE_TO_EMERGENCY"


@pytest.mark.parametrize("roster", [
    [(10, 0)],
    [(-1, 0)],
    [(0, 2)],
    [(1.5, 0)],
    [(True, 0)],
    [(0, 0.5)],
    [("3", 0)],
])
def test_fleet_rejects_bad_roster(roster):
    with pytest.raises(ConfigurationError):
        Fleet(roster, location_count=10, hospital_count=2)
