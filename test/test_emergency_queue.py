"""
Tests for the bounded max-priority emergency queue.
"""

import numpy as np
import pytest

from ems_dispatch import Disease, EmergencyQueue, EmptyQueueDequeue, QueueFull
from ems_dispatch.emergency import Emergency


def make_emergency(emergency_id, priority_score):
    return Emergency(
        emergency_id=emergency_id,
        caller=f"Caller {emergency_id}",
        location=0,
        disease=Disease.GENERAL,
        age=40,
        priority=priority_score,
        report_time=0,
        service_time=5,
    )


def assert_max_heap(queue):
    items = queue.snapshot()
    for i in range(1, len(items)):
        assert items[(i - 1) // 2].priority >= items[i].priority


def test_dequeue_returns_highest_priority():
    queue = EmergencyQueue()
    for eid, score in enumerate([3, 18, 9, 11, 6]):
        queue.enqueue(make_emergency(eid, score))

    assert [queue.dequeue().priority for _ in range(5)] == [18, 11, 9, 6, 3]
    assert len(queue) == 0


def test_heap_invariant_under_random_operations():
    rng = np.random.default_rng(1234)
    queue = EmergencyQueue(capacity=50)
    next_id = 0
    for _ in range(500):
        if len(queue) and (queue.is_full() or rng.random() < 0.4):
            top = queue.dequeue()
            assert all(top.priority >= e.priority for e in queue.snapshot())
        else:
            queue.enqueue(make_emergency(next_id, int(rng.integers(3, 19))))
            next_id += 1
        assert_max_heap(queue)


def test_equal_priorities_leave_in_report_order():
    queue = EmergencyQueue()
    for eid in [4, 1, 3, 0, 2]:
        queue.enqueue(make_emergency(eid, 9))
    assert [queue.dequeue().emergency_id for _ in range(5)] == [0, 1, 2, 3, 4]


def test_capacity_enforced():
    queue = EmergencyQueue(capacity=2)
    queue.enqueue(make_emergency(0, 3))
    queue.enqueue(make_emergency(1, 6))
    assert queue.is_full()
    with pytest.raises(QueueFull):
        queue.enqueue(make_emergency(2, 18))
    assert len(queue) == 2
    assert 2 not in queue


def test_empty_dequeue():
    queue = EmergencyQueue()
    assert queue.peek() is None
    with pytest.raises(EmptyQueueDequeue):
        queue.dequeue()
    with pytest.raises(IndexError):
        queue.dequeue()


def test_peek_get_and_contains():
    queue = EmergencyQueue()
    queue.enqueue(make_emergency(7, 6))
    queue.enqueue(make_emergency(8, 12))
    assert queue.peek().emergency_id == 8
    assert len(queue) == 2
    assert 7 in queue
    assert queue.get(7).priority == 6
    assert queue.get(99) is None


def test_invalid_capacity():
    with pytest.raises(ValueError):
        EmergencyQueue(capacity=0)
