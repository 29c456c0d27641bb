"""Tests for requests, passengers and floor queues."""

from __future__ import annotations

import pytest

from simulation import Direction, FloorQueue, Passenger, Request


class TestRequest:

    def test_valid_request(self):
        request = Request(3, Direction.UP, 2)
        assert (request.floor, request.direction, request.count) == (3, Direction.UP, 2)
        assert str(request) == "Req(F:3, Dir:Up, P:2)"

    def test_direction_string_is_coerced(self):
        assert Request(3, "down").direction is Direction.DOWN

    def test_idle_direction_rejected(self):
        with pytest.raises(ValueError):
            Request(3, Direction.IDLE, 1)

    def test_unknown_direction_rejected(self):
        with pytest.raises(ValueError):
            Request(3, "sideways", 1)

    @pytest.mark.parametrize("count", [0, -4])
    def test_non_positive_count_rejected(self, count):
        with pytest.raises(ValueError):
            Request(3, Direction.UP, count)

    def test_is_immutable(self):
        request = Request(3, Direction.UP, 1)
        with pytest.raises(AttributeError):
            request.floor = 4


class TestPassenger:

    def test_direction_is_derived(self):
        assert Passenger(0, origin=2, destination=7).direction is Direction.UP
        assert Passenger(1, origin=7, destination=2).direction is Direction.DOWN
        assert Passenger(2, origin=4, destination=4).direction is Direction.IDLE

    def test_wait_and_ride_times(self):
        passenger = Passenger(0, origin=0, destination=5, arrival_time=3)
        assert passenger.wait_time is None
        passenger.record_boarding(7)
        passenger.record_alighting(12)
        assert passenger.wait_time == 4
        assert passenger.ride_time == 5


class TestFloorQueue:

    def test_fifo_per_direction(self):
        floor = FloorQueue(2)
        riders = [Passenger(i, origin=2, destination=5) for i in range(3)]
        for rider in riders:
            floor.enqueue(Direction.UP, rider)
        floor.enqueue(Direction.DOWN, Passenger(9, origin=2, destination=0))

        assert floor.count(Direction.UP) == 3
        assert floor.count(Direction.DOWN) == 1
        assert len(floor) == 4
        assert floor.dequeue(Direction.UP, 2) == riders[:2]
        assert floor.count(Direction.UP) == 1

    def test_dequeue_stops_when_empty(self):
        floor = FloorQueue(0)
        floor.enqueue(Direction.UP, Passenger(0, origin=0, destination=3))
        assert len(floor.dequeue(Direction.UP, 5)) == 1
        assert floor.dequeue(Direction.UP, 5) == []
        assert not floor.has_waiting()

    def test_requeue_front_keeps_order(self):
        floor = FloorQueue(0)
        riders = [Passenger(i, origin=0, destination=3) for i in range(4)]
        for rider in riders:
            floor.enqueue(Direction.UP, rider)
        taken = floor.dequeue(Direction.UP, 3)
        floor.requeue_front(Direction.UP, taken[1:])
        assert list(floor.up) == riders[1:]

    def test_idle_has_no_queue(self):
        floor = FloorQueue(0)
        assert floor.count(Direction.IDLE) == 0
        with pytest.raises(ValueError):
            floor.enqueue(Direction.IDLE, Passenger(0, origin=0, destination=0))
