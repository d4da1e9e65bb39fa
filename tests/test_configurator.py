"""Tests for the SoftRoute model configurator against a recording backend."""

import pytest
from instance.models import Instance, Node
from routing.backend import RoutingAssignment, RoutingBackend, Visit
from routing.configurator import (
    CAPACITY, TIME, ConfiguratorStage, ModelConfigurator, same_vehicle_groups,
)
from routing.models import ConfigurationError, RoutingRequest


class RecordingBackend(RoutingBackend):
    """Records every call instead of building a solver model."""

    def __init__(self, num_nodes, num_vehicles, depot=0):
        self.num_nodes = num_nodes
        self.num_vehicles = num_vehicles
        self.calls = []
        self.callbacks = []
        self.dimensions = {}
        self.ranges = {}
        self.soft_bounds = []
        self.disjunctions = []
        self.same_vehicle = []

    @classmethod
    def search_parameters(cls, override=""):
        if "{" in override and "}" not in override:
            raise ConfigurationError("unbalanced")
        return {"override": override}

    def register_transit_callback(self, callback):
        self.callbacks.append(callback)
        return len(self.callbacks) - 1

    def set_arc_cost_evaluator_of_all_vehicles(self, callback_index):
        self.calls.append("arc_cost")
        self.arc_cost = callback_index

    def add_dimension(self, callback_index, slack_max, capacity, fix_start_cumul_to_zero, name):
        self.calls.append(name)
        self.dimensions[name] = (callback_index, slack_max, capacity, fix_start_cumul_to_zero)

    def set_cumul_range(self, dimension, node, lower, upper):
        self.ranges[(dimension, node)] = (lower, upper)

    def set_end_cumul_soft_upper_bound(self, dimension, vehicle, upper_bound, coefficient):
        self.soft_bounds.append((dimension, vehicle, upper_bound, coefficient))

    def add_disjunction(self, nodes, penalty):
        self.disjunctions.append((list(nodes), penalty))

    def add_soft_same_vehicle_constraint(self, nodes, cost):
        self.same_vehicle.append((list(nodes), cost))

    def solve(self, parameters):
        self.calls.append("solve")
        routes = [[Visit(0, {CAPACITY: (0, 0), TIME: (0, 0)})] * 2 for _ in range(self.num_vehicles)]
        return RoutingAssignment(objective=0, routes=routes)


def make_instance(demands=(0, 2, 3, 4), horizon=1000):
    nodes = [
        Node(index=i, x=i * 10, y=0, demand=d,
             time_window_start=0 if i == 0 else 10 * i,
             time_window_end=horizon if i == 0 else 10 * i + 200)
        for i, d in enumerate(demands)
    ]
    return Instance(nodes=nodes, speed=10, time_per_demand_unit=5, horizon=horizon, seed=0)


def configure(request, instance=None):
    instance = instance or make_instance()
    backend = RecordingBackend(instance.num_nodes, request.num_vehicles)
    configurator = ModelConfigurator(backend, instance, request)
    configurator.configure()
    return configurator, backend


class TestCallbacks:
    def test_arc_cost_is_distance(self):
        configurator, backend = configure(RoutingRequest(num_vehicles=2))
        cost = backend.callbacks[backend.arc_cost]
        assert cost(1, 3) == 20
        assert cost(3, 1) == 20

    def test_capacity_transit_is_destination_demand(self):
        _, backend = configure(RoutingRequest(num_vehicles=2))
        demand = backend.callbacks[backend.dimensions[CAPACITY][0]]
        assert demand(1, 3) == 4
        assert demand(3, 0) == 0

    def test_time_transit_is_service_plus_travel(self):
        _, backend = configure(RoutingRequest(num_vehicles=2))
        transit = backend.callbacks[backend.dimensions[TIME][0]]
        # service 5 * demand(2)=3, travel ceil(10 / 10)
        assert transit(2, 3) == 15 + 1


class TestDimensions:
    def test_declaration_order(self):
        _, backend = configure(RoutingRequest(num_vehicles=2))
        assert backend.calls == ["arc_cost", CAPACITY, TIME]

    def test_capacity_hard_bound_zero_slack(self):
        _, backend = configure(RoutingRequest(num_vehicles=2, vehicle_hard_capacity=10, vehicle_soft_capacity=0))
        _, slack, capacity, fix_start = backend.dimensions[CAPACITY]
        assert (slack, capacity, fix_start) == (0, 10, True)

    def test_disabled_hard_capacity_uses_total_demand(self):
        _, backend = configure(RoutingRequest(num_vehicles=2, vehicle_hard_capacity=0, vehicle_soft_capacity=3))
        assert backend.dimensions[CAPACITY][2] == 9

    def test_time_dimension_horizon(self):
        _, backend = configure(RoutingRequest(num_vehicles=1), make_instance(horizon=5000))
        _, slack, capacity, fix_start = backend.dimensions[TIME]
        assert (slack, capacity, fix_start) == (5000, 5000, True)

    def test_soft_bound_on_every_vehicle(self):
        _, backend = configure(RoutingRequest(
            num_vehicles=3, vehicle_hard_capacity=10,
            vehicle_soft_capacity=5, vehicle_soft_capacity_cost=100,
        ))
        assert backend.soft_bounds == [(CAPACITY, v, 5, 100) for v in range(3)]

    def test_no_soft_bound_when_disabled(self):
        _, backend = configure(RoutingRequest(num_vehicles=3, vehicle_hard_capacity=10, vehicle_soft_capacity=0))
        assert backend.soft_bounds == []


class TestWindowsAndDisjunctions:
    def test_time_windows_on_orders_only(self):
        _, backend = configure(RoutingRequest(num_vehicles=1))
        assert backend.ranges == {
            (TIME, 1): (10, 210),
            (TIME, 2): (20, 220),
            (TIME, 3): (30, 230),
        }

    def test_singleton_disjunction_per_order(self):
        _, backend = configure(RoutingRequest(num_vehicles=1, drop_penalty=777))
        assert backend.disjunctions == [([1], 777), ([2], 777), ([3], 777)]


class TestSameVehicleGroups:
    def test_partition_keeps_remainder(self):
        groups = same_vehicle_groups(list(range(1, 24)), 10)
        assert [len(g) for g in groups] == [10, 10, 3]
        assert groups[2] == [21, 22, 23]

    def test_groups_added_when_enabled(self):
        inst = make_instance(demands=(0,) + (1,) * 12)
        _, backend = configure(RoutingRequest(
            num_vehicles=2, use_same_vehicle_costs=True, max_nodes_per_group=5, same_vehicle_cost=40,
        ), inst)
        assert backend.same_vehicle == [
            ([1, 2, 3, 4, 5], 40), ([6, 7, 8, 9, 10], 40), ([11, 12], 40),
        ]

    def test_no_groups_when_disabled(self):
        _, backend = configure(RoutingRequest(num_vehicles=2))
        assert backend.same_vehicle == []


class TestStageOrdering:
    def test_configure_reaches_expected_stage(self):
        configurator, _ = configure(RoutingRequest(num_vehicles=1))
        assert configurator.stage == ConfiguratorStage.DISJOINED
        configurator, _ = configure(RoutingRequest(num_vehicles=1, use_same_vehicle_costs=True))
        assert configurator.stage == ConfiguratorStage.GROUPED

    def test_out_of_order_step_rejected(self):
        inst = make_instance()
        configurator = ModelConfigurator(RecordingBackend(4, 1), inst, RoutingRequest(num_vehicles=1))
        with pytest.raises(ConfigurationError):
            configurator.add_time_dimension()

    def test_repeated_step_rejected(self):
        configurator, _ = configure(RoutingRequest(num_vehicles=1))
        with pytest.raises(ConfigurationError):
            configurator.add_disjunctions()

    def test_solve_before_grouping_rejected(self):
        inst = make_instance()
        request = RoutingRequest(num_vehicles=1, use_same_vehicle_costs=True)
        configurator = ModelConfigurator(RecordingBackend(4, 1), inst, request)
        configurator.set_arc_costs()
        configurator.add_capacity_dimension()
        configurator.add_time_dimension()
        configurator.add_time_windows()
        configurator.add_disjunctions()
        with pytest.raises(ConfigurationError):
            configurator.solve({})

    def test_grouping_rejected_when_disabled(self):
        configurator, _ = configure(RoutingRequest(num_vehicles=1))
        with pytest.raises(ConfigurationError):
            configurator.add_same_vehicle_groups()

    def test_sealed_after_solve(self):
        configurator, backend = configure(RoutingRequest(num_vehicles=1))
        assert configurator.solve({}) is not None
        assert configurator.stage == ConfiguratorStage.SEALED
        with pytest.raises(ConfigurationError):
            configurator.solve({})
        with pytest.raises(ConfigurationError):
            configurator.set_arc_costs()
        assert backend.calls.count("solve") == 1
