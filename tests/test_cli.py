"""Tests for the SoftRoute command line."""

from routing.cli import build_request, main, parse_args


class TestArguments:
    def test_defaults(self):
        req = build_request(parse_args([]))
        assert req.instance.num_orders == 100
        assert req.num_vehicles == 20
        assert req.vehicle_hard_capacity == 80
        assert req.vehicle_soft_capacity == 40
        assert req.vehicle_soft_capacity_cost == 5000
        assert not req.instance.use_deterministic_random_seed
        assert not req.use_same_vehicle_costs

    def test_flags(self):
        req = build_request(parse_args([
            "--vrp_orders", "5", "--vrp_vehicles", "2",
            "--vrp_vehicle_hard_capacity", "10", "--vrp_vehicle_soft_capacity", "0",
            "--vrp_use_deterministic_random_seed", "--vrp_use_same_vehicle_costs",
        ]))
        assert req.instance.num_orders == 5
        assert req.instance.use_deterministic_random_seed
        assert req.use_same_vehicle_costs


class TestExitStatus:
    def test_solves_and_prints_plan(self, capsys):
        status = main([
            "--vrp_orders", "5", "--vrp_vehicles", "2",
            "--vrp_vehicle_hard_capacity", "10", "--vrp_vehicle_soft_capacity", "0",
            "--vrp_use_deterministic_random_seed",
        ])
        assert status == 0
        assert "Route #0" in capsys.readouterr().out

    def test_invalid_orders(self):
        assert main(["--vrp_orders", "0"]) == 2

    def test_invalid_vehicles(self):
        assert main(["--vrp_vehicles", "0"]) == 2

    def test_soft_not_below_hard(self):
        assert main(["--vrp_vehicle_hard_capacity", "10", "--vrp_vehicle_soft_capacity", "10"]) == 2

    def test_malformed_search_parameters(self):
        assert main(["--vrp_orders", "3", "--routing_search_parameters", "oops {"]) == 2

    def test_capacity_beyond_int64(self):
        assert main([
            "--vrp_orders", "3",
            "--vrp_vehicle_hard_capacity", str(2 ** 63), "--vrp_vehicle_soft_capacity", "0",
        ]) == 2

    def test_soft_capacity_cost_beyond_int64(self):
        assert main(["--vrp_orders", "3", "--vrp_vehicle_soft_capacity_cost", str(2 ** 63)]) == 2
