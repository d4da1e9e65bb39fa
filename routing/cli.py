"""
SoftRoute - command line entry point.

    cvrptw-soft-capacity --vrp_orders 50 --vrp_vehicles 10 \
        --vrp_use_deterministic_random_seed \
        --routing_search_parameters 'time_limit { seconds: 10 }'
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from instance.models import InstanceRequest

from .engine import solve_cvrptw
from .models import ConfigurationError, RoutingRequest, RoutingStatus
from .reporter import format_plan

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Soft-capacitated vehicle routing with time windows.")
    parser.add_argument("--vrp_orders", type=int, default=100, help="Number of nodes in the problem.")
    parser.add_argument("--vrp_vehicles", type=int, default=20, help="Number of vehicles in the problem.")
    parser.add_argument(
        "--vrp_vehicle_hard_capacity", type=int, default=80,
        help="Hard capacity for a vehicle; 0 disables the hard capacity constraint.",
    )
    parser.add_argument(
        "--vrp_vehicle_soft_capacity", type=int, default=40,
        help="Soft capacity for a vehicle; 0 disables the soft capacity constraint.",
    )
    parser.add_argument(
        "--vrp_vehicle_soft_capacity_cost", type=int, default=5000,
        help="Cost per unit of load above the soft capacity.",
    )
    parser.add_argument("--vrp_use_deterministic_random_seed", action="store_true",
                        help="Use deterministic random seeds.")
    parser.add_argument("--vrp_use_same_vehicle_costs", action="store_true",
                        help="Penalize serving consecutive order groups with several vehicles.")
    parser.add_argument(
        "--routing_search_parameters", default="",
        help="Text-format RoutingSearchParameters (possibly partial) overriding the defaults.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Explicit base seed.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def build_request(args: argparse.Namespace) -> RoutingRequest:
    return RoutingRequest(
        instance=InstanceRequest(
            num_orders=args.vrp_orders,
            use_deterministic_random_seed=args.vrp_use_deterministic_random_seed,
            seed=args.seed,
        ),
        num_vehicles=args.vrp_vehicles,
        vehicle_hard_capacity=args.vrp_vehicle_hard_capacity,
        vehicle_soft_capacity=args.vrp_vehicle_soft_capacity,
        vehicle_soft_capacity_cost=args.vrp_vehicle_soft_capacity_cost,
        use_same_vehicle_costs=args.vrp_use_same_vehicle_costs,
        routing_search_parameters=args.routing_search_parameters,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)
    try:
        response = solve_cvrptw(build_request(args))
    except (ValidationError, ConfigurationError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if response.status != RoutingStatus.NO_SOLUTION:
        print(format_plan(response))
    return 0


if __name__ == "__main__":
    sys.exit(main())
