# dronedispatch/main.py
import argparse
import logging
import sys

from dronedispatch.application import DispatchApplication
from dronedispatch.config.env import ALGORITHM_NAMES
from dronedispatch.core.exceptions import DispatchError
from dronedispatch.utils.logging import setup_logging


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="dronedispatch - Delivery task assignment and routing for unit fleets"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible heuristics"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    optimize = subparsers.add_parser(
        "optimize", help="Assign and route the tasks of a JSON scenario"
    )
    optimize.add_argument("scenario", help="Scenario file (e.g., downtown.json)")
    optimize.add_argument(
        "--algorithm",
        "-a",
        choices=ALGORITHM_NAMES,
        default=None,
        help="Routing algorithm (defaults to the configured one)",
    )
    optimize.add_argument(
        "--save", action="store_true", help="Write the result as JSON to the output directory"
    )

    compare = subparsers.add_parser(
        "compare", help="Run every routing algorithm on a scenario"
    )
    compare.add_argument("scenario", help="Scenario file (e.g., downtown.json)")

    fleet = subparsers.add_parser("fleet", help="Recommend a fleet size")
    fleet.add_argument("--alta", type=int, default=0, help="High priority tasks per day")
    fleet.add_argument("--media", type=int, default=0, help="Medium priority tasks per day")
    fleet.add_argument("--baixa", type=int, default=0, help="Low priority tasks per day")
    fleet.add_argument(
        "--history", default=None, help="Demand history CSV to count tasks from instead"
    )

    bases = subparsers.add_parser(
        "bases", help="Place bases over a demand history with k-means"
    )
    bases.add_argument("history", help="CSV with x,y columns")
    bases.add_argument("-k", type=int, default=None, help="Number of bases")

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        app = DispatchApplication(seed=args.seed)

        if args.command == "optimize":
            result = app.run_optimization(args.scenario, algorithm=args.algorithm)
            app.print_optimization_summary(result)
            if args.save:
                app.save_result(result)
            return 0 if result.success else 1

        if args.command == "compare":
            comparison = app.run_comparison(args.scenario)
            return 0 if comparison["success"].any() else 1

        if args.command == "fleet":
            if args.history:
                recommendation = app.run_fleet_sizing_from_history(args.history)
            else:
                recommendation = app.run_fleet_sizing(
                    {"alta": args.alta, "media": args.media, "baixa": args.baixa}
                )
            app.print_fleet_summary(recommendation)
            return 0

        if args.command == "bases":
            placement = app.run_base_placement(args.history, num_bases=args.k)
            app.print_facility_summary(placement)
            return 0 if placement.success else 1

    except (DispatchError, OSError) as e:
        print(f"Error: {str(e)}")
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
