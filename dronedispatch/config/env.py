"""
Environment-specific configuration that overrides default settings.
Values can be loaded from environment variables or a .env file.
"""

import copy
import os
from typing import Any, Callable, Dict, Tuple

from dotenv import load_dotenv

from dronedispatch.core.exceptions import ConfigurationError
from .default import ASSIGNMENT, ENERGY, FACILITY, FLEET, GROUPING, IO, ROUTING

# Load environment variables from .env file if it exists
load_dotenv()

ALGORITHM_NAMES = ("nearest_neighbor", "genetic_algorithm", "simulated_annealing")

# Environment variable -> (path into the config, parser)
ENV_OVERRIDES: Dict[str, Tuple[Tuple[str, ...], Callable[[str], Any]]] = {
    # ROUTING
    "DRONEDISPATCH_ALGORITHM": (("ROUTING", "algorithm"), str),
    "DRONEDISPATCH_N_JOBS": (("ROUTING", "n_jobs"), int),
    "DRONEDISPATCH_GA_GENERATIONS": (("ROUTING", "genetic", "generations"), int),
    "DRONEDISPATCH_GA_POPULATION_CAP": (("ROUTING", "genetic", "population_cap"), int),
    "DRONEDISPATCH_GA_MUTATION_RATE": (("ROUTING", "genetic", "mutation_rate"), float),
    "DRONEDISPATCH_SA_ITERATIONS": (("ROUTING", "annealing", "max_iterations"), int),
    "DRONEDISPATCH_SA_TEMPERATURE": (("ROUTING", "annealing", "initial_temperature"), float),
    "DRONEDISPATCH_SA_COOLING_RATE": (("ROUTING", "annealing", "cooling_rate"), float),
    # GROUPING
    "DRONEDISPATCH_PROXIMITY_THRESHOLD": (("GROUPING", "proximity_threshold"), float),
    # ASSIGNMENT
    "DRONEDISPATCH_DISTANCE_WEIGHT": (("ASSIGNMENT", "distance_weight"), float),
    "DRONEDISPATCH_CAPACITY_WEIGHT": (("ASSIGNMENT", "capacity_weight"), float),
    "DRONEDISPATCH_BATTERY_WEIGHT": (("ASSIGNMENT", "battery_weight"), float),
    "DRONEDISPATCH_MIN_BATTERY": (("ASSIGNMENT", "min_battery_fraction"), float),
    # FLEET
    "DRONEDISPATCH_MAX_UNITS": (("FLEET", "max_units"), int),
    "DRONEDISPATCH_OPERATING_HOURS": (("FLEET", "operating_hours"), float),
    "DRONEDISPATCH_SERVICE_MINUTES": (("FLEET", "average_service_minutes"), float),
    # FACILITY
    "DRONEDISPATCH_NUM_BASES": (("FACILITY", "num_bases"), int),
    "DRONEDISPATCH_COVERAGE_RADIUS": (("FACILITY", "coverage_radius"), float),
    # I/O
    "DRONEDISPATCH_SCENARIO_PATH": (("IO", "scenario_path"), str),
    "DRONEDISPATCH_OUTPUT_PATH": (("IO", "output_path"), str),
}


def get_config() -> Dict[str, Any]:
    """
    Get configuration with environment overrides.

    Returns:
        Dictionary with merged configuration. The defaults are copied, so
        callers may modify the result freely.

    Raises:
        ConfigurationError: If an override cannot be parsed or the merged
            configuration is invalid.
    """
    # Start with default config
    config = copy.deepcopy(
        {
            "ROUTING": ROUTING,
            "GROUPING": GROUPING,
            "ASSIGNMENT": ASSIGNMENT,
            "ENERGY": ENERGY,
            "FLEET": FLEET,
            "FACILITY": FACILITY,
            "IO": IO,
        }
    )

    # Override with environment variables
    for variable, (path, parse) in ENV_OVERRIDES.items():
        if variable not in os.environ:
            continue
        try:
            value = parse(os.environ[variable])
        except ValueError:
            raise ConfigurationError(
                f"Invalid value for {variable}: {os.environ[variable]!r}"
            )

        section = config
        for key in path[:-1]:
            section = section[key]
        section[path[-1]] = value

    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check the tunables the core relies on.

    Raises:
        ConfigurationError: For an unknown algorithm or a non-positive
            threshold, capacity, radius or base count.
    """
    algorithm = config["ROUTING"]["algorithm"]
    if algorithm not in ALGORITHM_NAMES:
        raise ConfigurationError(
            f"Unknown routing algorithm '{algorithm}'. "
            f"Choose one of: {', '.join(ALGORITHM_NAMES)}"
        )

    positive = [
        ("GROUPING.proximity_threshold", config["GROUPING"]["proximity_threshold"]),
        ("ROUTING.n_jobs", config["ROUTING"]["n_jobs"]),
        ("FLEET.max_units", config["FLEET"]["max_units"]),
        ("FLEET.operating_hours", config["FLEET"]["operating_hours"]),
        ("FLEET.average_service_minutes", config["FLEET"]["average_service_minutes"]),
        ("FACILITY.num_bases", config["FACILITY"]["num_bases"]),
        ("FACILITY.coverage_radius", config["FACILITY"]["coverage_radius"]),
        ("ENERGY.battery_percent_per_distance", config["ENERGY"]["battery_percent_per_distance"]),
    ]
    for name, value in positive:
        if value <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value}")

    min_battery = config["ASSIGNMENT"]["min_battery_fraction"]
    if not 0.0 <= min_battery <= 1.0:
        raise ConfigurationError(
            f"ASSIGNMENT.min_battery_fraction must be within [0, 1], got {min_battery}"
        )
