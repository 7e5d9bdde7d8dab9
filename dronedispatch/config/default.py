"""
Default configuration values for the dronedispatch system.
"""

# Route construction and refinement
ROUTING = {
    "algorithm": "nearest_neighbor",  # Options: 'nearest_neighbor', 'genetic_algorithm', 'simulated_annealing'
    "n_jobs": 1,  # Worker threads for planning several groups
    "genetic": {
        "generations": 100,
        "population_cap": 50,
        "mutation_rate": 0.1,
        "tournament_size": 3,
        "small_instance_size": 3,
    },
    "annealing": {
        "max_iterations": 1000,
        "initial_temperature": 100.0,
        "cooling_rate": 0.995,
    },
}

# Task grouping
GROUPING = {
    "proximity_threshold": 50.0,  # distance units
}

# Group-to-unit scoring weights
ASSIGNMENT = {
    "distance_weight": 0.4,
    "capacity_weight": 0.3,
    "battery_weight": 0.3,
    "min_battery_fraction": 0.2,  # units at or below this charge sit out
}

# Route estimates
ENERGY = {
    "battery_percent_per_distance": 2.0,
    "service_minutes_per_stop": 3.0,
    "loading_minutes": 5.0,
}

# Fleet sizing
FLEET = {
    "max_units": 10,
    "operating_hours": 12.0,
    "average_service_minutes": 45.0,
}

# Base placement
FACILITY = {
    "num_bases": 1,
    "max_iterations": 100,
    "tolerance": 0.1,
    "coverage_radius": 50.0,
}

# I/O parameters
IO = {
    "scenario_path": "scenarios/",
    "output_path": "output/",
}
