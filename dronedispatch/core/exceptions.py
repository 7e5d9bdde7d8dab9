# dronedispatch/core/exceptions.py


class DispatchError(Exception):
    """Base class for errors raised by the dispatch core."""


class InputError(DispatchError, ValueError):
    """
    Raised when the supplied snapshot cannot be optimized: no available units,
    no pending tasks, or an empty point set where one is required.
    """


class ConfigurationError(DispatchError, ValueError):
    """
    Raised for invalid tunables: unknown algorithm names, non-positive
    capacities, thresholds or cluster counts.
    """
