"""Delivery task assignment, routing, fleet sizing and base placement for unit fleets."""

__version__ = "0.1"
