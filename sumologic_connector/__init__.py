"""Sumo Logic identity connector."""

__version__ = "0.1.0"
