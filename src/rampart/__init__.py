"""RAMPART: area-defense simulation and placement optimization core."""

__version__ = "0.1.0"
