"""SIM module."""

from .sim import ISim, Sim

__all__ = ["ISim", "Sim"]
