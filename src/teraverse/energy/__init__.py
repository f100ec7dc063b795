"""
Energy — boundary prediction and the refresh scheduler.
"""

from teraverse.energy.model import (
    DEFAULT_MIN_DELAY,
    delay_for_state,
    next_boundary_delay,
    seconds_until_full,
)
from teraverse.energy.retry import RetryPolicy
from teraverse.energy.scheduler import EnergyScheduler, create_energy_scheduler

__all__ = [
    "DEFAULT_MIN_DELAY",
    "delay_for_state",
    "next_boundary_delay",
    "seconds_until_full",
    "RetryPolicy",
    "EnergyScheduler",
    "create_energy_scheduler",
]
