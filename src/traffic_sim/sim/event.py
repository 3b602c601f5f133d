# sim/event.py
from dataclasses import dataclass


@dataclass(order=True)
class BaseEvent:
    """Timer event scheduled on the kernel at simulated time ``t`` (seconds)."""

    t: float
