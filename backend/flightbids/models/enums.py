"""
Enums for the flight bidding system.
"""

from enum import Enum


class PirepState(str, Enum):
    """Review state of a pilot report."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
