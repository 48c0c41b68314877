"""
Flight bidding Pydantic models package.

View models returned to callers of the bid manager. They are built from ORM
rows and are safe to trim or reconcile without touching the database.
"""

from .enums import PirepState

from .flight import (
    FareOverrides,
    FareModel,
    AircraftModel,
    SubfleetModel,
    SimBriefModel,
    FlightModel,
)

from .bid import BidModel

__all__ = [
    # Enums
    "PirepState",

    # Flight models
    "FareOverrides",
    "FareModel",
    "AircraftModel",
    "SubfleetModel",
    "SimBriefModel",
    "FlightModel",

    # Bid models
    "BidModel",
]
