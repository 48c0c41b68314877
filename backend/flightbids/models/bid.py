"""
Bid view model for the flight bidding system.
"""

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from .flight import FlightModel


class BidModel(BaseModel):
    """A user's bid together with the flight view it reserves."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int = Field(..., description="Bidding user ID")
    flight_id: int = Field(..., description="Reserved flight ID")
    created_at: datetime
    flight: FlightModel

    @classmethod
    def from_record(cls, bid, simbrief=None) -> "BidModel":
        return cls(
            id=bid.id,
            user_id=bid.user_id,
            flight_id=bid.flight_id,
            created_at=bid.created_at,
            flight=FlightModel.from_record(bid.flight, simbrief=simbrief),
        )
