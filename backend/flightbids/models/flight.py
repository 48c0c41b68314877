"""
Flight-related Pydantic view models for the flight bidding system.

Views are detached copies of the ORM rows. The flight and fare services trim
and reconcile them in memory, so nothing done to a view reaches the database.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class FareOverrides(BaseModel):
    """Raw override values from a subfleet or flight fare pivot ('95' or '120%')."""
    model_config = ConfigDict(from_attributes=True)

    price: Optional[str] = None
    cost: Optional[str] = None
    capacity: Optional[str] = None


class FareModel(BaseModel):
    """
    Fare class as seen on a flight or subfleet.

    price, cost and capacity hold the effective values. overrides is set
    until the fare service has folded it into those values.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str = Field(..., max_length=10, description="Fare code")
    name: str = Field(..., max_length=50, description="Fare name")
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Ticket price")
    cost: Decimal = Field(default=Decimal("0"), ge=0, description="Cost per seat")
    capacity: int = Field(default=0, ge=0, description="Seat capacity")
    overrides: Optional[FareOverrides] = None

    @classmethod
    def from_pivot(cls, pivot) -> "FareModel":
        """Build a view from a SubfleetFare/FlightFare row and its base fare."""
        fare = pivot.fare
        return cls(
            id=fare.id,
            code=fare.code,
            name=fare.name,
            price=fare.price,
            cost=fare.cost,
            capacity=fare.capacity,
            overrides=FareOverrides.model_validate(pivot),
        )


class AircraftModel(BaseModel):
    """Single airframe."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    subfleet_id: int
    registration: str = Field(..., max_length=10, description="Registration")
    name: Optional[str] = None
    airport_id: Optional[str] = Field(None, max_length=5, description="Current airport")


class SubfleetModel(BaseModel):
    """Subfleet with its aircraft and fares."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    name: str
    aircraft: List[AircraftModel] = Field(default_factory=list)
    fares: List[FareModel] = Field(default_factory=list)

    @classmethod
    def from_record(cls, subfleet) -> "SubfleetModel":
        return cls(
            id=subfleet.id,
            type=subfleet.type,
            name=subfleet.name,
            aircraft=[AircraftModel.model_validate(ac) for ac in subfleet.aircraft],
            fares=[FareModel.from_pivot(pivot) for pivot in subfleet.fares],
        )


class SimBriefModel(BaseModel):
    """SimBrief OFP attached to a flight."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: int
    flight_id: Optional[int] = None
    aircraft_id: Optional[int] = None
    created_at: datetime
    aircraft: Optional[AircraftModel] = None
    subfleet: Optional[SubfleetModel] = None


class FlightModel(BaseModel):
    """Flight view with equipment, fares and briefings."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    ident: str = Field(..., description="Airline code + flight number")
    airline_code: str
    flight_number: str
    dpt_airport_id: str
    arr_airport_id: str
    distance: Optional[float] = None
    flight_time: Optional[int] = None
    has_bid: bool = False
    subfleets: List[SubfleetModel] = Field(default_factory=list)
    fares: List[FareModel] = Field(default_factory=list)
    simbrief: Optional[SimBriefModel] = None

    @classmethod
    def from_record(cls, flight, simbrief=None) -> "FlightModel":
        """
        Build a view from a Flight row.

        Args:
            flight: Flight ORM instance with relations loaded
            simbrief: The requesting user's SimBrief row for this flight, if any
        """
        brief = None
        if simbrief is not None:
            brief = SimBriefModel.model_validate(simbrief)
            if simbrief.aircraft is not None:
                brief.subfleet = SubfleetModel.from_record(simbrief.aircraft.subfleet)

        return cls(
            id=flight.id,
            ident=flight.ident,
            airline_code=flight.airline_code,
            flight_number=flight.flight_number,
            dpt_airport_id=flight.dpt_airport_id,
            arr_airport_id=flight.arr_airport_id,
            distance=flight.distance,
            flight_time=flight.flight_time,
            has_bid=flight.has_bid,
            subfleets=[SubfleetModel.from_record(sf) for sf in flight.subfleets],
            fares=[FareModel.from_pivot(pivot) for pivot in flight.fares],
            simbrief=brief,
        )
