"""
Shared fixtures: an in-memory database seeded with a small network.

Network layout:
- Airports KJFK, KLAX, KBOS
- Subfleet B738 (N101 at KJFK, N102 at KLAX), subfleet A320 (N201 at KBOS)
- Rank Captain flies both subfleets, rank Cadet flies B738 only
- Flights VMS100 KJFK-KLAX (B738, A320), VMS200 KLAX-KBOS (B738),
  VMS300 KBOS-KJFK (A320)
- Users: captain (Captain), cadet (Cadet), guest (no rank)
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from flightbids.database.config import DatabaseConfig
from flightbids.database.models import (
    Aircraft, Airport, Fare, Flight, FlightFare, Rank, Subfleet, SubfleetFare, User,
)
from flightbids.services.bid_manager import BidManager
from flightbids.utils.config import BidSettings


@pytest.fixture
def db_config():
    """Create a test database configuration."""
    config = DatabaseConfig(database_url="sqlite:///:memory:")
    config.create_tables()
    yield config
    config.close()


@pytest.fixture
def session(db_config):
    """Create a database session for testing."""
    with db_config.get_session_context() as session:
        yield session


@pytest.fixture
def network(session):
    """Seed airports, equipment, fares, flights and users."""
    session.add_all([
        Airport(id="KJFK", iata="JFK", name="John F Kennedy Intl"),
        Airport(id="KLAX", iata="LAX", name="Los Angeles Intl"),
        Airport(id="KBOS", iata="BOS", name="Boston Logan Intl"),
    ])
    session.flush()

    economy = Fare(code="Y", name="Economy", price=Decimal("100.00"), cost=Decimal("50.00"), capacity=150)
    business = Fare(code="J", name="Business", price=Decimal("500.00"), cost=Decimal("200.00"), capacity=20)

    b738 = Subfleet(type="B738", name="Boeing 737-800")
    a320 = Subfleet(type="A320", name="Airbus A320")
    b738.aircraft = [
        Aircraft(registration="N101", name="Ship 101", airport_id="KJFK"),
        Aircraft(registration="N102", name="Ship 102", airport_id="KLAX"),
    ]
    a320.aircraft = [Aircraft(registration="N201", name="Ship 201", airport_id="KBOS")]
    b738.fares = [
        SubfleetFare(fare=economy, price="110%"),
        SubfleetFare(fare=business),
    ]
    a320.fares = [SubfleetFare(fare=economy, capacity="180")]

    captain_rank = Rank(name="Captain", subfleets=[b738, a320])
    cadet_rank = Rank(name="Cadet", subfleets=[b738])

    vms100 = Flight(
        airline_code="VMS", flight_number="100", dpt_airport_id="KJFK", arr_airport_id="KLAX",
        distance=2145.0, flight_time=330, subfleets=[b738, a320],
    )
    vms100.fares = [FlightFare(fare=economy, cost="60")]
    vms200 = Flight(
        airline_code="VMS", flight_number="200", dpt_airport_id="KLAX", arr_airport_id="KBOS",
        distance=2260.0, flight_time=345, subfleets=[b738],
    )
    vms300 = Flight(
        airline_code="VMS", flight_number="300", dpt_airport_id="KBOS", arr_airport_id="KJFK",
        distance=160.0, flight_time=75, subfleets=[a320],
    )

    captain = User(pilot_id=1, name="Ada Captain", rank=captain_rank)
    cadet = User(pilot_id=2, name="Ben Cadet", rank=cadet_rank)
    guest = User(pilot_id=3, name="Cy Guest")

    session.add_all([
        economy, business, b738, a320, captain_rank, cadet_rank,
        vms100, vms200, vms300, captain, cadet, guest,
    ])
    session.flush()

    return SimpleNamespace(
        economy=economy, business=business,
        b738=b738, a320=a320,
        vms100=vms100, vms200=vms200, vms300=vms300,
        captain=captain, cadet=cadet, guest=guest,
    )


@pytest.fixture
def make_manager(session):
    """Build a BidManager over the test session with the given settings."""
    def _make(**settings):
        return BidManager(session, BidSettings(**settings))
    return _make
