"""
SQLAlchemy database models for the flight bidding system.

This module defines the persistent records the bid manager reads and writes:
- Airport: Airports keyed by ICAO code
- Rank, User: Pilots and the ranks that decide which subfleets they may fly
- Subfleet, Aircraft, Fare: Equipment and fare classes attached to flights
- Flight: Scheduled flights, carrying the denormalized has_bid flag
- Bid: A user's reservation on a flight, unique per (user, flight)
- SimBrief: Briefings a user generated for a flight
- Pirep: Flight reports whose acceptance can release a bid
"""

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, Numeric, String,
    Table, UniqueConstraint, Index,
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

# Create the declarative base for all models
Base = declarative_base()


# Plain association tables (no pivot data)
flight_subfleet = Table(
    'flight_subfleet',
    Base.metadata,
    Column('flight_id', Integer, ForeignKey('flights.id', ondelete='CASCADE'), primary_key=True),
    Column('subfleet_id', Integer, ForeignKey('subfleets.id', ondelete='CASCADE'), primary_key=True),
)

rank_subfleet = Table(
    'rank_subfleet',
    Base.metadata,
    Column('rank_id', Integer, ForeignKey('ranks.id', ondelete='CASCADE'), primary_key=True),
    Column('subfleet_id', Integer, ForeignKey('subfleets.id', ondelete='CASCADE'), primary_key=True),
)


class Airport(Base):
    """Airport keyed by its ICAO code."""
    __tablename__ = 'airports'

    id = Column(String(5), primary_key=True)  # ICAO code (e.g., 'KJFK')
    iata = Column(String(3), nullable=True, index=True)
    name = Column(String(100), nullable=False)

    def __repr__(self):
        return f"<Airport(id='{self.id}', name='{self.name}')>"


class Rank(Base):
    """
    Pilot rank.

    A rank lists the subfleets its pilots are allowed to fly; the flight
    service uses it to trim subfleets when aircraft are restricted to rank.
    """
    __tablename__ = 'ranks'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)

    subfleets = relationship("Subfleet", secondary=rank_subfleet, back_populates="ranks", lazy="select")
    users = relationship("User", back_populates="rank", lazy="select")

    def __repr__(self):
        return f"<Rank(id={self.id}, name='{self.name}')>"


class User(Base):
    """Pilot account. Bids and PIREPs are owned by a user."""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    pilot_id = Column(Integer, nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    airline_code = Column(String(3), nullable=False, default='VMS')
    rank_id = Column(Integer, ForeignKey('ranks.id'), nullable=True, index=True)

    rank = relationship("Rank", back_populates="users", lazy="select")
    bids = relationship("Bid", back_populates="user", lazy="select", passive_deletes=True)

    @property
    def ident(self) -> str:
        """Pilot ident, e.g. VMS0042."""
        return f"{self.airline_code}{self.pilot_id:04d}"

    def __repr__(self):
        return f"<User(id={self.id}, ident='{self.ident}')>"


class Fare(Base):
    """Fare class with base price, cost and capacity."""
    __tablename__ = 'fares'

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(10), nullable=False, unique=True)  # e.g., 'Y', 'J'
    name = Column(String(50), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    capacity = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Fare(id={self.id}, code='{self.code}')>"


class Subfleet(Base):
    """Group of aircraft of one type, with its own fare overrides."""
    __tablename__ = 'subfleets'

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(50), nullable=False, unique=True)  # e.g., 'B738-SW'
    name = Column(String(100), nullable=False)

    aircraft = relationship("Aircraft", back_populates="subfleet", lazy="select")
    fares = relationship("SubfleetFare", back_populates="subfleet", lazy="select", cascade="all, delete-orphan")
    ranks = relationship("Rank", secondary=rank_subfleet, back_populates="subfleets", lazy="select")
    flights = relationship("Flight", secondary=flight_subfleet, back_populates="subfleets", lazy="select")

    def __repr__(self):
        return f"<Subfleet(id={self.id}, type='{self.type}')>"


class Aircraft(Base):
    """Single airframe, parked at an airport."""
    __tablename__ = 'aircraft'

    id = Column(Integer, primary_key=True, autoincrement=True)
    subfleet_id = Column(Integer, ForeignKey('subfleets.id'), nullable=False, index=True)
    registration = Column(String(10), nullable=False, unique=True)
    name = Column(String(50), nullable=True)
    airport_id = Column(String(5), ForeignKey('airports.id'), nullable=True, index=True)

    subfleet = relationship("Subfleet", back_populates="aircraft", lazy="select")

    def __repr__(self):
        return f"<Aircraft(id={self.id}, registration='{self.registration}')>"


class SubfleetFare(Base):
    """
    Fare attached to a subfleet.

    Override columns hold either an absolute value ('95') or a percentage of
    the base fare value ('120%'). NULL means no override.
    """
    __tablename__ = 'subfleet_fare'

    subfleet_id = Column(Integer, ForeignKey('subfleets.id', ondelete='CASCADE'), primary_key=True)
    fare_id = Column(Integer, ForeignKey('fares.id', ondelete='CASCADE'), primary_key=True)
    price = Column(String(10), nullable=True)
    cost = Column(String(10), nullable=True)
    capacity = Column(String(10), nullable=True)

    subfleet = relationship("Subfleet", back_populates="fares", lazy="select")
    fare = relationship("Fare", lazy="joined")


class FlightFare(Base):
    """Fare attached to a flight, with the same override rules as SubfleetFare."""
    __tablename__ = 'flight_fare'

    flight_id = Column(Integer, ForeignKey('flights.id', ondelete='CASCADE'), primary_key=True)
    fare_id = Column(Integer, ForeignKey('fares.id', ondelete='CASCADE'), primary_key=True)
    price = Column(String(10), nullable=True)
    cost = Column(String(10), nullable=True)
    capacity = Column(String(10), nullable=True)

    flight = relationship("Flight", back_populates="fares", lazy="select")
    fare = relationship("Fare", lazy="joined")


class Flight(Base):
    """
    Scheduled flight.

    has_bid is a cache of "at least one Bid references this flight"; only the
    bid manager writes it.
    """
    __tablename__ = 'flights'

    id = Column(Integer, primary_key=True, autoincrement=True)
    airline_code = Column(String(3), nullable=False)
    flight_number = Column(String(10), nullable=False, index=True)
    dpt_airport_id = Column(String(5), ForeignKey('airports.id'), nullable=False, index=True)
    arr_airport_id = Column(String(5), ForeignKey('airports.id'), nullable=False, index=True)
    distance = Column(Float, nullable=True)  # nautical miles
    flight_time = Column(Integer, nullable=True)  # minutes
    active = Column(Boolean, nullable=False, default=True)
    visible = Column(Boolean, nullable=False, default=True)
    has_bid = Column(Boolean, nullable=False, default=False)

    dpt_airport = relationship("Airport", foreign_keys=[dpt_airport_id], lazy="select")
    arr_airport = relationship("Airport", foreign_keys=[arr_airport_id], lazy="select")
    subfleets = relationship("Subfleet", secondary=flight_subfleet, back_populates="flights", lazy="select")
    fares = relationship("FlightFare", back_populates="flight", lazy="select", cascade="all, delete-orphan")
    bids = relationship("Bid", back_populates="flight", lazy="select", passive_deletes=True)
    simbrief = relationship("SimBrief", back_populates="flight", lazy="select")

    @property
    def ident(self) -> str:
        """Flight ident, e.g. VMS1234."""
        return f"{self.airline_code}{self.flight_number}"

    def __repr__(self):
        return f"<Flight(id={self.id}, ident='{self.ident}', has_bid={self.has_bid})>"


class Bid(Base):
    """A user's reservation on a flight."""
    __tablename__ = 'bids'
    __table_args__ = (
        UniqueConstraint('user_id', 'flight_id', name='uq_bids_user_flight'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    flight_id = Column(Integer, ForeignKey('flights.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="bids", lazy="select")
    flight = relationship("Flight", back_populates="bids", lazy="select")

    def __repr__(self):
        return f"<Bid(id={self.id}, user_id={self.user_id}, flight_id={self.flight_id})>"


class SimBrief(Base):
    """SimBrief OFP a user generated for a flight."""
    __tablename__ = 'simbrief'

    id = Column(String(36), primary_key=True)  # SimBrief OFP id
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    flight_id = Column(Integer, ForeignKey('flights.id', ondelete='CASCADE'), nullable=True, index=True)
    aircraft_id = Column(Integer, ForeignKey('aircraft.id'), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    flight = relationship("Flight", back_populates="simbrief", lazy="select")
    aircraft = relationship("Aircraft", lazy="select")

    def __repr__(self):
        return f"<SimBrief(id='{self.id}', user_id={self.user_id}, flight_id={self.flight_id})>"


class Pirep(Base):
    """Pilot report for a flown leg. flight_id is empty for free-flight reports."""
    __tablename__ = 'pireps'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    flight_id = Column(Integer, ForeignKey('flights.id', ondelete='SET NULL'), nullable=True, index=True)
    state = Column(String(20), nullable=False, default='pending')
    submitted_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", lazy="select")
    flight = relationship("Flight", lazy="select")

    def __repr__(self):
        return f"<Pirep(id={self.id}, user_id={self.user_id}, flight_id={self.flight_id}, state='{self.state}')>"


# Composite indexes for the lookups the bid manager runs
Index('idx_flight_route', Flight.dpt_airport_id, Flight.arr_airport_id)
Index('idx_simbrief_user_flight', SimBrief.user_id, SimBrief.flight_id)


def create_all_tables(engine):
    """
    Create all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.create_all(bind=engine)


def drop_all_tables(engine):
    """
    Drop all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.drop_all(bind=engine)


__all__ = [
    'Base',
    'Airport',
    'Rank',
    'User',
    'Fare',
    'Subfleet',
    'Aircraft',
    'SubfleetFare',
    'FlightFare',
    'Flight',
    'Bid',
    'SimBrief',
    'Pirep',
    'create_all_tables',
    'drop_all_tables',
]
