"""
Business logic services for the flight bidding system.
"""

from .fare_service import FareService, apply_override
from .flight_service import FlightService
from .bid_manager import BidManager
from .pirep_service import PirepService

__all__ = [
    'FareService',
    'apply_override',
    'FlightService',
    'BidManager',
    'PirepService',
]
