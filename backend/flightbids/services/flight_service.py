"""
Subfleet filtering for flight views.
"""

import logging
from typing import Set

from ..database.models import User
from ..models.flight import FlightModel
from ..utils.config import BidSettings

logger = logging.getLogger(__name__)


class FlightService:
    """
    Trims the subfleets and aircraft a user is offered on a flight.

    Both filters are driven by settings:
    - pireps.restrict_aircraft_to_rank: keep subfleets the user's rank allows
    - pireps.only_aircraft_at_dpt_airport: keep aircraft at the departure airport
    """

    def __init__(self, settings: BidSettings):
        self.settings = settings

    def get_allowed_subfleet_ids(self, user: User) -> Set[int]:
        """Subfleet IDs the user's rank may fly. Users without a rank get none."""
        if user.rank is None:
            return set()
        return {subfleet.id for subfleet in user.rank.subfleets}

    def filter_subfleets(self, user: User, flight: FlightModel) -> FlightModel:
        """
        Filter the subfleets on a flight view for a user.

        Returns:
            The same flight view, updated in place
        """
        subfleets = flight.subfleets

        if self.settings.get("pireps.restrict_aircraft_to_rank", False):
            allowed = self.get_allowed_subfleet_ids(user)
            subfleets = [sf for sf in subfleets if sf.id in allowed]

        if self.settings.get("pireps.only_aircraft_at_dpt_airport", False):
            for subfleet in subfleets:
                subfleet.aircraft = [
                    ac for ac in subfleet.aircraft if ac.airport_id == flight.dpt_airport_id
                ]

        dropped = len(flight.subfleets) - len(subfleets)
        if dropped:
            logger.debug(f"Filtered {dropped} subfleet(s) from flight {flight.ident} for user {user.ident}")

        flight.subfleets = subfleets
        return flight
