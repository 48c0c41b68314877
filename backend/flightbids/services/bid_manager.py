"""
Bid manager: the reservation rules for flight bids.

A bid is a user's reservation of intent to fly a flight. The manager decides
whether a bid may be placed, keeps the Flight.has_bid cache in step with the
bids table, and releases bids on cancellation or PIREP acceptance.

All work happens inside the caller's session. The manager flushes but never
commits; the request's session context owns the transaction.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..database.models import (
    Aircraft, Bid, Flight, FlightFare, Pirep, SimBrief, Subfleet, SubfleetFare, User,
)
from ..exceptions import BidExistsForFlight, UserBidLimit
from ..models.bid import BidModel
from ..utils.config import BidSettings
from .fare_service import FareService
from .flight_service import FlightService


class BidManager:
    """
    Places, lists and releases bids.

    Features:
    - Per-user bid limit and per-flight blocking, driven by BidSettings
    - Idempotent bidding: one row per (user, flight), however often it is asked for
    - Flight.has_bid kept equal to "the flight has at least one bid"
    - Bid views with subfleets filtered and fares reconciled for the user
    """

    def __init__(
        self,
        session: Session,
        settings: BidSettings,
        fare_service: Optional[FareService] = None,
        flight_service: Optional[FlightService] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the bid manager.

        Args:
            session: Request-scoped SQLAlchemy session
            settings: Bid and PIREP policy switches
            fare_service: Fare reconciliation collaborator
            flight_service: Subfleet filtering collaborator
            logger: Sink for informational events, defaults to the module logger
        """
        self.session = session
        self.settings = settings
        self.fare_service = fare_service or FareService()
        self.flight_service = flight_service or FlightService(settings)
        self.logger = logger or logging.getLogger(__name__)

    # Lookups

    def get_bid(self, bid_id: int) -> Optional[Bid]:
        """Fetch a bid with its flight and the flight's briefings loaded."""
        return (
            self.session.query(Bid)
            .options(joinedload(Bid.flight).selectinload(Flight.simbrief))
            .filter(Bid.id == bid_id)
            .first()
        )

    def find_bids_for_user(self, user: User) -> List[BidModel]:
        """
        Fetch all of a user's bids as views, oldest first.

        Each flight view is trimmed to the subfleets the user may fly and has
        its fares reconciled. Only the views change; no rows are written.
        """
        bids = (
            self.session.query(Bid)
            .options(
                joinedload(Bid.flight).options(
                    selectinload(Flight.fares).joinedload(FlightFare.fare),
                    selectinload(Flight.subfleets).options(
                        selectinload(Subfleet.aircraft),
                        selectinload(Subfleet.fares).joinedload(SubfleetFare.fare),
                    ),
                )
            )
            .filter(Bid.user_id == user.id)
            .order_by(Bid.created_at, Bid.id)
            .all()
        )

        simbriefs = self._simbriefs_for_user(user, [bid.flight_id for bid in bids])

        views = []
        for bid in bids:
            view = BidModel.from_record(bid, simbrief=simbriefs.get(bid.flight_id))
            view.flight = self.flight_service.filter_subfleets(user, view.flight)
            view.flight = self.fare_service.get_reconciled_fares_for_flight(view.flight)
            views.append(view)

        return views

    # Mutations

    def add_bid(self, flight: Flight, user: User) -> Bid:
        """
        Place a bid for a user on a flight.

        Returns:
            The new bid, or the user's existing bid on this flight

        Raises:
            UserBidLimit: The user already has a bid and multiple bids are off
            BidExistsForFlight: The flight is taken and the policy blocks sharing
        """
        allow_multiple = self.settings.get("bids.allow_multiple_bids", False)

        self._lock_user(user)
        bid_count = self.session.query(Bid).filter(Bid.user_id == user.id).count()
        if bid_count > 0 and not allow_multiple:
            # A repeat bid on the same flight is answered below, not refused
            if self._find_bid(user, flight) is None:
                raise UserBidLimit(user)

        bids = self.session.query(Bid).filter(Bid.flight_id == flight.id).all()
        if bids:
            if not flight.has_bid:
                flight.has_bid = True
                self.session.flush()

            for bid in bids:
                if bid.user_id == user.id:
                    self.logger.info(f"Bid exists, user={user.ident}, flight={flight.id}")
                    return bid

            if self.settings.get("bids.disable_flight_on_bid", False):
                raise BidExistsForFlight(flight)

            if not allow_multiple:
                raise BidExistsForFlight(flight)

        elif flight.has_bid:
            self.logger.info(f"Bid exists, flight={flight.id}; no entry in bids table, cleaning up")

        bid = self._first_or_create(user, flight)

        flight.has_bid = True
        self.session.flush()

        return self.get_bid(bid.id)

    def remove_bid(self, flight: Flight, user: User) -> None:
        """Delete the user's bid(s) on a flight. Missing bids are not an error."""
        bids = (
            self.session.query(Bid)
            .filter(Bid.flight_id == flight.id, Bid.user_id == user.id)
            .all()
        )

        for bid in bids:
            self.session.delete(bid)
        self.session.flush()

        self._sync_has_bid(flight)

    def remove_bid_for_report(self, pirep: Pirep) -> None:
        """Release the bid behind an accepted PIREP, if the setting asks for it."""
        if not self.settings.get("pireps.remove_bid_on_accept", False):
            return

        flight = pirep.flight
        if flight is None:
            return

        self.logger.info(f"Bid for user: {pirep.user.ident} on flight {flight.ident}")
        self.remove_bid(flight, pirep.user)

    # Helpers

    def _find_bid(self, user: User, flight: Flight) -> Optional[Bid]:
        return (
            self.session.query(Bid)
            .filter(Bid.user_id == user.id, Bid.flight_id == flight.id)
            .first()
        )

    def _first_or_create(self, user: User, flight: Flight) -> Bid:
        """
        Return the (user, flight) bid, inserting it if missing.

        The insert runs in a savepoint; losing a race against a concurrent
        insert trips the unique constraint, and the winner's row is returned.
        """
        bid = self._find_bid(user, flight)
        if bid is not None:
            return bid

        try:
            with self.session.begin_nested():
                bid = Bid(user_id=user.id, flight_id=flight.id)
                self.session.add(bid)
        except IntegrityError:
            self.logger.info(f"Bid for user={user.ident}, flight={flight.id} created concurrently")
            bid = self._find_bid(user, flight)
            if bid is None:
                raise

        return bid

    def _lock_user(self, user: User) -> None:
        # Serializes bid placement per user (no-op on SQLite)
        self.session.query(User.id).filter(User.id == user.id).with_for_update().one_or_none()

    def _sync_has_bid(self, flight: Flight) -> None:
        remaining = self.session.query(Bid).filter(Bid.flight_id == flight.id).count()
        has_bid = remaining > 0
        if flight.has_bid != has_bid:
            flight.has_bid = has_bid
            self.session.flush()

    def _simbriefs_for_user(self, user: User, flight_ids: List[int]) -> Dict[int, SimBrief]:
        """The user's latest briefing per flight, fetched in one query."""
        if not flight_ids:
            return {}

        rows = (
            self.session.query(SimBrief)
            .options(joinedload(SimBrief.aircraft).joinedload(Aircraft.subfleet))
            .filter(SimBrief.user_id == user.id, SimBrief.flight_id.in_(flight_ids))
            .order_by(SimBrief.created_at)
            .all()
        )
        return {row.flight_id: row for row in rows}
