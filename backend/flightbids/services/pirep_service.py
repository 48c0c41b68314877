"""
PIREP review: accepting or rejecting pilot reports.
"""

import logging

from sqlalchemy.orm import Session

from ..database.models import Pirep
from ..models.enums import PirepState
from .bid_manager import BidManager

logger = logging.getLogger(__name__)


class PirepService:
    """Moves PIREPs through review and releases bids on acceptance."""

    def __init__(self, session: Session, bid_manager: BidManager):
        self.session = session
        self.bid_manager = bid_manager

    def accept(self, pirep: Pirep) -> Pirep:
        """
        Accept a PIREP and release the bid on its flight.

        Whether the bid is actually removed is up to the
        pireps.remove_bid_on_accept setting. Accepting twice is a no-op.
        """
        if pirep.state == PirepState.ACCEPTED.value:
            return pirep

        pirep.state = PirepState.ACCEPTED.value
        self.session.flush()
        logger.info(f"PIREP {pirep.id} accepted")

        self.bid_manager.remove_bid_for_report(pirep)
        return pirep

    def reject(self, pirep: Pirep) -> Pirep:
        """Reject a PIREP. The bid on its flight is kept."""
        pirep.state = PirepState.REJECTED.value
        self.session.flush()
        logger.info(f"PIREP {pirep.id} rejected")
        return pirep
