"""
Tests for PIREP review and the bid release it triggers.
"""

from unittest.mock import MagicMock

from flightbids.database.models import Bid, Pirep
from flightbids.models import PirepState
from flightbids.services.pirep_service import PirepService


def file_pirep(session, user, flight):
    pirep = Pirep(user=user, flight=flight)
    session.add(pirep)
    session.flush()
    return pirep


class TestPirepService:
    """Accept and reject flows."""

    def test_accept_releases_bid_when_enabled(self, session, network, make_manager):
        manager = make_manager(remove_bid_on_accept=True)
        manager.add_bid(network.vms100, network.captain)
        pirep = file_pirep(session, network.captain, network.vms100)

        PirepService(session, manager).accept(pirep)

        assert pirep.state == PirepState.ACCEPTED.value
        assert session.query(Bid).count() == 0
        assert network.vms100.has_bid is False

    def test_accept_keeps_bid_when_disabled(self, session, network, make_manager):
        manager = make_manager(remove_bid_on_accept=False)
        manager.add_bid(network.vms100, network.captain)
        pirep = file_pirep(session, network.captain, network.vms100)

        PirepService(session, manager).accept(pirep)

        assert pirep.state == PirepState.ACCEPTED.value
        assert session.query(Bid).count() == 1

    def test_accept_twice_is_noop(self, session, network):
        manager = MagicMock()
        service = PirepService(session, manager)
        pirep = file_pirep(session, network.captain, network.vms100)

        service.accept(pirep)
        service.accept(pirep)

        manager.remove_bid_for_report.assert_called_once_with(pirep)

    def test_reject_keeps_bid(self, session, network, make_manager):
        manager = make_manager(remove_bid_on_accept=True)
        manager.add_bid(network.vms100, network.captain)
        pirep = file_pirep(session, network.captain, network.vms100)

        PirepService(session, manager).reject(pirep)

        assert pirep.state == PirepState.REJECTED.value
        assert session.query(Bid).count() == 1
