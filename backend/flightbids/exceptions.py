"""
Business-rule rejections raised by the bid manager.

These are permanent, policy-driven refusals rather than faults; callers should
not retry them. Each carries a status code and a to_dict() payload so an API
layer can render it directly.
"""

from typing import Any, Dict


class BidError(Exception):
    """Base class for bid rejections."""

    status_code = 400
    error_type = "bid-error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.error_type,
            "title": self.__class__.__name__,
            "status": self.status_code,
            "detail": self.message,
        }


class UserBidLimit(BidError):
    """User already holds a bid and multiple bids are not allowed."""

    error_type = "user-bid-limit"

    def __init__(self, user):
        self.user = user
        super().__init__(f"User \"{user.ident}\" has the maximum number of bids")


class BidExistsForFlight(BidError):
    """Flight already has a bid and the policy blocks further bids on it."""

    error_type = "bid-exists"

    def __init__(self, flight):
        self.flight = flight
        super().__init__(f"A bid already exists for flight \"{flight.ident}\"")
