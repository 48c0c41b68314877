"""
flightbids: flight bid management for a flight-simulation network.

Pilots reserve flights through bids. Configurable policies decide how many bids
a pilot may hold and whether a flight can be shared; bids are released when the
pilot cancels or when the flight's PIREP is accepted.
"""

__version__ = "0.1.0"
