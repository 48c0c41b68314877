"""
Fare reconciliation for flight views.

A fare's effective values come from the base fare, then the subfleet pivot
overrides, then the flight pivot overrides. An override is either an absolute
value ("95") or a percentage of the value it replaces ("120%").
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Union

from ..models.flight import FareModel, FareOverrides, FlightModel

logger = logging.getLogger(__name__)

Number = Union[int, Decimal]


def apply_override(value: Number, override: Optional[str]) -> Decimal:
    """
    Apply a single override to a value.

    Args:
        value: The current value
        override: None/blank for no change, "N%" for a percentage, else absolute

    Returns:
        The overridden value as a Decimal
    """
    if override is None or str(override).strip() == "":
        return Decimal(value)

    override = str(override).strip()
    if override.endswith("%"):
        percent = Decimal(override[:-1])
        return Decimal(value) * percent / Decimal(100)

    return Decimal(override)


class FareService:
    """Folds pivot overrides into the fares of a flight view."""

    def get_fare_with_overrides(self, fare: FareModel, overrides: Optional[FareOverrides]) -> FareModel:
        """Return a copy of fare with overrides applied and cleared."""
        if overrides is None:
            return fare.model_copy(update={"overrides": None})

        capacity = apply_override(fare.capacity, overrides.capacity)
        return fare.model_copy(update={
            "price": apply_override(fare.price, overrides.price).quantize(Decimal("0.01"), ROUND_HALF_UP),
            "cost": apply_override(fare.cost, overrides.cost).quantize(Decimal("0.01"), ROUND_HALF_UP),
            "capacity": int(capacity.to_integral_value(ROUND_HALF_UP)),
            "overrides": None,
        })

    def get_reconciled_fares_for_flight(self, flight: FlightModel) -> FlightModel:
        """
        Reconcile every fare on the flight view.

        Subfleet fares get their own pivot overrides, then the flight's
        overrides for the same fare. Flight-level fares get the flight's
        overrides. Fares already reconciled are left as they are.

        Returns:
            The same flight view, updated in place
        """
        flight_overrides: Dict[int, Optional[FareOverrides]] = {
            fare.id: fare.overrides for fare in flight.fares
        }

        flight.fares = [self.get_fare_with_overrides(fare, fare.overrides) for fare in flight.fares]

        for subfleet in flight.subfleets:
            reconciled = []
            for fare in subfleet.fares:
                fare = self.get_fare_with_overrides(fare, fare.overrides)
                fare = self.get_fare_with_overrides(fare, flight_overrides.get(fare.id))
                reconciled.append(fare)
            subfleet.fares = reconciled

        logger.debug(f"Reconciled fares for flight {flight.ident}")
        return flight
