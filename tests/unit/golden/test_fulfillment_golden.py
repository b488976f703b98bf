"""
Shipment workflow and fulfillment rules - Unit Tests (Golden)

Tests for:
- Shipment status adjacency
- Column updates that accompany each transition
- Fulfillment aggregation over order lines
- Batch stock and ordered quantity guards
"""

import itertools
from datetime import datetime, timezone

import pytest

from services.shipment_service.fulfillment import (
    CLOSED_SHIPMENT_STATUSES,
    EDITABLE_SHIPMENT_STATUSES,
    SHIPMENT_TRANSITIONS,
    allowed_transitions,
    can_transition,
    check_batch_stock,
    check_order_item_quantity,
    compute_fulfillment_status,
    transition_updates,
)
from services.shipment_service.models import FulfillmentStatus, ShipmentStatus

pytestmark = [pytest.mark.unit, pytest.mark.golden]

NOW = datetime(2026, 1, 19, 8, 30, tzinfo=timezone.utc)


# ============================================================================
# Transitions
# ============================================================================

class TestShipmentTransitions:
    """Golden: shipment status adjacency"""

    @pytest.mark.parametrize("current,target", [
        (ShipmentStatus.PENDING, ShipmentStatus.PREPARING),
        (ShipmentStatus.PENDING, ShipmentStatus.CANCELLED),
        (ShipmentStatus.PREPARING, ShipmentStatus.SHIPPING),
        (ShipmentStatus.PREPARING, ShipmentStatus.CANCELLED),
        (ShipmentStatus.SHIPPING, ShipmentStatus.DELIVERED),
    ])
    def test_allowed_transitions(self, current, target):
        assert can_transition(current, target) is True

    @pytest.mark.parametrize("current,target", [
        (ShipmentStatus.PENDING, ShipmentStatus.SHIPPING),
        (ShipmentStatus.PENDING, ShipmentStatus.DELIVERED),
        (ShipmentStatus.PREPARING, ShipmentStatus.PENDING),
        (ShipmentStatus.SHIPPING, ShipmentStatus.CANCELLED),
        (ShipmentStatus.SHIPPING, ShipmentStatus.PREPARING),
        (ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED),
        (ShipmentStatus.CANCELLED, ShipmentStatus.PENDING),
    ])
    def test_rejected_transitions(self, current, target):
        assert can_transition(current, target) is False

    @pytest.mark.parametrize("status", list(ShipmentStatus))
    def test_no_self_transition(self, status):
        assert can_transition(status, status) is False

    def test_terminal_statuses_have_no_exits(self):
        assert allowed_transitions(ShipmentStatus.DELIVERED) == ()
        assert allowed_transitions(ShipmentStatus.CANCELLED) == ()

    def test_every_status_is_mapped(self):
        assert set(SHIPMENT_TRANSITIONS) == set(ShipmentStatus)

    def test_editable_and_closed_sets(self):
        assert EDITABLE_SHIPMENT_STATUSES == (ShipmentStatus.PENDING, ShipmentStatus.PREPARING)
        assert set(CLOSED_SHIPMENT_STATUSES) == {ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED}


class TestTransitionUpdates:
    """Golden: side effects written with the new status"""

    def test_shipping_stamps_shipped_date(self):
        assert transition_updates(ShipmentStatus.SHIPPING, NOW) == {
            "status": "shipping",
            "shipped_date": NOW,
        }

    def test_delivered_stamps_delivered_date(self):
        assert transition_updates(ShipmentStatus.DELIVERED, NOW) == {
            "status": "delivered",
            "delivered_date": NOW,
        }

    def test_cancelled_clears_both_dates(self):
        assert transition_updates(ShipmentStatus.CANCELLED, NOW) == {
            "status": "cancelled",
            "shipped_date": None,
            "delivered_date": None,
        }

    def test_preparing_only_sets_status(self):
        assert transition_updates(ShipmentStatus.PREPARING, NOW) == {"status": "preparing"}


# ============================================================================
# Fulfillment aggregation
# ============================================================================

class TestComputeFulfillmentStatus:
    """Golden: order fulfillment from (ordered, shipped) pairs"""

    def test_nothing_shipped_is_processing(self):
        assert compute_fulfillment_status([(10, 0), (5, 0)]) == FulfillmentStatus.PROCESSING

    def test_no_lines_is_processing(self):
        assert compute_fulfillment_status([]) == FulfillmentStatus.PROCESSING

    def test_some_shipped_is_partial(self):
        assert compute_fulfillment_status([(10, 4), (5, 0)]) == FulfillmentStatus.PARTIALLY_FULFILLED

    def test_every_line_covered_is_fulfilled(self):
        assert compute_fulfillment_status([(10, 10), (5, 5)]) == FulfillmentStatus.FULFILLED

    def test_one_short_line_keeps_partial(self):
        assert compute_fulfillment_status([(10, 10), (5, 4)]) == FulfillmentStatus.PARTIALLY_FULFILLED

    def test_accepts_generator(self):
        pairs = ((ordered, ordered) for ordered in (1, 2, 3))
        assert compute_fulfillment_status(pairs) == FulfillmentStatus.FULFILLED

    def test_result_independent_of_line_order(self):
        lines = [(10, 10), (5, 2), (3, 0)]
        results = {compute_fulfillment_status(p) for p in itertools.permutations(lines)}
        assert results == {FulfillmentStatus.PARTIALLY_FULFILLED}

    def test_two_shipments_then_one_cancelled(self):
        """Ordered 10, shipments of 6 and 4; cancelling the 6 leaves 4 shipped"""
        assert compute_fulfillment_status([(10, 6 + 4)]) == FulfillmentStatus.FULFILLED
        assert compute_fulfillment_status([(10, 4)]) == FulfillmentStatus.PARTIALLY_FULFILLED


# ============================================================================
# Guards
# ============================================================================

class TestQuantityGuards:
    """Golden: rejection reasons for stock and ordered quantity"""

    def test_batch_stock_sufficient(self):
        assert check_batch_stock(available=10, requested=10) is None

    def test_batch_stock_insufficient(self):
        reason = check_batch_stock(available=3, requested=5)
        assert reason == "Insufficient batch stock: requested 5, available 3"

    def test_order_quantity_within_limit(self):
        assert check_order_item_quantity(quantity_ordered=10, already_shipped=6, requested=4) is None

    def test_order_quantity_exceeded(self):
        reason = check_order_item_quantity(quantity_ordered=10, already_shipped=6, requested=5)
        assert reason.startswith("Exceeds ordered quantity")
        assert "remaining 4" in reason

    def test_remaining_never_negative(self):
        reason = check_order_item_quantity(quantity_ordered=10, already_shipped=12, requested=1)
        assert "remaining 0" in reason
