from itertools import product

import pytest

from core.transitions import InvalidTransition, TransitionTable, build_event
from invoices.models import INVOICE_TRANSITIONS, InvoiceImage
from shipments.models import SHIPMENT_TRANSITIONS, CourierShipment

SHIPMENT_EDGES = {
    ("PENDING", "SENT"), ("PENDING", "FAILED"),
    ("SENT", "IN_TRANSIT"), ("SENT", "FAILED"), ("SENT", "DELIVERED"),
    ("IN_TRANSIT", "DELIVERED"), ("IN_TRANSIT", "RETURNED"), ("IN_TRANSIT", "FAILED"),
    ("DELIVERED", "RETURNED"),
    ("FAILED", "PENDING"),
}

INVOICE_EDGES = {
    ("PENDING", "PROCESSING"), ("PENDING", "FAILED"),
    ("PROCESSING", "PROCESSED"), ("PROCESSING", "FAILED"),
    ("PROCESSED", "PENDING"),
    ("FAILED", "PENDING"),
}

SHIPMENT_PAIRS = list(product(CourierShipment.Status.values, repeat=2))
INVOICE_PAIRS = list(product(InvoiceImage.Status.values, repeat=2))


@pytest.mark.parametrize("current,requested", SHIPMENT_PAIRS)
def test_shipment_table_matches_allow_list(current, requested):
    if (current, requested) in SHIPMENT_EDGES:
        event = SHIPMENT_TRANSITIONS.transition(current, requested)
        assert event["status"] == requested
    else:
        with pytest.raises(InvalidTransition):
            SHIPMENT_TRANSITIONS.transition(current, requested)


@pytest.mark.parametrize("current,requested", INVOICE_PAIRS)
def test_invoice_table_matches_allow_list(current, requested):
    if (current, requested) in INVOICE_EDGES:
        event = INVOICE_TRANSITIONS.transition(current, requested)
        assert event["status"] == requested
    else:
        with pytest.raises(InvalidTransition):
            INVOICE_TRANSITIONS.transition(current, requested)


def test_tables_expose_exactly_their_edges():
    assert set(SHIPMENT_TRANSITIONS) == SHIPMENT_EDGES
    assert set(INVOICE_TRANSITIONS) == INVOICE_EDGES


def test_returned_is_terminal():
    assert SHIPMENT_TRANSITIONS.allowed_from("RETURNED") == frozenset()


def test_invalid_transition_message_and_value_error():
    with pytest.raises(ValueError) as excinfo:
        SHIPMENT_TRANSITIONS.validate("DELIVERED", "SENT")
    assert str(excinfo.value) == "Cannot transition from DELIVERED to SENT"
    assert excinfo.value.current == "DELIVERED"
    assert excinfo.value.requested == "SENT"


def test_self_transition_needs_explicit_edge():
    table = TransitionTable("demo", {"A": {"A", "B"}, "B": set()})
    assert table.can_transition("A", "A")
    assert not table.can_transition("B", "B")


def test_transition_event_carries_optional_fields():
    event = SHIPMENT_TRANSITIONS.transition(
        "SENT",
        "IN_TRANSIT",
        notes="Left hub",
        location="Leipzig",
        user_id=42,
        timestamp="2026-01-02T10:00:00+00:00",
    )
    assert event == {
        "status": "IN_TRANSIT",
        "timestamp": "2026-01-02T10:00:00+00:00",
        "notes": "Left hub",
        "location": "Leipzig",
        "user_id": "42",
    }


def test_build_event_defaults_timestamp_and_skips_missing_fields():
    event = build_event("PENDING")
    assert event["status"] == "PENDING"
    assert event["timestamp"]
    assert "notes" not in event
    assert "location" not in event
