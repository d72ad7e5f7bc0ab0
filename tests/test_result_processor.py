"""Tests for result post-processing."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from hypothesis import given, settings, strategies as st

from bridgeyou.services.search.result_processor import is_corrected, process_rows, serialize


statuses = st.sampled_from(["pending", "approved", "rejected"])
corrections = st.lists(
    st.fixed_dictionaries({"status": statuses, "is_selected": st.booleans()}),
    max_size=5
)

POST_ID = UUID("6f1c0c1e-8c4b-4a53-9a3e-1b2f3c4d5e6f")


def make_row(**overrides):
    row = {
        "id": POST_ID,
        "title": "Entretien GS",
        "content": "Questions techniques",
        "upvotes": 3,
        "created_at": datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
        "bank": None,
        "corrections": "[]",
    }
    row.update(overrides)
    return row


@given(items=corrections)
@settings(max_examples=100)
def test_corrected_iff_any_approved(items):
    """
    Property: corrected is true exactly when some correction is approved.
    """
    rows = process_rows([make_row(corrections=json.dumps(items))])

    assert rows[0]["corrected"] == any(c["status"] == "approved" for c in items)


def test_json_columns_are_decoded():
    bank = {"id": "gs-id", "name": "Goldman Sachs", "logo_url": None}
    rows = process_rows([make_row(
        bank=json.dumps(bank),
        corrections=json.dumps([{"id": "c1", "status": "approved", "is_selected": True}])
    )])

    assert rows[0]["bank"] == bank
    assert rows[0]["corrections"][0]["id"] == "c1"
    assert rows[0]["corrected"] is True


def test_values_are_plain():
    row = process_rows([make_row(corrections=None)])[0]

    assert row["id"] == str(POST_ID)
    assert row["created_at"] == "2024-05-01T09:30:00+00:00"
    assert row["corrections"] == []
    assert row["corrected"] is False
    json.dumps(row)


def test_serialize_nested_values():
    value = {"amount": Decimal("1.5"), "ids": (POST_ID,), "nested": [{"at": datetime(2024, 1, 1)}]}

    assert serialize(value) == {
        "amount": 1.5,
        "ids": [str(POST_ID)],
        "nested": [{"at": "2024-01-01T00:00:00"}],
    }


def test_is_corrected_ignores_malformed_entries():
    assert is_corrected([None, "approved", {"status": "pending"}]) is False
    assert is_corrected(None) is False
