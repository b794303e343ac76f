"""Tests for per-item batch processing"""

from unittest.mock import Mock

import pytest

from metatasks.services.batch_processor import REJECTED_REASON, process_batch
from metatasks.utils.exceptions import Cancelled, RemoteApiError


class TestProcessBatch:
    """Failure isolation and ordering"""

    def test_failure_does_not_abort_remaining_items(self):
        def operation(identifier):
            if identifier == "B":
                raise RemoteApiError("Failed to delete post B: 500 - oops", status_code=500)
            return {"success": True}

        outcome = process_batch(["A", "B", "C"], operation)

        assert outcome.succeeded_ids == ["A", "C"]
        assert outcome.failed == ["B"]
        assert outcome.total_succeeded == 2
        assert outcome.total_failed == 1
        assert outcome.all_success is False
        assert "500" in outcome.items[1].reason

    def test_items_follow_input_order(self):
        outcome = process_batch(["z", "a", "m"], lambda identifier: identifier.upper())

        assert [item.identifier for item in outcome.items] == ["z", "a", "m"]
        assert outcome.succeeded == ["Z", "A", "M"]
        assert outcome.all_success is True

    def test_every_identifier_is_attempted(self):
        operation = Mock(side_effect=[ValueError("bad"), "ok", RuntimeError("worse")])

        outcome = process_batch(["1", "2", "3"], operation)

        assert operation.call_count == 3
        assert outcome.succeeded_ids == ["2"]
        assert outcome.failed == ["1", "3"]

    def test_rejected_result_counts_as_failure(self):
        results = {"A": {"success": True}, "B": {"success": False}}

        outcome = process_batch(["A", "B"], results.get, accept=lambda r: r.get("success") is True)

        assert outcome.succeeded_ids == ["A"]
        assert outcome.failed == ["B"]
        assert outcome.items[1].reason == REJECTED_REASON

    def test_cancellation_propagates(self):
        operation = Mock(side_effect=["ok", Cancelled(), "ok"])

        with pytest.raises(Cancelled):
            process_batch(["A", "B", "C"], operation)

        assert operation.call_count == 2

    def test_empty_batch(self):
        outcome = process_batch([], Mock())

        assert outcome.items == []
        assert outcome.all_success is True
