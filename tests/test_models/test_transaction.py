"""Tests for the Transaction model — forward-only status lifecycle."""

import pytest

from app.models.transaction import (
    LIFECYCLE_ORDER,
    Transaction,
    TransactionStatus,
    TransactionType,
)

S = TransactionStatus

FORWARD_PATH = [
    S.PAYMENT_RECEIVED,
    S.TRADE_COMPLETED,
    S.WITHDRAWAL_INITIATED,
    S.COMPLETED,
]


@pytest.fixture
def tx():
    return Transaction(reference_id="ref-001")


class TestTransactionCreation:
    def test_defaults(self, tx):
        assert tx.id is not None
        assert tx.status == S.PENDING
        assert tx.transaction_type == TransactionType.ONRAMP
        assert tx.created_at is not None
        assert tx.completed_at is None
        assert tx.step == 0
        assert not tx.is_terminal


class TestLifecycle:
    def test_walks_forward_to_completed(self, tx):
        for expected_step, status in enumerate(FORWARD_PATH, start=1):
            assert tx.advance_to(status) is True
            assert tx.step == expected_step
        assert tx.status == S.COMPLETED
        assert tx.completed_at is not None
        assert tx.is_terminal

    def test_intermediate_steps_may_be_skipped(self, tx):
        assert tx.advance_to(S.WITHDRAWAL_INITIATED) is True
        assert tx.status == S.WITHDRAWAL_INITIATED

    def test_backwards_event_is_ignored(self, tx):
        tx.advance_to(S.TRADE_COMPLETED)
        assert tx.advance_to(S.PAYMENT_RECEIVED) is False
        assert tx.status == S.TRADE_COMPLETED

    def test_repeated_event_is_ignored(self, tx):
        tx.advance_to(S.PAYMENT_RECEIVED)
        assert tx.advance_to(S.PAYMENT_RECEIVED) is False

    @pytest.mark.parametrize("start", [S.PENDING, *FORWARD_PATH[:-1]])
    def test_failed_reachable_from_any_non_terminal(self, start):
        tx = Transaction(reference_id="ref-002", status=start)
        assert tx.advance_to(S.FAILED) is True
        assert tx.step == 0
        assert tx.completed_at is None

    @pytest.mark.parametrize("terminal", [S.COMPLETED, S.FAILED])
    @pytest.mark.parametrize("target", list(S))
    def test_terminal_states_never_move(self, terminal, target):
        assert Transaction.can_advance(terminal, target) is False

    def test_order_covers_every_non_failed_status(self):
        assert set(LIFECYCLE_ORDER) == set(S) - {S.FAILED}
