from decimal import Decimal

from poker_control.domain import AuditStatus, compute_chip_audit, lifecycle

from tests.factories import started_game


def _declare(cashouts: dict[str, str]):
    state = lifecycle.end_game(started_game(names=("alice", "bob")))
    for player_id, amount in cashouts.items():
        state = lifecycle.submit_cashout(state, player_id, amount)
    return state


def test_short_cashouts_report_missing_chips() -> None:
    audit = compute_chip_audit(_declare({"p1": "60", "p2": "15"}))

    assert audit.total_chips == Decimal("80")
    assert audit.total_cashout_declared == Decimal("75")
    assert audit.chips_difference == Decimal("5")
    assert audit.status is AuditStatus.CHIPS_MISSING
    assert not audit.is_balanced


def test_excess_cashouts_report_extra_chips() -> None:
    audit = compute_chip_audit(_declare({"p1": "70", "p2": "10.01"}))

    assert audit.chips_difference == Decimal("-0.01")
    assert audit.status is AuditStatus.CHIPS_EXCESS


def test_exact_cashouts_balance_without_tolerance() -> None:
    audit = compute_chip_audit(_declare({"p1": "33.33", "p2": "46.67"}))

    assert audit.chips_difference == 0
    assert audit.status is AuditStatus.BALANCED
    assert audit.is_balanced
    assert audit.pending_cashouts == 0


def test_undeclared_players_are_counted_as_pending() -> None:
    audit = compute_chip_audit(_declare({"p1": "80"}))

    assert audit.is_balanced
    assert audit.pending_cashouts == 1


def test_unbalanced_audit_does_not_block_finish() -> None:
    state = _declare({"p1": "1"})

    finished = lifecycle.finish_game(state)

    assert compute_chip_audit(finished).status is AuditStatus.CHIPS_MISSING
    assert finished.finished
