"""Ledger validation rules for appending effort entries."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

pytestmark = pytest.mark.unit

from effortlog.domains.effort.schemas.effort_schemas import EffortEntryCreate
from effortlog.domains.effort.services.ledger import (
    InsufficientBalanceError,
    LedgerError,
    OutOfRangeError,
    ledger_balance,
    validate_entry,
)


def _entries(*scores):
    return [SimpleNamespace(score=s) for s in scores]


def _proposed(score, time_spent=None):
    return EffortEntryCreate(score=score, time_spent=time_spent)


@pytest.mark.parametrize("score", [-1000, -11, 11, 12, 1000])
def test_out_of_range_rejected_on_empty_history(score):
    with pytest.raises(OutOfRangeError) as excinfo:
        validate_entry([], _proposed(score))
    assert excinfo.value.code == "score_out_of_range"
    assert "[-10, 10]" in excinfo.value.message


@pytest.mark.parametrize("score", [-10, 0, 10])
def test_range_boundaries_accepted_with_enough_balance(score):
    assert validate_entry(_entries(10), _proposed(score)) is None


def test_out_of_range_reported_regardless_of_balance():
    with pytest.raises(OutOfRangeError):
        validate_entry(_entries(10, 10, 10), _proposed(11))


def test_range_error_takes_precedence_over_balance_error():
    # -11 is both out of range and would push an empty ledger negative.
    with pytest.raises(OutOfRangeError):
        validate_entry([], _proposed(-11))


@pytest.mark.parametrize(
    "existing,score",
    [
        ((), -1),
        ((3,), -5),
        ((5, -2), -4),
        ((10, -10), -10),
    ],
)
def test_negative_effective_balance_rejected(existing, score):
    with pytest.raises(InsufficientBalanceError) as excinfo:
        validate_entry(_entries(*existing), _proposed(score))
    assert excinfo.value.code == "insufficient_balance"
    assert excinfo.value.message == "effective balance would go negative"


@pytest.mark.parametrize(
    "existing,score",
    [
        ((), 0),
        ((), 7),
        ((3,), -3),
        ((5, -2, 3), -6),
        ((1,), 10),
    ],
)
def test_non_negative_effective_balance_accepted(existing, score):
    assert validate_entry(_entries(*existing), _proposed(score)) is None


def test_balance_uses_every_entry_supplied():
    # Twelve entries: a ten-entry window would only see 0, the full history sums to 2.
    history = _entries(*([0] * 10 + [1, 1]))
    assert ledger_balance(history) == 2
    validate_entry(history, _proposed(-2))
    with pytest.raises(InsufficientBalanceError):
        validate_entry(history, _proposed(-3))


def test_scenario_existing_total_three():
    history = _entries(1, 2)
    with pytest.raises(InsufficientBalanceError):
        validate_entry(history, _proposed(-5))
    assert validate_entry(history, _proposed(-3)) is None


def test_time_spent_is_not_a_ledger_rule():
    assert validate_entry([], SimpleNamespace(score=1, time_spent=-5)) is None


def test_validation_is_repeatable():
    history = _entries(2, 1)
    proposed = _proposed(-4)
    outcomes = []
    for _ in range(2):
        with pytest.raises(InsufficientBalanceError) as excinfo:
            validate_entry(history, proposed)
        outcomes.append(excinfo.value.code)
    assert outcomes == ["insufficient_balance", "insufficient_balance"]
    assert [e.score for e in history] == [2, 1]
    assert validate_entry(history, _proposed(-3)) is None
    assert validate_entry(history, _proposed(-3)) is None


def test_ledger_errors_are_value_errors():
    assert issubclass(OutOfRangeError, LedgerError)
    assert issubclass(InsufficientBalanceError, LedgerError)
    assert issubclass(LedgerError, ValueError)
