"""Tests for interest accrual"""
import pytest

from lending_model.src.constants import WAD
from lending_model.src.errors import ArithmeticFailure
from lending_model.src.instructions.accrue_interest import (
    compute_interest,
    accrue_interest,
    preview_accrual,
)
from lending_model.src.state.pool_state import PoolState
from lending_model.src.state.rate_params import RateModelParams

UNIT = 10**6
DAY = 86_400


def make_state(params, total_borrowed=0, pending_fees=0, timestamp=0) -> PoolState:
    return PoolState(
        rate_params=params,
        last_accrual_timestamp=timestamp,
        fee_recipient="treasury",
        total_borrowed=total_borrowed,
        total_pending_fees=pending_fees,
        total_debt_proportion=total_borrowed,
    )


def test_compute_interest_one_day_at_half_utilization():
    assert compute_interest(3_523_310_220, DAY, 100 * UNIT) == 30_441


def test_compute_interest_zero_factors():
    assert compute_interest(0, DAY, 100 * UNIT) == 0
    assert compute_interest(3_523_310_220, 0, 100 * UNIT) == 0
    assert compute_interest(3_523_310_220, DAY, 0) == 0


def test_same_timestamp_is_noop(rate_params):
    state = make_state(rate_params, total_borrowed=50 * UNIT, timestamp=100)
    before = state.snapshot()

    assert accrue_interest(state, 50 * UNIT, 100) is None
    assert state == before


def test_one_day_at_half_utilization(rate_params):
    state = make_state(rate_params, total_borrowed=50 * UNIT)

    record = accrue_interest(state, 50 * UNIT, DAY)

    assert record.rate_per_second == 3_523_310_220
    assert record.elapsed_seconds == DAY
    assert record.interest_amount == 15_220
    assert record.previous_total_borrowed == 50 * UNIT
    assert record.new_total_borrowed == 50 * UNIT + 15_220 - 1_522
    assert record.new_total_fees == 1_522
    assert state.total_borrowed == 50_013_698
    assert state.total_pending_fees == 1_522
    assert state.last_accrual_timestamp == DAY


def test_fee_split():
    params = RateModelParams(max_borrow_rate=10**16, performance_fee=WAD // 10)
    # no cash at all: fully utilized, so the rate is max_borrow_rate
    state = make_state(params, total_borrowed=1_000)

    record = accrue_interest(state, 0, 1)

    assert record.interest_amount == 10
    assert state.total_borrowed == 1_009
    assert state.total_pending_fees == 1


def test_fees_accumulate_across_checkpoints():
    params = RateModelParams(max_borrow_rate=10**16, performance_fee=WAD // 10)
    state = make_state(params, total_borrowed=1_000, pending_fees=5)

    accrue_interest(state, 0, 1)

    assert state.total_pending_fees == 6


def test_empty_pool_only_moves_checkpoint(rate_params):
    state = make_state(rate_params)

    record = accrue_interest(state, 10 * UNIT, DAY)

    assert record.interest_amount == 0
    assert state.total_borrowed == 0
    assert state.total_pending_fees == 0
    assert state.last_accrual_timestamp == DAY


def test_backwards_clock_fails_without_mutation(rate_params):
    state = make_state(rate_params, total_borrowed=50 * UNIT, timestamp=DAY)
    before = state.snapshot()

    with pytest.raises(ArithmeticFailure):
        accrue_interest(state, 50 * UNIT, DAY - 1)
    assert state == before


def test_fees_above_cash_clamp_available(rate_params):
    state = make_state(rate_params, total_borrowed=10 * UNIT, pending_fees=20 * UNIT)

    assert state.available_cash(5 * UNIT) == 0
    record = accrue_interest(state, 5 * UNIT, 1)
    assert record.rate_per_second == rate_params.max_borrow_rate


def test_split_interval_close_to_single_interval(rate_params):
    single = make_state(rate_params, total_borrowed=50 * UNIT)
    split = make_state(rate_params, total_borrowed=50 * UNIT)

    accrue_interest(single, 50 * UNIT, DAY)
    accrue_interest(split, 50 * UNIT, DAY // 2)
    accrue_interest(split, 50 * UNIT, DAY)

    assert abs(single.total_borrowed - split.total_borrowed) <= 5
    assert abs(single.total_pending_fees - split.total_pending_fees) <= 5


def test_preview_leaves_state_untouched(rate_params):
    state = make_state(rate_params, total_borrowed=50 * UNIT)
    before = state.snapshot()

    preview = preview_accrual(state, 50 * UNIT, DAY)

    assert state == before
    assert preview.total_borrowed == 50_013_698
    assert preview.last_accrual_timestamp == DAY
