"""Interest accrual: advance the pool from its last checkpoint to now"""
import logging
from typing import Optional
from ..state.pool_state import PoolState
from ..events import AccrualRecord
from ..rate_model import utilization_rate, borrow_rate_per_second
from ..fixed_point import (
    checked_add,
    checked_sub,
    checked_mul,
    mul_div,
    wad_mul,
)
from ..constants import WAD

logger = logging.getLogger(__name__)

def compute_interest(rate_per_second: int, elapsed: int, total_borrowed: int) -> int:
    """Simple interest over one checkpoint interval, in native units.

    Compounding comes from folding this into total_borrowed at every
    checkpoint.
    """
    if rate_per_second == 0 or elapsed == 0 or total_borrowed == 0:
        return 0
    return mul_div(checked_mul(rate_per_second, elapsed), total_borrowed, WAD)

def accrue_interest(
    state: PoolState,
    cash_balance: int,
    now: int
) -> Optional[AccrualRecord]:
    """Fold interest accrued since the last checkpoint into the ledger.

    Returns None when the pool is already current at `now`. Mutates `state`
    in place; callers own rollback on failure.
    """
    previous_timestamp = state.last_accrual_timestamp
    if now == previous_timestamp:
        return None

    # A clock running backwards underflows here
    elapsed = checked_sub(now, previous_timestamp)

    available = state.available_cash(cash_balance)
    utilization = utilization_rate(available, state.total_borrowed)
    rate = borrow_rate_per_second(utilization, state.rate_params)

    interest = compute_interest(rate, elapsed, state.total_borrowed)
    fee = wad_mul(interest, state.rate_params.performance_fee)
    principal_interest = checked_sub(interest, fee)

    previous_total_borrowed = state.total_borrowed
    previous_total_fees = state.total_pending_fees

    new_total_borrowed = checked_add(state.total_borrowed, principal_interest)
    new_total_fees = checked_add(state.total_pending_fees, fee)

    # Commit only once every step has succeeded
    state.total_borrowed = new_total_borrowed
    state.total_pending_fees = new_total_fees
    state.last_accrual_timestamp = now

    record = AccrualRecord(
        previous_timestamp=previous_timestamp,
        current_timestamp=now,
        previous_total_borrowed=previous_total_borrowed,
        previous_total_fees=previous_total_fees,
        rate_per_second=rate,
        elapsed_seconds=elapsed,
        interest_amount=interest,
        new_total_borrowed=new_total_borrowed,
        new_total_fees=new_total_fees,
    )
    logger.debug(
        "Accrued %d interest over %ds at %d/s",
        interest,
        elapsed,
        rate,
        extra={"event": "pool.accrued", "interest": interest, "fee": fee, "elapsed": elapsed},
    )
    return record

def preview_accrual(state: PoolState, cash_balance: int, now: int) -> PoolState:
    """Return a copy of `state` accrued to `now`, leaving `state` untouched"""
    preview = state.snapshot()
    accrue_interest(preview, cash_balance, now)
    return preview
