"""Repay: return borrowed funds and burn debt proportion"""
import logging
from ..operation import OperationContext, require_positive
from ..events import RepayRecord
from ..errors import InvalidAmount
from ..shares import debt_owed, debt_proportion_rate, proportion_for_repay

logger = logging.getLogger(__name__)

def repay(ctx: OperationContext, account: str, amount: int) -> int:
    """Repay up to `amount` of the borrower's debt.

    An amount at or above the debt owed settles it in full and pulls exactly
    the amount owed.

    Returns:
        Native units actually pulled from `account`
    """
    require_positive(amount)
    ctx.accrue()

    state = ctx.state
    held = state.debt_proportion_of(account)
    owed = debt_owed(held, state.total_borrowed, state.total_debt_proportion)
    if owed == 0:
        raise InvalidAmount(f"{account} has no outstanding debt")

    rate = debt_proportion_rate(state.total_borrowed, state.total_debt_proportion)
    if amount >= owed:
        units = held
        amount = owed
    else:
        units = proportion_for_repay(amount, state.total_borrowed, state.total_debt_proportion, held)

    state.remove_debt(account, units, amount)
    ctx.transfer_in(account, amount)

    ctx.emit(RepayRecord(account=account, amount=amount, debt_proportion_rate=rate))
    logger.info(
        "%s repaid %d (%d units)",
        account,
        amount,
        units,
        extra={"event": "pool.repaid", "account": account, "amount": amount, "units": units},
    )
    return amount
