"""Borrow: draw the underlying asset against the pool"""
import logging
from ..operation import OperationContext, require_positive
from ..events import BorrowRecord
from ..errors import InsufficientLiquidity, InvalidAmount, UnauthorizedAccess
from ..shares import debt_proportion_rate, proportion_for_amount

logger = logging.getLogger(__name__)

def borrow(ctx: OperationContext, account: str, amount: int) -> int:
    """Lend `amount` to an authorized borrower.

    Returns:
        Debt proportion units minted to the borrower
    """
    require_positive(amount)
    if not ctx.access.is_authorized_borrower(account):
        raise UnauthorizedAccess(f"{account} is not an authorized borrower")

    ctx.accrue()

    available = ctx.available_cash()
    if amount > available:
        raise InsufficientLiquidity(f"Borrow {amount} exceeds available cash {available}")

    state = ctx.state
    rate = debt_proportion_rate(state.total_borrowed, state.total_debt_proportion)
    units = proportion_for_amount(amount, state.total_borrowed, state.total_debt_proportion)
    if units == 0:
        raise InvalidAmount(f"Borrow of {amount} is worth less than one debt unit")

    state.add_debt(account, units, amount)
    ctx.transfer_out(account, amount)

    ctx.emit(BorrowRecord(account=account, amount=amount, debt_proportion_rate=rate))
    logger.info(
        "%s borrowed %d (%d units)",
        account,
        amount,
        units,
        extra={"event": "pool.borrowed", "account": account, "amount": amount, "units": units},
    )
    return units
