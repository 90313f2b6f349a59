"""Collect accrued performance fees"""
import logging
from ..operation import OperationContext
from ..events import FeesCollectedRecord
from ..errors import InsufficientLiquidity

logger = logging.getLogger(__name__)

def collect_fees(ctx: OperationContext, caller: str) -> int:
    """Pay every pending fee to the fee recipient.

    Returns:
        Native units paid out (0 when nothing is pending)
    """
    ctx.accrue()

    state = ctx.state
    fees = state.total_pending_fees
    if fees == 0:
        return 0

    cash = ctx.cash_balance()
    if fees > cash:
        raise InsufficientLiquidity(f"Pending fees {fees} exceed cash {cash}")

    recipient = state.fee_recipient
    state.total_pending_fees = 0
    ctx.transfer_out(recipient, fees)

    ctx.emit(FeesCollectedRecord(collector=caller, amount=fees, recipient=recipient))
    logger.info(
        "Collected %d in fees for %s",
        fees,
        recipient,
        extra={"event": "pool.fees_collected", "collector": caller, "amount": fees, "recipient": recipient},
    )
    return fees
