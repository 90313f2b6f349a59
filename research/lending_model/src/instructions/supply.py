"""Supply: deposit the underlying asset for supply shares"""
import logging
from ..operation import OperationContext, require_positive
from ..events import SupplyKind, SupplyRecord
from ..errors import InvalidAmount
from ..shares import total_assets, exchange_rate, shares_for_deposit

logger = logging.getLogger(__name__)

def supply(ctx: OperationContext, account: str, amount: int) -> int:
    """Deposit `amount` native units and mint shares at the current exchange rate.

    Returns:
        Shares minted to `account`
    """
    require_positive(amount)
    ctx.accrue()

    # Price before the deposit lands in custody
    assets = total_assets(ctx.available_cash(), ctx.state.total_borrowed)
    total_shares = ctx.total_shares()
    rate = exchange_rate(assets, total_shares)
    shares = shares_for_deposit(amount, assets, total_shares)
    if shares == 0:
        raise InvalidAmount(f"Deposit of {amount} is worth less than one share")

    ctx.transfer_in(account, amount)
    ctx.mint_shares(account, shares)

    ctx.emit(SupplyRecord(
        kind=SupplyKind.ADDED,
        account=account,
        amount=amount,
        exchange_rate=rate,
        share_amount=shares,
    ))
    logger.info(
        "%s supplied %d for %d shares",
        account,
        amount,
        shares,
        extra={"event": "pool.supplied", "account": account, "amount": amount, "shares": shares},
    )
    return shares
