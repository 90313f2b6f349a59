"""Withdraw: redeem supply shares for the underlying asset"""
import logging
from ..operation import OperationContext, require_positive
from ..events import SupplyKind, SupplyRecord
from ..errors import InsufficientBalance, InsufficientLiquidity, InvalidAmount
from ..shares import total_assets, exchange_rate, assets_for_shares

logger = logging.getLogger(__name__)

def withdraw(ctx: OperationContext, account: str, shares: int) -> int:
    """Burn `shares` and pay out their value at the current exchange rate.

    Returns:
        Native units paid to `account`
    """
    require_positive(shares, "shares")
    ctx.accrue()

    held = ctx.share_token.balance_of(account)
    if held < shares:
        raise InsufficientBalance(f"{account} holds {held} shares, cannot redeem {shares}")

    available = ctx.available_cash()
    assets = total_assets(available, ctx.state.total_borrowed)
    total_shares = ctx.total_shares()
    rate = exchange_rate(assets, total_shares)
    amount = assets_for_shares(shares, assets, total_shares)
    if amount == 0:
        raise InvalidAmount(f"{shares} shares are worth nothing at rate {rate}")
    if amount > available:
        raise InsufficientLiquidity(f"Payout {amount} exceeds available cash {available}")

    # Shares leave before the asset does
    ctx.burn_shares(account, shares)
    ctx.transfer_out(account, amount)

    ctx.emit(SupplyRecord(
        kind=SupplyKind.REMOVED,
        account=account,
        amount=amount,
        exchange_rate=rate,
        share_amount=shares,
    ))
    logger.info(
        "%s redeemed %d shares for %d",
        account,
        shares,
        amount,
        extra={"event": "pool.withdrawn", "account": account, "amount": amount, "shares": shares},
    )
    return amount
