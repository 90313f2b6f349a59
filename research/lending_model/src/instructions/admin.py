"""Admin instructions: rate curve and fee recipient"""
import logging
from ..operation import OperationContext
from ..events import FeeRecipientUpdatedRecord, RateParamsUpdatedRecord
from ..errors import InvalidParameter, UnauthorizedAccess
from ..state.rate_params import RateModelParams

logger = logging.getLogger(__name__)

def _require_admin(ctx: OperationContext, caller: str) -> None:
    if not ctx.access.is_admin(caller):
        raise UnauthorizedAccess(f"{caller} is not an admin")

def set_rate_params(ctx: OperationContext, caller: str, params: RateModelParams) -> None:
    """Install a new rate curve. Interest up to now accrues under the old one."""
    _require_admin(ctx, caller)
    if not isinstance(params, RateModelParams):
        raise InvalidParameter(f"Expected RateModelParams, got {type(params).__name__}")

    ctx.accrue()

    previous = ctx.state.rate_params
    ctx.state.rate_params = params
    ctx.emit(RateParamsUpdatedRecord(caller=caller, previous=previous, current=params))
    logger.info(
        "Rate params updated by %s",
        caller,
        extra={"event": "pool.rate_params_updated", "caller": caller},
    )

def set_fee_recipient(ctx: OperationContext, caller: str, recipient: str) -> None:
    _require_admin(ctx, caller)
    if not recipient:
        raise InvalidParameter("Fee recipient cannot be empty")

    # Fees accrued so far stay pending and go to whoever is recipient at collection
    ctx.accrue()

    previous = ctx.state.fee_recipient
    ctx.state.fee_recipient = recipient
    ctx.emit(FeeRecipientUpdatedRecord(caller=caller, previous=previous, current=recipient))
    logger.info(
        "Fee recipient changed from %s to %s",
        previous,
        recipient,
        extra={"event": "pool.fee_recipient_updated", "caller": caller},
    )
