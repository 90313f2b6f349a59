"""Per-call execution context for pool instructions

Instructions never call the collaborators directly. They go through the
context, which journals a compensating action for every external effect so
a failed call can be unwound completely.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .collaborators import AccessControl, AssetCustody, ShareTokenLedger
from .errors import InvalidAmount
from .events import AccrualRecord, PoolRecord
from .instructions.accrue_interest import accrue_interest
from .state.pool_state import PoolState

logger = logging.getLogger(__name__)


def require_positive(amount: int, what: str = "amount") -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise InvalidAmount(f"{what} must be a positive integer, got {amount!r}")


@dataclass
class OperationContext:
    name: str
    state: PoolState
    custody: AssetCustody
    share_token: ShareTokenLedger
    access: AccessControl
    pool_account: str
    now: int
    records: List[PoolRecord] = field(default_factory=list)
    _undo: List[Callable[[], None]] = field(default_factory=list)

    # Reads

    def cash_balance(self) -> int:
        return self.custody.balance_of(self.pool_account)

    def available_cash(self) -> int:
        return self.state.available_cash(self.cash_balance())

    def total_shares(self) -> int:
        return self.share_token.total_supply()

    # Accrual

    def accrue(self) -> Optional[AccrualRecord]:
        """Bring the pool current; repeated calls at the same time are no-ops"""
        record = accrue_interest(self.state, self.cash_balance(), self.now)
        if record is not None:
            self.emit(record)
        return record

    # Journaled external effects

    def transfer_in(self, source: str, amount: int) -> None:
        self.custody.transfer_in(source, amount)
        self._undo.append(lambda: self.custody.transfer_out(source, amount))

    def transfer_out(self, dest: str, amount: int) -> None:
        self.custody.transfer_out(dest, amount)
        self._undo.append(lambda: self.custody.transfer_in(dest, amount))

    def mint_shares(self, to: str, amount: int) -> None:
        self.share_token.mint(to, amount)
        self._undo.append(lambda: self.share_token.burn(to, amount))

    def burn_shares(self, owner: str, amount: int) -> None:
        self.share_token.burn(owner, amount)
        self._undo.append(lambda: self.share_token.mint(owner, amount))

    def emit(self, record: PoolRecord) -> None:
        """Buffer a record; the pool publishes it only if the call succeeds"""
        self.records.append(record)

    def rollback(self) -> None:
        """Replay compensating actions newest first.

        A failing action is logged and the rest still run, so one refused
        compensation never masks the error that triggered the rollback.
        """
        while self._undo:
            undo = self._undo.pop()
            try:
                undo()
            except Exception:
                logger.exception(
                    "Compensating action failed while rolling back %s",
                    self.name,
                    extra={"event": "pool.compensation_failed", "operation": self.name},
                )
        self.records.clear()
