"""Single asset lending pool

LendingPool owns the PoolState and is the only entry point that mutates it.
Every mutating call runs inside one operation: reentrancy guard held, state
snapshotted, accrual first, records published only on success. A failure at
any step unwinds collaborator effects and restores the snapshot.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from .collaborators import AccessControl, AssetCustody, ShareTokenLedger
from .config import PoolConfig
from .constants import POOL_ACCOUNT
from .events import AccrualRecord, PoolRecord, RecordListener
from .guard import ReentrancyGuard
from .instructions import admin
from .instructions.accrue_interest import preview_accrual
from .instructions.borrow import borrow as borrow_instruction
from .instructions.collect_fees import collect_fees as collect_fees_instruction
from .instructions.repay import repay as repay_instruction
from .instructions.supply import supply as supply_instruction
from .instructions.withdraw import withdraw as withdraw_instruction
from .operation import OperationContext
from .rate_model import (
    borrow_rate_per_second,
    supply_rate_per_second,
    utilization_rate,
)
from .shares import (
    assets_for_shares,
    debt_owed,
    debt_proportion_rate,
    exchange_rate,
    total_assets,
)
from .state.pool_state import PoolState
from .state.rate_params import RateModelParams

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def system_clock() -> int:
    return int(time.time())


class LendingPool:
    def __init__(
        self,
        custody: AssetCustody,
        share_token: ShareTokenLedger,
        access: AccessControl,
        rate_params: Optional[RateModelParams] = None,
        fee_recipient: str = "treasury",
        clock: Clock = system_clock,
        pool_account: str = POOL_ACCOUNT,
    ):
        self.custody = custody
        self.share_token = share_token
        self.access = access
        self.pool_account = pool_account
        self._clock = clock
        self._guard = ReentrancyGuard()
        self._listeners: List[RecordListener] = []
        self.records: List[PoolRecord] = []
        self.state = PoolState(
            rate_params=rate_params or RateModelParams(),
            last_accrual_timestamp=clock(),
            fee_recipient=fee_recipient,
        )

    @classmethod
    def from_config(
        cls,
        config: PoolConfig,
        custody: AssetCustody,
        share_token: ShareTokenLedger,
        access: AccessControl,
        clock: Clock = system_clock,
        pool_account: str = POOL_ACCOUNT,
    ) -> "LendingPool":
        return cls(
            custody,
            share_token,
            access,
            rate_params=config.rate_params,
            fee_recipient=config.fee_recipient,
            clock=clock,
            pool_account=pool_account,
        )

    def subscribe(self, listener: RecordListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    @contextmanager
    def _operation(self, name: str) -> Iterator[OperationContext]:
        with self._guard:
            snapshot = self.state.snapshot()
            ctx = OperationContext(
                name=name,
                state=self.state,
                custody=self.custody,
                share_token=self.share_token,
                access=self.access,
                pool_account=self.pool_account,
                now=self._clock(),
            )
            try:
                yield ctx
            except Exception as exc:
                try:
                    ctx.rollback()
                finally:
                    self.state.restore(snapshot)
                logger.warning(
                    "%s rolled back: %s",
                    name,
                    exc,
                    extra={"event": "pool.rolled_back", "operation": name, "error": type(exc).__name__},
                )
                raise
        self._publish(ctx.records)

    def _publish(self, records: List[PoolRecord]) -> None:
        """Log every record of a committed operation, then notify listeners.

        The operation has already committed, so a failing listener is logged
        and never reaches the caller.
        """
        self.records.extend(records)
        for record in records:
            for listener in self._listeners:
                try:
                    listener(record)
                except Exception:
                    logger.exception(
                        "Listener %r failed on %s",
                        listener,
                        type(record).__name__,
                        extra={"event": "pool.listener_failed", "record": type(record).__name__},
                    )

    def accrue(self) -> Optional[AccrualRecord]:
        """Fold interest up to now into the ledger"""
        with self._operation("accrue") as ctx:
            return ctx.accrue()

    def supply(self, account: str, amount: int) -> int:
        with self._operation("supply") as ctx:
            return supply_instruction(ctx, account, amount)

    def withdraw(self, account: str, shares: int) -> int:
        with self._operation("withdraw") as ctx:
            return withdraw_instruction(ctx, account, shares)

    def borrow(self, account: str, amount: int) -> int:
        with self._operation("borrow") as ctx:
            return borrow_instruction(ctx, account, amount)

    def repay(self, account: str, amount: int) -> int:
        with self._operation("repay") as ctx:
            return repay_instruction(ctx, account, amount)

    def collect_fees(self, caller: str) -> int:
        with self._operation("collect_fees") as ctx:
            return collect_fees_instruction(ctx, caller)

    def set_rate_params(self, caller: str, params: RateModelParams) -> None:
        with self._operation("set_rate_params") as ctx:
            admin.set_rate_params(ctx, caller, params)

    def set_fee_recipient(self, caller: str, recipient: str) -> None:
        with self._operation("set_fee_recipient") as ctx:
            admin.set_fee_recipient(ctx, caller, recipient)

    # ------------------------------------------------------------------
    # Views, computed on an accrued copy of the state
    # ------------------------------------------------------------------

    def _cash(self) -> int:
        return self.custody.balance_of(self.pool_account)

    def current_state(self) -> PoolState:
        """Copy of the state as it would be after accruing to now"""
        return preview_accrual(self.state, self._cash(), self._clock())

    def available_liquidity(self) -> int:
        return self.current_state().available_cash(self._cash())

    def total_assets(self) -> int:
        state = self.current_state()
        return total_assets(state.available_cash(self._cash()), state.total_borrowed)

    def pending_fees(self) -> int:
        return self.current_state().total_pending_fees

    def total_borrowed(self) -> int:
        return self.current_state().total_borrowed

    def utilization(self) -> int:
        state = self.current_state()
        return utilization_rate(state.available_cash(self._cash()), state.total_borrowed)

    def borrow_rate_per_second(self) -> int:
        return borrow_rate_per_second(self.utilization(), self.state.rate_params)

    def supply_rate_per_second(self) -> int:
        return supply_rate_per_second(self.utilization(), self.state.rate_params)

    def exchange_rate(self) -> int:
        return exchange_rate(self.total_assets(), self.share_token.total_supply())

    def debt_proportion_rate(self) -> int:
        state = self.current_state()
        return debt_proportion_rate(state.total_borrowed, state.total_debt_proportion)

    def debt_of(self, borrower: str) -> int:
        """Outstanding debt, rounded up"""
        state = self.current_state()
        return debt_owed(
            state.debt_proportion_of(borrower),
            state.total_borrowed,
            state.total_debt_proportion,
        )

    def balance_of_underlying(self, account: str) -> int:
        """What the account's shares would redeem for right now"""
        return assets_for_shares(
            self.share_token.balance_of(account),
            self.total_assets(),
            self.share_token.total_supply(),
        )
