"""Pool state management"""
import copy
from dataclasses import dataclass, field
from typing import Dict
from .debt_record import BorrowerDebtRecord
from .rate_params import RateModelParams
from ..fixed_point import checked_add, checked_sub

@dataclass
class PoolState:
    """Global ledger of a single asset lending pool.

    Cash and the supply share total are not stored here: they are read from
    the custody and share token collaborators on every use.
    """
    rate_params: RateModelParams
    last_accrual_timestamp: int
    fee_recipient: str
    total_borrowed: int = 0       # native units, principal + folded interest
    total_pending_fees: int = 0   # native units owed to the fee recipient
    total_debt_proportion: int = 0
    debt_records: Dict[str, BorrowerDebtRecord] = field(default_factory=dict)

    def available_cash(self, cash_balance: int) -> int:
        """Cash not earmarked for fees, clamped at zero.

        Fees can exceed cash through rounding drift, which must not underflow.
        """
        if cash_balance <= self.total_pending_fees:
            return 0
        return cash_balance - self.total_pending_fees

    def debt_record(self, borrower: str) -> BorrowerDebtRecord:
        """Return the borrower's record, creating it on first use"""
        record = self.debt_records.get(borrower)
        if record is None:
            record = BorrowerDebtRecord(borrower=borrower)
            self.debt_records[borrower] = record
        return record

    def debt_proportion_of(self, borrower: str) -> int:
        record = self.debt_records.get(borrower)
        return record.debt_proportion if record is not None else 0

    def add_debt(self, borrower: str, units: int, amount: int) -> None:
        """Book a new borrow against both the borrower and the pool totals"""
        self.debt_record(borrower).add_proportion(units)
        self.total_debt_proportion = checked_add(self.total_debt_proportion, units)
        self.total_borrowed = checked_add(self.total_borrowed, amount)

    def remove_debt(self, borrower: str, units: int, amount: int) -> None:
        """Book a repayment against both the borrower and the pool totals"""
        self.debt_record(borrower).remove_proportion(units)
        self.total_debt_proportion = checked_sub(self.total_debt_proportion, units)
        self.total_borrowed = checked_sub(self.total_borrowed, amount)

    def snapshot(self) -> "PoolState":
        return copy.deepcopy(self)

    def restore(self, snapshot: "PoolState") -> None:
        """Roll every field back to a snapshot taken earlier"""
        restored = copy.deepcopy(snapshot)
        self.__dict__.update(restored.__dict__)
