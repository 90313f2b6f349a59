"""Observable records emitted by the pool"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union
from .state.rate_params import RateModelParams

@dataclass(frozen=True)
class AccrualRecord:
    """Interest folded into the ledger between two checkpoints"""
    previous_timestamp: int
    current_timestamp: int
    previous_total_borrowed: int
    previous_total_fees: int
    rate_per_second: int
    elapsed_seconds: int
    interest_amount: int
    new_total_borrowed: int
    new_total_fees: int

class SupplyKind(Enum):
    ADDED = "added"
    REMOVED = "removed"

@dataclass(frozen=True)
class SupplyRecord:
    kind: SupplyKind
    account: str
    amount: int
    exchange_rate: int
    share_amount: int

@dataclass(frozen=True)
class BorrowRecord:
    account: str
    amount: int
    debt_proportion_rate: int

@dataclass(frozen=True)
class RepayRecord:
    account: str
    amount: int
    debt_proportion_rate: int

@dataclass(frozen=True)
class FeesCollectedRecord:
    collector: str
    amount: int
    recipient: str

@dataclass(frozen=True)
class RateParamsUpdatedRecord:
    caller: str
    previous: RateModelParams
    current: RateModelParams

@dataclass(frozen=True)
class FeeRecipientUpdatedRecord:
    caller: str
    previous: str
    current: str

PoolRecord = Union[
    AccrualRecord,
    SupplyRecord,
    BorrowRecord,
    RepayRecord,
    FeesCollectedRecord,
    RateParamsUpdatedRecord,
    FeeRecipientUpdatedRecord,
]

RecordListener = Callable[[PoolRecord], None]
