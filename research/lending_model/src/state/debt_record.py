"""Borrower debt record"""
from dataclasses import dataclass
from ..fixed_point import checked_add, checked_sub
from ..errors import InsufficientBalance

@dataclass
class BorrowerDebtRecord:
    """A borrower's share of total pool debt, in debt proportion units"""
    borrower: str
    debt_proportion: int = 0

    @property
    def is_zeroed(self) -> bool:
        return self.debt_proportion == 0

    def add_proportion(self, units: int) -> None:
        self.debt_proportion = checked_add(self.debt_proportion, units)

    def remove_proportion(self, units: int) -> None:
        if units > self.debt_proportion:
            raise InsufficientBalance(
                f"{self.borrower} holds {self.debt_proportion} debt units, cannot remove {units}"
            )
        self.debt_proportion = checked_sub(self.debt_proportion, units)
