"""External collaborators consumed by the pool

The pool only talks to custody, the share token and access control through
the protocols below. The in-memory implementations back the tests and the
research simulation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Protocol, Set, runtime_checkable

from .constants import POOL_ACCOUNT
from .errors import InsufficientBalance, InvalidAmount

logger = logging.getLogger(__name__)


@runtime_checkable
class AssetCustody(Protocol):
    """Holder of the underlying asset"""

    def balance_of(self, account: str) -> int: ...

    def transfer_in(self, source: str, amount: int) -> None:
        """Pull amount from source into the pool. Must raise rather than truncate."""
        ...

    def transfer_out(self, dest: str, amount: int) -> None:
        """Push amount from the pool to dest. Must raise rather than truncate."""
        ...


@runtime_checkable
class ShareTokenLedger(Protocol):
    """Claim token ledger, the source of truth for total supply shares"""

    def mint(self, to: str, amount: int) -> None: ...

    def burn(self, owner: str, amount: int) -> None: ...

    def total_supply(self) -> int: ...

    def balance_of(self, account: str) -> int: ...


@runtime_checkable
class AccessControl(Protocol):
    def is_authorized_borrower(self, account: str) -> bool: ...

    def is_admin(self, account: str) -> bool: ...


TransferHook = Callable[[str, str, int], None]


def _require_positive(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise InvalidAmount(f"Amount must be a positive integer, got {amount!r}")


@dataclass
class InMemoryAssetCustody:
    """Per-account balances of the underlying asset.

    transfer_hook, when set, runs before each pool transfer with
    (source, dest, amount), standing in for a token callback. It also runs
    for the compensating transfers a failed operation replays on rollback.
    """

    pool_account: str = POOL_ACCOUNT
    balances: Dict[str, int] = field(default_factory=dict)
    transfer_hook: Optional[TransferHook] = None

    def fund(self, account: str, amount: int) -> None:
        """Credit an account from outside the pool (test and simulation setup)"""
        _require_positive(amount)
        self.balances[account] = self.balances.get(account, 0) + amount

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def transfer(self, source: str, dest: str, amount: int) -> None:
        _require_positive(amount)
        if self.transfer_hook is not None:
            self.transfer_hook(source, dest, amount)
        held = self.balance_of(source)
        if held < amount:
            raise InsufficientBalance(f"{source} holds {held}, cannot transfer {amount}")
        self.balances[source] = held - amount
        self.balances[dest] = self.balance_of(dest) + amount
        logger.debug(
            "Asset transfer %s -> %s: %d",
            source,
            dest,
            amount,
            extra={"event": "custody.transfer", "source": source, "dest": dest, "amount": amount},
        )

    def transfer_in(self, source: str, amount: int) -> None:
        self.transfer(source, self.pool_account, amount)

    def transfer_out(self, dest: str, amount: int) -> None:
        self.transfer(self.pool_account, dest, amount)


@dataclass
class InMemoryShareToken:
    """Supply share balances"""

    balances: Dict[str, int] = field(default_factory=dict)
    supply: int = 0

    def mint(self, to: str, amount: int) -> None:
        _require_positive(amount)
        self.balances[to] = self.balance_of(to) + amount
        self.supply += amount

    def burn(self, owner: str, amount: int) -> None:
        _require_positive(amount)
        held = self.balance_of(owner)
        if held < amount:
            raise InsufficientBalance(f"{owner} holds {held} shares, cannot burn {amount}")
        self.balances[owner] = held - amount
        self.supply -= amount

    def total_supply(self) -> int:
        return self.supply

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)


class Role(Enum):
    """Capabilities checked by the pool"""
    ADMIN = "admin"
    BORROWER = "borrower"


@dataclass
class RoleRegistry:
    """Role based access control keyed by account"""

    members: Dict[Role, Set[str]] = field(default_factory=dict)

    def grant(self, role: Role, account: str) -> None:
        self.members.setdefault(role, set()).add(account)
        logger.info(
            "Granted %s to %s",
            role.value,
            account,
            extra={"event": "access.granted", "role": role.value, "account": account},
        )

    def revoke(self, role: Role, account: str) -> None:
        self.members.get(role, set()).discard(account)
        logger.info(
            "Revoked %s from %s",
            role.value,
            account,
            extra={"event": "access.revoked", "role": role.value, "account": account},
        )

    def has_role(self, role: Role, account: str) -> bool:
        return account in self.members.get(role, set())

    def is_authorized_borrower(self, account: str) -> bool:
        return self.has_role(Role.BORROWER, account)

    def is_admin(self, account: str) -> bool:
        return self.has_role(Role.ADMIN, account)
