"""Shared fixtures for the lending pool tests"""
import pytest

from lending_model.src.collaborators import (
    InMemoryAssetCustody,
    InMemoryShareToken,
    Role,
    RoleRegistry,
)
from lending_model.src.constants import WAD
from lending_model.src.pool import LendingPool
from lending_model.src.state.rate_params import RateModelParams

UNIT = 10**6  # 6 decimal underlying
START_TIME = 1_700_000_000
DAY = 86_400

LENDER = "alice"
BORROWER = "bob"
ADMIN = "admin"
TREASURY = "treasury"


class ManualClock:
    """Clock the tests move by hand"""

    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def rate_params() -> RateModelParams:
    return RateModelParams(
        optimal_utilization=WAD * 90 // 100,
        slope_1=WAD * 20 // 100,
        slope_2=WAD * 60 // 100,
        performance_fee=WAD * 10 // 100,
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def custody() -> InMemoryAssetCustody:
    custody = InMemoryAssetCustody()
    custody.fund(LENDER, 1_000_000 * UNIT)
    custody.fund(BORROWER, 1_000_000 * UNIT)
    return custody


@pytest.fixture
def share_token() -> InMemoryShareToken:
    return InMemoryShareToken()


@pytest.fixture
def roles() -> RoleRegistry:
    roles = RoleRegistry()
    roles.grant(Role.BORROWER, BORROWER)
    roles.grant(Role.ADMIN, ADMIN)
    return roles


@pytest.fixture
def pool(custody, share_token, roles, rate_params, clock) -> LendingPool:
    return LendingPool(
        custody,
        share_token,
        roles,
        rate_params=rate_params,
        fee_recipient=TREASURY,
        clock=clock,
    )


@pytest.fixture
def funded_pool(pool, clock) -> LendingPool:
    """100 units supplied, 50 borrowed: utilization 50%"""
    pool.supply(LENDER, 100 * UNIT)
    pool.borrow(BORROWER, 50 * UNIT)
    return pool
