"""Kinked utilization rate curve

All rates are wad scaled. Nothing is cached: callers recompute from live
balances every time.
"""
import numpy as np
import pandas as pd

from .constants import WAD, SECONDS_PER_YEAR
from .fixed_point import (
    checked_add,
    checked_sub,
    checked_mul,
    checked_div,
    wad_mul,
    wad_div,
    wad_min,
)
from .state.rate_params import RateModelParams


def utilization_rate(available: int, borrowed: int) -> int:
    """Share of pooled assets currently lent out, in [0, WAD]"""
    if borrowed == 0:
        return 0
    if available == 0:
        return WAD

    rate = wad_div(borrowed, checked_add(available, borrowed))
    return wad_min(rate, WAD)


def borrow_rate_per_second(utilization: int, params: RateModelParams) -> int:
    """Per second borrow rate for a given utilization.

    Below the kink the annual rate climbs linearly to slope_1. Past the kink
    slope_2 is weighted by (u - U) / (1 - u), so the rate steepens towards
    full utilization and is then capped at max_borrow_rate.
    """
    if utilization >= WAD:
        return params.max_borrow_rate

    if utilization <= params.optimal_utilization:
        annual = wad_mul(wad_div(utilization, params.optimal_utilization), params.slope_1)
        return checked_div(annual, SECONDS_PER_YEAR)

    excess = wad_div(
        checked_sub(utilization, params.optimal_utilization),
        checked_sub(WAD, utilization),
    )
    annual = checked_add(params.slope_1, wad_mul(excess, params.slope_2))
    return wad_min(checked_div(annual, SECONDS_PER_YEAR), params.max_borrow_rate)


def supply_rate_per_second(utilization: int, params: RateModelParams) -> int:
    """Rate earned by lenders on total assets.

    Accrual grows debt by interest less the fee and the fee is then owed out
    of cash, so lenders keep (1 - 2 * fee) of the interest.
    """
    borrow_rate = borrow_rate_per_second(utilization, params)
    gross = wad_mul(borrow_rate, wad_min(utilization, WAD))
    return wad_mul(gross, checked_sub(WAD, checked_mul(params.performance_fee, 2)))


def annualize(rate_per_second: int) -> int:
    """Simple (non compounded) annual rate"""
    return checked_mul(rate_per_second, SECONDS_PER_YEAR)


def rate_curve(params: RateModelParams, n_points: int = 201) -> pd.DataFrame:
    """Sample the curve over [0, 1] for plotting.

    Returns:
        DataFrame with columns: utilization, borrow_apr, supply_apr (floats)
    """
    grid = np.linspace(0.0, 1.0, n_points)
    utilizations = [int(round(u * WAD)) for u in grid]

    borrow_aprs = [annualize(borrow_rate_per_second(u, params)) / WAD for u in utilizations]
    supply_aprs = [annualize(supply_rate_per_second(u, params)) / WAD for u in utilizations]

    return pd.DataFrame(
        {
            "utilization": grid,
            "borrow_apr": borrow_aprs,
            "supply_apr": supply_aprs,
        }
    )
