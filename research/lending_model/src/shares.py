"""Proportional accounting for both sides of the pool

Supply side: shares priced by the exchange rate E = total assets / shares.
Borrow side: debt proportion units priced by D = total borrowed / units.

Conversions use the exact ratio through mul_div rather than a rounded wad
rate, so rounding only ever happens once. Every rounding goes against the
caller except where noted.
"""
from .constants import WAD
from .fixed_point import checked_add, mul_div, mul_div_up, wad_div, wad_min


# Supply side

def total_assets(available: int, total_borrowed: int) -> int:
    """Value backing the supply shares: free cash plus outstanding debt"""
    return checked_add(available, total_borrowed)


def exchange_rate(assets: int, total_shares: int) -> int:
    """Underlying per share (wad). Exactly 1.0 before any share exists."""
    if total_shares == 0:
        return WAD
    return wad_div(assets, total_shares)


def shares_for_deposit(amount: int, assets: int, total_shares: int) -> int:
    """amount / E, rounded down"""
    if total_shares == 0:
        return amount
    return mul_div(amount, total_shares, assets)


def assets_for_shares(shares: int, assets: int, total_shares: int) -> int:
    """shares * E, rounded down"""
    if total_shares == 0:
        return shares
    return mul_div(shares, assets, total_shares)


# Borrow side

def debt_proportion_rate(total_borrowed: int, total_proportion: int) -> int:
    """Debt per proportion unit (wad). 1.0 when either side is empty."""
    if total_borrowed == 0 or total_proportion == 0:
        return WAD
    return wad_div(total_borrowed, total_proportion)


def debt_owed(proportion: int, total_borrowed: int, total_proportion: int) -> int:
    """proportion * D, rounded up so the pool is never short"""
    if proportion == 0 or total_proportion == 0:
        return 0
    return mul_div_up(proportion, total_borrowed, total_proportion)


def proportion_for_amount(amount: int, total_borrowed: int, total_proportion: int) -> int:
    """amount / D, rounded down"""
    if total_borrowed == 0 or total_proportion == 0:
        return amount
    return mul_div(amount, total_proportion, total_borrowed)


def proportion_for_repay(
    amount: int,
    total_borrowed: int,
    total_proportion: int,
    held: int,
) -> int:
    """Units burned by a repayment, never more than the borrower holds"""
    return wad_min(proportion_for_amount(amount, total_borrowed, total_proportion), held)
