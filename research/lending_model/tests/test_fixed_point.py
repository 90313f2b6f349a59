"""Tests for the checked fixed point layer"""
import pytest

from lending_model.src.constants import WAD, MAX_UINT256
from lending_model.src.errors import ArithmeticFailure
from lending_model.src.fixed_point import (
    checked_add,
    checked_sub,
    checked_mul,
    checked_div,
    mul_div,
    mul_div_up,
    wad_mul,
    wad_div,
    wad_min,
)


def test_checked_add_and_overflow():
    assert checked_add(2, 3) == 5
    assert checked_add(MAX_UINT256 - 1, 1) == MAX_UINT256
    with pytest.raises(ArithmeticFailure, match="overflow"):
        checked_add(MAX_UINT256, 1)


def test_checked_sub_underflow():
    assert checked_sub(5, 5) == 0
    with pytest.raises(ArithmeticFailure, match="underflow"):
        checked_sub(1, 2)


def test_checked_mul_overflow():
    assert checked_mul(2**128, 2**127) == 2**255
    with pytest.raises(ArithmeticFailure):
        checked_mul(2**128, 2**128)


def test_division_by_zero():
    for op in (
        lambda: checked_div(1, 0),
        lambda: mul_div(1, 1, 0),
        lambda: mul_div_up(1, 1, 0),
        lambda: wad_div(1, 0),
    ):
        with pytest.raises(ArithmeticFailure, match="Division by zero"):
            op()


def test_negative_operands_rejected():
    with pytest.raises(ArithmeticFailure):
        checked_add(-1, 2)
    with pytest.raises(ArithmeticFailure):
        wad_mul(WAD, -WAD)


def test_division_rounds_down():
    assert checked_div(7, 2) == 3
    assert mul_div(1, 1, 3) == 0
    assert mul_div(10, 10, 3) == 33
    assert wad_div(WAD, 3 * WAD) == 333_333_333_333_333_333


def test_mul_div_up_rounds_up_only_when_inexact():
    assert mul_div_up(1, 1, 3) == 1
    assert mul_div_up(3, 2, 3) == 2
    assert mul_div_up(10, 10, 3) == 34
    assert mul_div_up(0, 10, 3) == 0


def test_mul_div_keeps_full_precision_intermediate():
    # a * b overflows uint256 but the quotient fits
    assert mul_div(MAX_UINT256, 2, 4) == MAX_UINT256 // 2
    with pytest.raises(ArithmeticFailure):
        mul_div(MAX_UINT256, 4, 2)


def test_wad_mul_and_div():
    assert wad_mul(2 * WAD, 3 * WAD) == 6 * WAD
    assert wad_mul(WAD // 2, 15) == 7
    assert wad_div(3, 2) == 3 * WAD // 2


def test_wad_min():
    assert wad_min(3, 9) == 3
    assert wad_min(WAD, WAD - 1) == WAD - 1
